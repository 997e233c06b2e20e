"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
Docker / PostgreSQL / Redis.  PostGIS ``location`` columns are replaced by
plain String columns in mirrored test models, and each production
repository is subclassed to point at those models.

Import these helpers as ``tests.conftest`` so that every test module shares
one engine.
"""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from reliefnet.infrastructure import repositories as prod_repos
from reliefnet.infrastructure.models import _new_id


# ── Test DB (SQLite in-memory) ────────────────────────────────────────

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

test_engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=StaticPool)
TestSessionFactory = async_sessionmaker(
    test_engine, class_=AsyncSession, expire_on_commit=False
)


class TestBase(DeclarativeBase):
    pass


# Mirror the production models but without PostGIS Geometry columns
# (SQLite doesn't support them).


class TestUserModel(TestBase):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    role = Column(String(20), default="user", nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class TestVolunteerModel(TestBase):
    __tablename__ = "volunteer_profiles"
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    display_name = Column(String(120), nullable=False)
    phone = Column(String(20), nullable=False)
    age = Column(Integer, nullable=False)
    bio = Column(Text, nullable=True)
    rank = Column(String(20), default="beginner", nullable=False)
    specializations = Column(JSON, nullable=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    location = Column(String, nullable=True)  # stub for Geometry
    district = Column(String(80), nullable=False)
    address = Column(Text, nullable=True)
    service_radius_km = Column(Integer, default=10, nullable=False)
    total_resolves = Column(Integer, default=0, nullable=False)
    rating = Column(Float, default=5.0)
    is_available = Column(Boolean, default=True, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)
    verified_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now())

    __mapper_args__ = {"eager_defaults": True}


class TestIssueTypeModel(TestBase):
    __tablename__ = "issue_types"
    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(40), unique=True, nullable=False)
    name = Column(String(120), nullable=False)
    description = Column(Text, nullable=True)
    requires_auth = Column(Boolean, default=True, nullable=False)
    default_severity = Column(String(20), default="medium")
    is_active = Column(Boolean, default=True, nullable=False)
    sort_order = Column(Integer, default=0)


class TestIssueModel(TestBase):
    __tablename__ = "issues"
    id = Column(String(36), primary_key=True, default=_new_id)
    issue_type_id = Column(Integer, ForeignKey("issue_types.id"), nullable=False)
    reporter_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    victim_name = Column(String(120), nullable=True)
    victim_phone = Column(String(20), nullable=False)
    victim_age = Column(Integer, nullable=True)
    victim_gender = Column(String(20), nullable=True)
    reporter_name = Column(String(120), nullable=True)
    reporter_phone = Column(String(20), nullable=True)
    reporter_relation = Column(String(20), nullable=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    location = Column(String, nullable=True)  # stub for Geometry
    address = Column(Text, nullable=True)
    district = Column(String(80), nullable=True)
    landmark = Column(String(200), nullable=True)
    title = Column(String(200), nullable=True)
    description = Column(Text, nullable=True)
    severity = Column(String(20), default="medium", nullable=False)
    status = Column(String(20), default="pending", nullable=False)
    resolved_at = Column(DateTime, nullable=True)
    resolution_notes = Column(Text, nullable=True)
    acknowledged_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now())

    __mapper_args__ = {"eager_defaults": True}


class TestAssignmentModel(TestBase):
    __tablename__ = "issue_assignments"
    id = Column(Integer, primary_key=True, autoincrement=True)
    issue_id = Column(String(36), ForeignKey("issues.id"), nullable=False)
    volunteer_id = Column(
        Integer, ForeignKey("volunteer_profiles.id"), nullable=False
    )
    status = Column(String(20), default="assigned", nullable=False)
    equipment_used = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    assigned_at = Column(DateTime, server_default=func.now())
    accepted_at = Column(DateTime, nullable=True)
    arrived_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)

    __table_args__ = (UniqueConstraint("issue_id", "volunteer_id"),)
    __mapper_args__ = {"eager_defaults": True}


# ── Repositories bound to the test models ─────────────────────────────


def _wkt_point(latitude: float, longitude: float) -> str:
    return f"POINT({longitude} {latitude})"


class TestUserRepository(prod_repos.UserRepository):
    model = TestUserModel


class TestVolunteerRepository(prod_repos.VolunteerRepository):
    model = TestVolunteerModel
    point = staticmethod(_wkt_point)


class TestIssueTypeRepository(prod_repos.IssueTypeRepository):
    model = TestIssueTypeModel


class TestIssueRepository(prod_repos.IssueRepository):
    model = TestIssueModel
    point = staticmethod(_wkt_point)


class TestAssignmentRepository(prod_repos.AssignmentRepository):
    model = TestAssignmentModel


# Repository names each route module imports, patched to the test versions
ROUTE_REPOSITORIES = {
    "panic": ["IssueRepository", "IssueTypeRepository", "VolunteerRepository"],
    "issues": [
        "AssignmentRepository",
        "IssueRepository",
        "IssueTypeRepository",
        "VolunteerRepository",
    ],
    "volunteers": ["IssueRepository", "UserRepository", "VolunteerRepository"],
    "admin": ["VolunteerRepository"],
}

TEST_REPOSITORIES = {
    "UserRepository": TestUserRepository,
    "VolunteerRepository": TestVolunteerRepository,
    "IssueTypeRepository": TestIssueTypeRepository,
    "IssueRepository": TestIssueRepository,
    "AssignmentRepository": TestAssignmentRepository,
}


# ── Sample data ───────────────────────────────────────────────────────

# Patna city centre
EPICENTER = (25.5941, 85.1376)

# (display_name, lat, lng, available, verified)
SAMPLE_VOLUNTEERS = [
    ("Near", 25.6000, 85.1400, True, True),        # ~0.7 km
    ("Mid", 25.6777, 85.2159, True, True),         # ~12 km (Vaishali)
    ("Unverified", 25.5950, 85.1390, True, False),
    ("Busy", 25.5945, 85.1380, False, True),
    ("Far", 25.7771, 87.4753, True, True),         # ~235 km (Purnia)
]


async def seed_sample_data(session: AsyncSession) -> None:
    session.add_all(
        [
            TestIssueTypeModel(
                code="panic",
                name="Panic Alert",
                requires_auth=False,
                default_severity="critical",
            ),
            TestIssueTypeModel(
                code="general", name="General Help", default_severity="medium"
            ),
            TestIssueTypeModel(code="flood", name="Flood", default_severity="high"),
        ]
    )
    users = [
        TestUserModel(name=f"User {i}", email=f"user{i}@example.com")
        for i in range(len(SAMPLE_VOLUNTEERS) + 2)
    ]
    session.add_all(users)
    await session.flush()

    for user, (name, lat, lng, available, verified) in zip(users, SAMPLE_VOLUNTEERS):
        session.add(
            TestVolunteerModel(
                user_id=user.id,
                display_name=name,
                phone="+91 90000 00000",
                age=30,
                latitude=lat,
                longitude=lng,
                location=_wkt_point(lat, lng),
                district="Patna",
                is_available=available,
                is_verified=verified,
            )
        )
    await session.commit()


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest.fixture
def fake_redis():
    """Redis stand-in: every lock acquire succeeds unless a test says otherwise."""
    redis = AsyncMock()
    redis.set = AsyncMock(return_value=True)
    redis.eval = AsyncMock(return_value=1)
    return redis
