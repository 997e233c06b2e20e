"""
SQLAlchemy ORM models  (maps to PostgreSQL + PostGIS).

Tables
------
* ``users``              -- portal accounts (role: user / volunteer / admin)
* ``volunteer_profiles`` -- responders with a home location and service radius
* ``issue_types``        -- configurable report categories (``panic`` etc.)
* ``issues``             -- incident reports and panic alerts
* ``issue_assignments``  -- volunteer <-> issue work items

Indexes
-------
* **B-Tree** on ``(latitude, longitude)`` for the bounding-box pre-filter
  (plain ``BETWEEN`` predicates on float columns).
* **GIST** on the PostGIS ``location`` columns for spatial tooling.
* **B-Tree** on status / availability flags used by the responder search.
"""

import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from geoalchemy2 import Geometry

from .database import Base
from reliefnet.domain.enums import (
    AssignmentStatus,
    IssueStatus,
    Severity,
    UserRole,
    VolunteerRank,
)


def _new_id() -> str:
    return str(uuid.uuid4())


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    role = Column(String(20), default=UserRole.USER.value, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class VolunteerProfileModel(Base):
    __tablename__ = "volunteer_profiles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)

    display_name = Column(String(120), nullable=False)
    phone = Column(String(20), nullable=False)
    age = Column(Integer, nullable=False)
    bio = Column(Text, nullable=True)
    rank = Column(String(20), default=VolunteerRank.BEGINNER.value, nullable=False)
    specializations = Column(JSON, nullable=True)

    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    location = Column(
        Geometry("POINT", srid=4326, spatial_index=False), nullable=True
    )
    district = Column(String(80), nullable=False)
    address = Column(Text, nullable=True)
    service_radius_km = Column(Integer, default=10, nullable=False)

    total_resolves = Column(Integer, default=0, nullable=False)
    rating = Column(Float, default=5.0)

    is_available = Column(Boolean, default=True, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)
    verified_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        Index("idx_volunteers_latlng", "latitude", "longitude"),
        Index("idx_volunteers_location", "location", postgresql_using="gist"),
        Index("idx_volunteers_dispatchable", "is_available", "is_verified"),
        Index("idx_volunteers_district", "district"),
    )
    __mapper_args__ = {"eager_defaults": True}


class IssueTypeModel(Base):
    __tablename__ = "issue_types"

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(40), unique=True, nullable=False)
    name = Column(String(120), nullable=False)
    description = Column(Text, nullable=True)
    requires_auth = Column(Boolean, default=True, nullable=False)
    default_severity = Column(String(20), default=Severity.MEDIUM.value)
    is_active = Column(Boolean, default=True, nullable=False)
    sort_order = Column(Integer, default=0)


class IssueModel(Base):
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
    location = Column(
        Geometry("POINT", srid=4326, spatial_index=False), nullable=True
    )
    address = Column(Text, nullable=True)
    district = Column(String(80), nullable=True)
    landmark = Column(String(200), nullable=True)

    title = Column(String(200), nullable=True)
    description = Column(Text, nullable=True)
    severity = Column(String(20), default=Severity.MEDIUM.value, nullable=False)
    status = Column(String(20), default=IssueStatus.PENDING.value, nullable=False)

    resolved_at = Column(DateTime(timezone=True), nullable=True)
    resolution_notes = Column(Text, nullable=True)
    acknowledged_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        Index("idx_issues_latlng", "latitude", "longitude"),
        Index("idx_issues_location", "location", postgresql_using="gist"),
        Index("idx_issues_status", "status"),
        Index("idx_issues_type", "issue_type_id"),
        Index("idx_issues_reporter", "reporter_user_id"),
        Index("idx_issues_created", "created_at"),
    )
    __mapper_args__ = {"eager_defaults": True}


class IssueAssignmentModel(Base):
    __tablename__ = "issue_assignments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    issue_id = Column(String(36), ForeignKey("issues.id"), nullable=False)
    volunteer_id = Column(
        Integer, ForeignKey("volunteer_profiles.id"), nullable=False
    )
    status = Column(
        String(20), default=AssignmentStatus.ASSIGNED.value, nullable=False
    )
    equipment_used = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    assigned_at = Column(DateTime(timezone=True), server_default=func.now())
    accepted_at = Column(DateTime(timezone=True), nullable=True)
    arrived_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("idx_assignments_issue", "issue_id"),
        Index("idx_assignments_volunteer", "volunteer_id"),
        UniqueConstraint(
            "issue_id", "volunteer_id", name="uq_assignments_issue_volunteer"
        ),
    )
    __mapper_args__ = {"eager_defaults": True}
