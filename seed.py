"""
Seed script -- populates the database with reference and sample data.

Run after migrations:
    python seed.py

Creates:
  - the issue-type catalogue (``panic`` is required by the panic endpoint)
  - 8 sample users
  - 6 sample volunteers spread around Patna (mix of verified / unverified)
  - 2 sample open issues
"""

import asyncio

from sqlalchemy import text

from reliefnet.domain.enums import (
    IssueStatus,
    Severity,
    UserRole,
    VolunteerRank,
)
from reliefnet.infrastructure.database import async_session_factory, dispose_engine
from reliefnet.infrastructure.models import (
    IssueModel,
    IssueTypeModel,
    UserModel,
    VolunteerProfileModel,
)
from reliefnet.infrastructure.repositories import make_point

ISSUE_TYPES = [
    # code, name, requires_auth, default_severity
    ("panic", "Panic Alert", False, Severity.CRITICAL),
    ("medical_emergency", "Medical Emergency", True, Severity.HIGH),
    ("harassment", "Harassment", True, Severity.HIGH),
    ("accident", "Accident", True, Severity.HIGH),
    ("fire", "Fire", True, Severity.CRITICAL),
    ("flood", "Flood", True, Severity.HIGH),
    ("crime", "Crime", True, Severity.HIGH),
    ("missing_person", "Missing Person", True, Severity.HIGH),
    ("natural_disaster", "Natural Disaster", True, Severity.CRITICAL),
    ("general", "General Help", True, Severity.MEDIUM),
]

USERS = [
    {"name": "Aarav Sharma", "email": "aarav@example.com"},
    {"name": "Priya Kumari", "email": "priya@example.com"},
    {"name": "Rohan Singh", "email": "rohan@example.com"},
    {"name": "Sneha Jha", "email": "sneha@example.com"},
    {"name": "Vikram Yadav", "email": "vikram@example.com"},
    {"name": "Ananya Mishra", "email": "ananya@example.com"},
    {"name": "Karan Verma", "email": "karan@example.com", "role": UserRole.USER},
    {"name": "Admin", "email": "admin@example.com", "role": UserRole.ADMIN},
]

VOLUNTEERS = [
    # (user index, name, lat, lng, district, rank, verified)
    (0, "Aarav", 25.6000, 85.1400, "Patna", VolunteerRank.ADVANCED, True),
    (1, "Priya", 25.6120, 85.1580, "Patna", VolunteerRank.TRAINED, True),
    (2, "Rohan", 25.5700, 85.0900, "Patna", VolunteerRank.BEGINNER, True),
    (3, "Sneha", 25.6777, 85.2159, "Vaishali", VolunteerRank.EXPERT, True),
    (4, "Vikram", 25.1353, 85.4444, "Nalanda", VolunteerRank.LEADER, True),
    (5, "Ananya", 25.5950, 85.1390, "Patna", VolunteerRank.BEGINNER, False),
]


async def seed():
    async with async_session_factory() as session:
        result = await session.execute(text("SELECT count(*) FROM issue_types"))
        if result.scalar() > 0:
            print("Database already seeded. Skipping.")
            return

        # ── Issue types ───────────────────────────────────────────────
        type_models = {}
        for order, (code, name, requires_auth, severity) in enumerate(ISSUE_TYPES):
            m = IssueTypeModel(
                code=code,
                name=name,
                requires_auth=requires_auth,
                default_severity=severity.value,
                sort_order=order,
            )
            session.add(m)
            type_models[code] = m
        await session.flush()
        print(f"  Created {len(type_models)} issue types")

        # ── Users ─────────────────────────────────────────────────────
        user_models = []
        for u in USERS:
            m = UserModel(
                name=u["name"],
                email=u["email"],
                role=u.get("role", UserRole.VOLUNTEER).value,
            )
            session.add(m)
            user_models.append(m)
        await session.flush()
        print(f"  Created {len(user_models)} users")

        # ── Volunteers ────────────────────────────────────────────────
        for idx, name, lat, lng, district, rank, verified in VOLUNTEERS:
            session.add(
                VolunteerProfileModel(
                    user_id=user_models[idx].id,
                    display_name=name,
                    phone=f"+91 90000 0000{idx}",
                    age=25 + idx,
                    latitude=lat,
                    longitude=lng,
                    location=make_point(lat, lng),
                    district=district,
                    service_radius_km=15,
                    rank=rank.value,
                    specializations=["first_aid"],
                    is_available=True,
                    is_verified=verified,
                )
            )
        await session.flush()
        print(f"  Created {len(VOLUNTEERS)} volunteers")

        # ── Open issues ───────────────────────────────────────────────
        issues = [
            ("flood", 25.6200, 85.1700, Severity.HIGH, "Water entering homes"),
            ("medical_emergency", 25.5900, 85.1300, Severity.HIGH, "Elderly man collapsed"),
        ]
        for code, lat, lng, severity, title in issues:
            session.add(
                IssueModel(
                    issue_type_id=type_models[code].id,
                    reporter_user_id=user_models[6].id,
                    victim_phone="+91 90000 11111",
                    latitude=lat,
                    longitude=lng,
                    location=make_point(lat, lng),
                    district="Patna",
                    title=title,
                    severity=severity.value,
                    status=IssueStatus.PENDING.value,
                )
            )
        await session.flush()
        print(f"  Created {len(issues)} issues")

        await session.commit()
        print("\nSeed complete!")


async def main():
    print("Seeding database...")
    await seed()
    await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
