"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and exposes
domain-relevant queries only.  The ORM class a repository works on is the
``model`` class attribute.

``find_in_bounds`` is the coarse half of the proximity search: four
inclusive ``BETWEEN`` predicates on the float lat/lng columns.  Exact radius
filtering happens in ``reliefnet.domain.ranking``.
"""

from __future__ import annotations

from typing import Any, Optional

from geoalchemy2.functions import ST_MakePoint, ST_SetSRID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import (
    IssueAssignmentModel,
    IssueModel,
    IssueTypeModel,
    UserModel,
    VolunteerProfileModel,
)
from reliefnet.domain.enums import OPEN_ISSUE_STATUSES
from reliefnet.domain.geo import BoundingBox


def make_point(latitude: float, longitude: float):
    """PostGIS POINT in WGS84 (note: x = longitude, y = latitude)."""
    return ST_SetSRID(ST_MakePoint(longitude, latitude), 4326)


class UserRepository:
    model = UserModel

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: int):
        return await self.session.get(self.model, user_id)


class VolunteerRepository:
    model = VolunteerProfileModel
    point = staticmethod(make_point)

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_profile(self, *, latitude: float, longitude: float, **fields):
        volunteer = self.model(
            latitude=latitude,
            longitude=longitude,
            location=self.point(latitude, longitude),
            **fields,
        )
        self.session.add(volunteer)
        await self.session.flush()
        return volunteer

    async def get_by_id(self, volunteer_id: int):
        return await self.session.get(self.model, volunteer_id)

    async def get_by_user_id(self, user_id: int):
        result = await self.session.execute(
            select(self.model).where(self.model.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def update_fields(self, volunteer, updates: dict[str, Any]):
        for name, value in updates.items():
            setattr(volunteer, name, value)
        if "latitude" in updates or "longitude" in updates:
            volunteer.location = self.point(volunteer.latitude, volunteer.longitude)
        await self.session.flush()
        return volunteer

    async def find_in_bounds(self, box: BoundingBox, limit: int) -> list:
        """Available, verified volunteers whose home lies inside *box*."""
        m = self.model
        result = await self.session.execute(
            select(m)
            .where(
                m.is_available.is_(True),
                m.is_verified.is_(True),
                m.latitude.between(box.min_lat, box.max_lat),
                m.longitude.between(box.min_lng, box.max_lng),
            )
            .limit(limit)
        )
        return list(result.scalars().all())


class IssueTypeRepository:
    model = IssueTypeModel

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_code(self, code: str):
        result = await self.session.execute(
            select(self.model).where(
                self.model.code == code, self.model.is_active.is_(True)
            )
        )
        return result.scalar_one_or_none()


class IssueRepository:
    model = IssueModel
    point = staticmethod(make_point)

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_issue(self, *, latitude: float, longitude: float, **fields):
        issue = self.model(
            latitude=latitude,
            longitude=longitude,
            location=self.point(latitude, longitude),
            **fields,
        )
        self.session.add(issue)
        await self.session.flush()
        return issue

    async def get_by_id(self, issue_id: str):
        return await self.session.get(self.model, issue_id)

    async def find_in_bounds(self, box: BoundingBox, limit: int) -> list:
        """Open (pending / acknowledged) issues inside *box*."""
        m = self.model
        result = await self.session.execute(
            select(m)
            .where(
                m.status.in_([s.value for s in OPEN_ISSUE_STATUSES]),
                m.latitude.between(box.min_lat, box.max_lat),
                m.longitude.between(box.min_lng, box.max_lng),
            )
            .order_by(m.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())


class AssignmentRepository:
    model = IssueAssignmentModel

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **fields):
        assignment = self.model(**fields)
        self.session.add(assignment)
        await self.session.flush()
        return assignment

    async def get_for_issue(self, issue_id: str) -> list:
        result = await self.session.execute(
            select(self.model).where(self.model.issue_id == issue_id)
        )
        return list(result.scalars().all())

    async def get_for_volunteer(
        self, issue_id: str, volunteer_id: int
    ) -> Optional[Any]:
        result = await self.session.execute(
            select(self.model).where(
                self.model.issue_id == issue_id,
                self.model.volunteer_id == volunteer_id,
            )
        )
        return result.scalars().first()
