"""
Volunteer endpoints
===================

POST  /api/v1/volunteers                              -- onboard a user as volunteer
GET   /api/v1/volunteers/nearby                       -- dispatchable volunteers near a point
GET   /api/v1/volunteers/{volunteer_id}               -- profile
PATCH /api/v1/volunteers/{volunteer_id}               -- partial profile update
GET   /api/v1/volunteers/{volunteer_id}/nearby-issues -- open issues in service radius
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from reliefnet.api.dependencies import get_db
from reliefnet.api.middleware import limiter
from reliefnet.api.schemas import (
    IssueResponse,
    NearbyIssueResponse,
    NearbyVolunteerResponse,
    VolunteerOnboardRequest,
    VolunteerResponse,
    VolunteerUpdateRequest,
)
from reliefnet.config import settings
from reliefnet.domain.dispatch import ProximitySearch
from reliefnet.domain.enums import UserRole, VolunteerRank
from reliefnet.domain.geo import Coordinate, format_distance
from reliefnet.infrastructure.repositories import (
    IssueRepository,
    UserRepository,
    VolunteerRepository,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/volunteers", tags=["volunteers"])


async def _require_volunteer(db: AsyncSession, volunteer_id: int):
    volunteer = await VolunteerRepository(db).get_by_id(volunteer_id)
    if not volunteer:
        raise HTTPException(status_code=404, detail="Volunteer profile not found")
    return volunteer


@router.post(
    "",
    status_code=201,
    response_model=VolunteerResponse,
    summary="Register a user as a volunteer",
    description="New volunteers start unverified and are not matched to alerts "
    "until an admin verifies them.",
)
@limiter.limit(settings.rate_limit)
async def onboard_volunteer(
    request: Request,
    body: VolunteerOnboardRequest,
    db: AsyncSession = Depends(get_db),
):
    user = await UserRepository(db).get_by_id(body.user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    repo = VolunteerRepository(db)
    if await repo.get_by_user_id(body.user_id):
        raise HTTPException(
            status_code=400, detail="You are already registered as a volunteer"
        )

    volunteer = await repo.create_profile(
        user_id=body.user_id,
        display_name=body.display_name,
        phone=body.phone,
        age=body.age,
        latitude=body.latitude,
        longitude=body.longitude,
        district=body.district,
        address=body.address,
        bio=body.bio,
        specializations=body.specializations,
        service_radius_km=body.service_radius_km
        or settings.default_service_radius_km,
        rank=VolunteerRank.BEGINNER.value,
        total_resolves=0,
        is_available=True,
        is_verified=False,
    )
    user.role = UserRole.VOLUNTEER.value
    await db.flush()

    logger.info("User %d onboarded as volunteer %d", user.id, volunteer.id)
    return volunteer


@router.get(
    "/nearby",
    response_model=list[NearbyVolunteerResponse],
    summary="Available, verified volunteers near a point, nearest first",
)
@limiter.limit(settings.rate_limit)
async def list_nearby_volunteers(
    request: Request,
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    radius_km: float = Query(20.0, gt=0, le=500),
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
):
    search = ProximitySearch(radius_km, limit, guarded=settings.guarded_bounding_box)
    matches = await search.locate(VolunteerRepository(db), Coordinate(lat, lng))
    return [
        NearbyVolunteerResponse(
            id=m.item.id,
            display_name=m.item.display_name,
            rank=m.item.rank,
            district=m.item.district,
            latitude=m.item.latitude,
            longitude=m.item.longitude,
            distance_km=round(m.distance_km, 3),
            distance_label=format_distance(m.distance_km),
        )
        for m in matches
    ]


@router.get(
    "/{volunteer_id}",
    response_model=VolunteerResponse,
    summary="Get a volunteer profile",
)
@limiter.limit(settings.rate_limit)
async def get_volunteer(
    request: Request,
    volunteer_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await _require_volunteer(db, volunteer_id)


@router.patch(
    "/{volunteer_id}",
    response_model=VolunteerResponse,
    summary="Update a volunteer profile",
)
@limiter.limit(settings.rate_limit)
async def update_volunteer(
    request: Request,
    volunteer_id: int,
    body: VolunteerUpdateRequest,
    db: AsyncSession = Depends(get_db),
):
    volunteer = await _require_volunteer(db, volunteer_id)
    updates = body.model_dump(exclude_unset=True, exclude_none=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No valid fields to update")
    return await VolunteerRepository(db).update_fields(volunteer, updates)


@router.get(
    "/{volunteer_id}/nearby-issues",
    response_model=list[NearbyIssueResponse],
    summary="Open issues within the volunteer's service radius",
)
@limiter.limit(settings.rate_limit)
async def list_issues_for_volunteer(
    request: Request,
    volunteer_id: int,
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
):
    volunteer = await _require_volunteer(db, volunteer_id)
    radius = volunteer.service_radius_km or settings.default_service_radius_km
    search = ProximitySearch(radius, limit, guarded=settings.guarded_bounding_box)
    matches = await search.locate(
        IssueRepository(db), Coordinate(volunteer.latitude, volunteer.longitude)
    )
    return [
        NearbyIssueResponse(
            **IssueResponse.model_validate(m.item).model_dump(),
            distance_km=round(m.distance_km, 3),
        )
        for m in matches
    ]
