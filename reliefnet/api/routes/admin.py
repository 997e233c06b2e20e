"""
Admin / observability endpoints
===============================

GET   /api/v1/admin/health                      -- simple health check
PATCH /api/v1/admin/volunteers/{volunteer_id}   -- verify / re-rank a volunteer

Only verified volunteers are candidates for panic and issue alerts, so
verification here is what puts a responder on the map.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from reliefnet.api.dependencies import get_db
from reliefnet.api.middleware import limiter
from reliefnet.api.schemas import (
    HealthResponse,
    VolunteerResponse,
    VolunteerVerifyRequest,
)
from reliefnet.config import settings
from reliefnet.infrastructure.repositories import VolunteerRepository

router = APIRouter(prefix="/admin", tags=["admin"])


@router.patch(
    "/volunteers/{volunteer_id}",
    response_model=VolunteerResponse,
    summary="Verify a volunteer and/or change their rank",
)
@limiter.limit(settings.rate_limit)
async def review_volunteer(
    request: Request,
    volunteer_id: int,
    body: VolunteerVerifyRequest,
    db: AsyncSession = Depends(get_db),
):
    repo = VolunteerRepository(db)
    volunteer = await repo.get_by_id(volunteer_id)
    if not volunteer:
        raise HTTPException(status_code=404, detail="Volunteer not found")

    updates: dict = {}
    if body.is_verified is not None:
        updates["is_verified"] = body.is_verified
        updates["verified_at"] = (
            datetime.now(timezone.utc) if body.is_verified else None
        )
    if body.rank is not None:
        updates["rank"] = body.rank.value
    if not updates:
        raise HTTPException(status_code=400, detail="No updates provided")

    return await repo.update_fields(volunteer, updates)


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health():
    return HealthResponse()
