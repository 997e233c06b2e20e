"""
Panic endpoints
===============

POST /api/v1/panic             -- raise a panic alert (no authentication)
GET  /api/v1/panic/{alert_id}  -- track an alert (limited, privacy-safe view)

A panic alert is stored as a ``critical`` issue of type ``panic``.  The
nearest available, verified volunteers within the panic search radius are
located and reported back.  Delivering notifications to them is not done
here.

The search box for panic alerts is the spherical-cap box
(``PANIC_GUARDED_BOUNDING_BOX``, default on).  The flat 111.32 km/degree box
falls about 0.1% short of the radius north and south of the epicenter and
would miss a responder standing on the rim.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from reliefnet.api.dependencies import get_db
from reliefnet.api.middleware import limiter
from reliefnet.api.schemas import (
    PanicCreateRequest,
    PanicCreateResponse,
    PanicStatusResponse,
    ResponderMatch,
)
from reliefnet.config import settings
from reliefnet.domain.dispatch import ProximitySearch
from reliefnet.domain.enums import IssueStatus, Severity
from reliefnet.domain.geo import Coordinate, directions_url, format_distance
from reliefnet.domain.ranking import RankedCandidate
from reliefnet.infrastructure.repositories import (
    IssueRepository,
    IssueTypeRepository,
    VolunteerRepository,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/panic", tags=["panic"])

PANIC_TYPE_CODE = "panic"
DEFAULT_PANIC_DESCRIPTION = "Emergency panic alert triggered"


def panic_search() -> ProximitySearch:
    return ProximitySearch(
        settings.panic_search_radius_km,
        settings.panic_candidate_limit,
        guarded=settings.guarded_bounding_box
        or settings.panic_guarded_bounding_box,
    )


def _responder(epicenter: Coordinate, match: RankedCandidate) -> ResponderMatch:
    v = match.item
    return ResponderMatch(
        volunteer_id=v.id,
        display_name=v.display_name,
        rank=v.rank,
        distance_km=round(match.distance_km, 3),
        distance_label=format_distance(match.distance_km),
        directions_url=directions_url(Coordinate(v.latitude, v.longitude), epicenter),
    )


@router.post(
    "",
    status_code=201,
    response_model=PanicCreateResponse,
    summary="Raise a panic alert",
)
@limiter.limit(settings.rate_limit)
async def create_panic_alert(
    request: Request,
    body: PanicCreateRequest,
    db: AsyncSession = Depends(get_db),
):
    panic_type = await IssueTypeRepository(db).get_by_code(PANIC_TYPE_CODE)
    if not panic_type:
        logger.error("Issue type %r missing; run the seed script", PANIC_TYPE_CODE)
        raise HTTPException(
            status_code=500,
            detail="System not properly configured. Please try again later.",
        )

    alert = await IssueRepository(db).create_issue(
        issue_type_id=panic_type.id,
        victim_phone=body.victim_phone,
        victim_name=body.victim_name,
        latitude=body.latitude,
        longitude=body.longitude,
        description=body.description or DEFAULT_PANIC_DESCRIPTION,
        severity=Severity.CRITICAL.value,
        status=IssueStatus.PENDING.value,
        reporter_relation="self",
    )

    epicenter = Coordinate(body.latitude, body.longitude)
    matches = await panic_search().locate(VolunteerRepository(db), epicenter)

    logger.info(
        "Panic alert %s created: %d volunteers within %.0f km",
        alert.id,
        len(matches),
        settings.panic_search_radius_km,
    )

    return PanicCreateResponse(
        alert_id=alert.id,
        status=alert.status,
        nearby_volunteers_count=len(matches),
        nearest_responders=[
            _responder(epicenter, m)
            for m in matches[: settings.panic_responders_shown]
        ],
    )


@router.get(
    "/{alert_id}",
    response_model=PanicStatusResponse,
    summary="Track a panic alert",
)
@limiter.limit(settings.rate_limit)
async def get_panic_status(
    request: Request,
    alert_id: str,
    db: AsyncSession = Depends(get_db),
):
    alert = await IssueRepository(db).get_by_id(alert_id)
    if not alert:
        raise HTTPException(status_code=404, detail="Alert not found")
    return alert
