"""
Issue endpoints
===============

POST  /api/v1/issues                      -- report an incident
GET   /api/v1/issues/nearby               -- open issues near a point, nearest first
GET   /api/v1/issues/{issue_id}           -- issue with its assignments
POST  /api/v1/issues/{issue_id}/accept    -- volunteer takes the issue
PATCH /api/v1/issues/{issue_id}/status    -- volunteer is en route / on site
POST  /api/v1/issues/{issue_id}/resolve   -- volunteer closes the issue
"""

import logging
from datetime import datetime, timezone

import redis.asyncio as aioredis
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from reliefnet.api.dependencies import get_db, get_redis_client
from reliefnet.api.middleware import limiter
from reliefnet.api.schemas import (
    AcceptIssueRequest,
    ActionResponse,
    AssignmentResponse,
    AssignmentStatusRequest,
    IssueCreateRequest,
    IssueCreateResponse,
    IssueDetailResponse,
    IssueResponse,
    NearbyIssueResponse,
    ResolveIssueRequest,
)
from reliefnet.config import settings
from reliefnet.domain.dispatch import ProximitySearch
from reliefnet.domain.entities import InvalidStateTransition, check_transition
from reliefnet.domain.enums import (
    ALERTING_SEVERITIES,
    ASSIGNMENT_TRANSITIONS,
    ISSUE_TRANSITIONS,
    AssignmentStatus,
    IssueStatus,
    Severity,
)
from reliefnet.domain.geo import Coordinate
from reliefnet.infrastructure.locks import DistributedLock
from reliefnet.infrastructure.repositories import (
    AssignmentRepository,
    IssueRepository,
    IssueTypeRepository,
    VolunteerRepository,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/issues", tags=["issues"])

FIELD_STATUSES = (AssignmentStatus.EN_ROUTE.value, AssignmentStatus.ON_SITE.value)


def _now() -> datetime:
    return datetime.now(timezone.utc)


async def _require_volunteer(db: AsyncSession, volunteer_id: int):
    volunteer = await VolunteerRepository(db).get_by_id(volunteer_id)
    if not volunteer:
        raise HTTPException(status_code=404, detail="Volunteer profile not found")
    return volunteer


async def _require_issue(db: AsyncSession, issue_id: str):
    issue = await IssueRepository(db).get_by_id(issue_id)
    if not issue:
        raise HTTPException(status_code=404, detail="Issue not found")
    return issue


async def _require_assignment(db: AsyncSession, issue_id: str, volunteer_id: int):
    assignment = await AssignmentRepository(db).get_for_volunteer(
        issue_id, volunteer_id
    )
    if not assignment:
        raise HTTPException(
            status_code=403, detail="You are not assigned to this issue"
        )
    return assignment


def _advance(current: str, new, transitions: dict) -> None:
    """Validate a status move; 409 when the state machine forbids it."""
    try:
        check_transition(type(new)(current), new, transitions)
    except InvalidStateTransition as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc


# ── Reporting ─────────────────────────────────────────────────────────


@router.post(
    "",
    status_code=201,
    response_model=IssueCreateResponse,
    summary="Report an incident",
)
@limiter.limit(settings.rate_limit)
async def create_issue(
    request: Request,
    body: IssueCreateRequest,
    db: AsyncSession = Depends(get_db),
):
    issue_type = await IssueTypeRepository(db).get_by_code(body.issue_type_code)
    if not issue_type:
        raise HTTPException(status_code=400, detail="Invalid issue type")

    if issue_type.requires_auth and body.reporter_user_id is None:
        raise HTTPException(
            status_code=401,
            detail="Authentication required for this issue type",
        )

    severity = body.severity or Severity(
        issue_type.default_severity or Severity.MEDIUM.value
    )

    issue = await IssueRepository(db).create_issue(
        issue_type_id=issue_type.id,
        reporter_user_id=body.reporter_user_id,
        victim_phone=body.victim_phone,
        victim_name=body.victim_name,
        victim_age=body.victim_age,
        victim_gender=body.victim_gender,
        reporter_name=body.reporter_name,
        reporter_phone=body.reporter_phone,
        reporter_relation=body.reporter_relation,
        latitude=body.latitude,
        longitude=body.longitude,
        address=body.address,
        district=body.district,
        landmark=body.landmark,
        title=body.title,
        description=body.description,
        severity=severity.value,
        status=IssueStatus.PENDING.value,
    )

    nearby = 0
    if severity in ALERTING_SEVERITIES:
        search = ProximitySearch(
            settings.issue_alert_radius_km,
            settings.issue_alert_candidate_limit,
            guarded=settings.guarded_bounding_box,
        )
        matches = await search.locate(
            VolunteerRepository(db), Coordinate(body.latitude, body.longitude)
        )
        nearby = len(matches)
        logger.info(
            "Issue %s (%s) reported: %d volunteers nearby",
            issue.id,
            severity.value,
            nearby,
        )

    return IssueCreateResponse(
        issue_id=issue.id,
        status=issue.status,
        nearby_volunteers_notified=nearby,
    )


@router.get(
    "/nearby",
    response_model=list[NearbyIssueResponse],
    summary="Open issues near a point, nearest first",
)
@limiter.limit(settings.rate_limit)
async def list_nearby_issues(
    request: Request,
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    radius_km: float = Query(15.0, gt=0, le=500),
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
):
    search = ProximitySearch(radius_km, limit, guarded=settings.guarded_bounding_box)
    matches = await search.locate(IssueRepository(db), Coordinate(lat, lng))
    return [
        NearbyIssueResponse(
            **IssueResponse.model_validate(m.item).model_dump(),
            distance_km=round(m.distance_km, 3),
        )
        for m in matches
    ]


@router.get(
    "/{issue_id}",
    response_model=IssueDetailResponse,
    summary="Get an issue with its assignments",
)
@limiter.limit(settings.rate_limit)
async def get_issue(
    request: Request,
    issue_id: str,
    db: AsyncSession = Depends(get_db),
):
    issue = await _require_issue(db, issue_id)
    assignments = await AssignmentRepository(db).get_for_issue(issue_id)
    return IssueDetailResponse(
        **IssueResponse.model_validate(issue).model_dump(),
        assignments=[AssignmentResponse.model_validate(a) for a in assignments],
    )


# ── Volunteer workflow ────────────────────────────────────────────────


@router.post(
    "/{issue_id}/accept",
    response_model=ActionResponse,
    summary="Accept an issue",
    description=(
        "Creates an accepted assignment for the volunteer and moves the "
        "issue to ASSIGNED.  Concurrent accepts of the same issue are "
        "serialised with a Redis lock."
    ),
)
@limiter.limit(settings.rate_limit)
async def accept_issue(
    request: Request,
    issue_id: str,
    body: AcceptIssueRequest,
    db: AsyncSession = Depends(get_db),
    redis: aioredis.Redis = Depends(get_redis_client),
):
    volunteer = await _require_volunteer(db, body.volunteer_id)
    issue = await _require_issue(db, issue_id)

    lock = DistributedLock.for_issue(
        redis, issue_id, ttl_seconds=settings.accept_lock_ttl_seconds
    )
    if not await lock.acquire():
        logger.warning("Accept of issue %s contended; rejecting", issue_id)
        raise HTTPException(
            status_code=409,
            detail="Issue is being accepted by another volunteer, try again",
        )

    try:
        repo = AssignmentRepository(db)
        if await repo.get_for_volunteer(issue_id, volunteer.id):
            raise HTTPException(
                status_code=400, detail="You are already assigned to this issue"
            )

        _advance(issue.status, IssueStatus.ASSIGNED, ISSUE_TRANSITIONS)

        now = _now()
        assignment = await repo.create(
            issue_id=issue_id,
            volunteer_id=volunteer.id,
            status=AssignmentStatus.ACCEPTED.value,
            accepted_at=now,
        )
        issue.status = IssueStatus.ASSIGNED.value
        issue.acknowledged_at = issue.acknowledged_at or now
        # Commit while still holding the lock so the next holder sees this accept.
        await db.commit()
    finally:
        await lock.release()

    logger.info("Volunteer %d accepted issue %s", volunteer.id, issue_id)
    return ActionResponse(
        message="Issue accepted successfully",
        assignment=AssignmentResponse.model_validate(assignment),
    )


@router.patch(
    "/{issue_id}/status",
    response_model=ActionResponse,
    summary="Update field status (en_route / on_site)",
)
@limiter.limit(settings.rate_limit)
async def update_assignment_status(
    request: Request,
    issue_id: str,
    body: AssignmentStatusRequest,
    db: AsyncSession = Depends(get_db),
):
    if body.status not in FIELD_STATUSES:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid status. Must be one of: {', '.join(FIELD_STATUSES)}",
        )
    new_status = AssignmentStatus(body.status)

    volunteer = await _require_volunteer(db, body.volunteer_id)
    assignment = await _require_assignment(db, issue_id, volunteer.id)
    issue = await _require_issue(db, issue_id)

    _advance(assignment.status, new_status, ASSIGNMENT_TRANSITIONS)
    _advance(issue.status, IssueStatus.IN_PROGRESS, ISSUE_TRANSITIONS)

    assignment.status = new_status.value
    if new_status is AssignmentStatus.ON_SITE:
        assignment.arrived_at = _now()
    issue.status = IssueStatus.IN_PROGRESS.value
    await db.flush()

    return ActionResponse(
        message=f"Status updated to {new_status.value}",
        assignment=AssignmentResponse.model_validate(assignment),
    )


@router.post(
    "/{issue_id}/resolve",
    response_model=ActionResponse,
    summary="Resolve an issue",
)
@limiter.limit(settings.rate_limit)
async def resolve_issue(
    request: Request,
    issue_id: str,
    body: ResolveIssueRequest,
    db: AsyncSession = Depends(get_db),
):
    volunteer = await _require_volunteer(db, body.volunteer_id)
    assignment = await _require_assignment(db, issue_id, volunteer.id)
    issue = await _require_issue(db, issue_id)

    _advance(assignment.status, AssignmentStatus.COMPLETED, ASSIGNMENT_TRANSITIONS)
    _advance(issue.status, IssueStatus.RESOLVED, ISSUE_TRANSITIONS)

    now = _now()
    assignment.status = AssignmentStatus.COMPLETED.value
    assignment.completed_at = now
    assignment.notes = body.notes
    assignment.equipment_used = body.equipment_used

    issue.status = IssueStatus.RESOLVED.value
    issue.resolved_at = now
    issue.resolution_notes = body.notes

    volunteer.total_resolves = (volunteer.total_resolves or 0) + 1
    await db.flush()

    logger.info("Volunteer %d resolved issue %s", volunteer.id, issue_id)
    return ActionResponse(
        message="Issue resolved successfully",
        assignment=AssignmentResponse.model_validate(assignment),
    )
