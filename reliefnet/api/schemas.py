"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from reliefnet.domain.enums import Severity, VolunteerRank


# ── Requests ──────────────────────────────────────────────────────────


class PanicCreateRequest(BaseModel):
    victim_phone: str = Field(..., min_length=1, max_length=20)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    victim_name: Optional[str] = Field(None, max_length=120)
    description: Optional[str] = None


class IssueCreateRequest(BaseModel):
    issue_type_code: str = "general"
    victim_phone: str = Field(..., min_length=1, max_length=20)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    victim_name: Optional[str] = Field(None, max_length=120)
    victim_age: Optional[int] = Field(None, ge=0, le=130)
    victim_gender: Optional[str] = None
    reporter_user_id: Optional[int] = Field(
        None,
        description="Authenticated reporter; required for issue types that need auth.",
    )
    reporter_name: Optional[str] = None
    reporter_phone: Optional[str] = None
    reporter_relation: str = "self"
    address: Optional[str] = None
    district: Optional[str] = None
    landmark: Optional[str] = None
    title: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    severity: Optional[Severity] = None


class AcceptIssueRequest(BaseModel):
    volunteer_id: int


class AssignmentStatusRequest(BaseModel):
    volunteer_id: int
    status: str


class ResolveIssueRequest(BaseModel):
    volunteer_id: int
    notes: Optional[str] = None
    equipment_used: Optional[str] = None


class VolunteerOnboardRequest(BaseModel):
    user_id: int
    display_name: str = Field(..., min_length=1, max_length=120)
    phone: str = Field(..., min_length=1, max_length=20)
    age: int = Field(..., ge=18, le=100)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    district: str = Field(..., min_length=1)
    address: Optional[str] = None
    bio: Optional[str] = None
    specializations: list[str] = []
    service_radius_km: Optional[int] = Field(None, ge=1, le=200)


class VolunteerUpdateRequest(BaseModel):
    display_name: Optional[str] = Field(None, min_length=1, max_length=120)
    phone: Optional[str] = Field(None, min_length=1, max_length=20)
    age: Optional[int] = Field(None, ge=18, le=100)
    bio: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    district: Optional[str] = None
    address: Optional[str] = None
    service_radius_km: Optional[int] = Field(None, ge=1, le=200)
    specializations: Optional[list[str]] = None
    is_available: Optional[bool] = None


class VolunteerVerifyRequest(BaseModel):
    is_verified: Optional[bool] = None
    rank: Optional[VolunteerRank] = None


# ── Responses ─────────────────────────────────────────────────────────


class ResponderMatch(BaseModel):
    volunteer_id: int
    display_name: str
    rank: str
    distance_km: float
    distance_label: str
    directions_url: str


class PanicCreateResponse(BaseModel):
    success: bool = True
    alert_id: str
    message: str = "Panic alert created successfully"
    status: str
    nearby_volunteers_count: int
    nearest_responders: list[ResponderMatch] = []


class PanicStatusResponse(BaseModel):
    id: str
    status: str
    severity: str
    created_at: Optional[datetime] = None
    acknowledged_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class IssueCreateResponse(BaseModel):
    success: bool = True
    issue_id: str
    message: str = "Issue reported successfully"
    status: str
    nearby_volunteers_notified: int


class AssignmentResponse(BaseModel):
    id: int
    issue_id: str
    volunteer_id: int
    status: str
    notes: Optional[str] = None
    equipment_used: Optional[str] = None
    assigned_at: Optional[datetime] = None
    accepted_at: Optional[datetime] = None
    arrived_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class IssueResponse(BaseModel):
    id: str
    issue_type_id: int
    reporter_user_id: Optional[int] = None
    victim_name: Optional[str] = None
    victim_phone: str
    latitude: float
    longitude: float
    address: Optional[str] = None
    district: Optional[str] = None
    landmark: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    severity: str
    status: str
    resolution_notes: Optional[str] = None
    created_at: Optional[datetime] = None
    acknowledged_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class IssueDetailResponse(IssueResponse):
    assignments: list[AssignmentResponse] = []


class NearbyIssueResponse(IssueResponse):
    distance_km: float


class VolunteerResponse(BaseModel):
    id: int
    user_id: int
    display_name: str
    phone: str
    age: int
    bio: Optional[str] = None
    rank: str
    specializations: Optional[list[str]] = None
    latitude: float
    longitude: float
    district: str
    address: Optional[str] = None
    service_radius_km: int
    total_resolves: int
    is_available: bool
    is_verified: bool
    verified_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class NearbyVolunteerResponse(BaseModel):
    id: int
    display_name: str
    rank: str
    district: str
    latitude: float
    longitude: float
    distance_km: float
    distance_label: str

    model_config = {"from_attributes": True}


class ActionResponse(BaseModel):
    success: bool = True
    message: str
    assignment: Optional[AssignmentResponse] = None


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    detail: str
