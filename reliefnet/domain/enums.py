"""Domain enumerations and state-transition rules."""

import enum


class IssueStatus(str, enum.Enum):
    PENDING = "pending"
    ACKNOWLEDGED = "acknowledged"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    ESCALATED = "escalated"
    CANCELLED = "cancelled"


# Issues volunteers can still pick up
OPEN_ISSUE_STATUSES = (IssueStatus.PENDING, IssueStatus.ACKNOWLEDGED)

# State machine: maps current status -> set of valid next statuses
ISSUE_TRANSITIONS: dict[IssueStatus, set[IssueStatus]] = {
    IssueStatus.PENDING: {
        IssueStatus.ACKNOWLEDGED,
        IssueStatus.ASSIGNED,
        IssueStatus.CANCELLED,
    },
    IssueStatus.ACKNOWLEDGED: {IssueStatus.ASSIGNED, IssueStatus.CANCELLED},
    IssueStatus.ASSIGNED: {
        IssueStatus.ASSIGNED,  # further volunteers may join
        IssueStatus.IN_PROGRESS,
        IssueStatus.RESOLVED,
        IssueStatus.CANCELLED,
    },
    IssueStatus.IN_PROGRESS: {
        IssueStatus.IN_PROGRESS,
        IssueStatus.RESOLVED,
        IssueStatus.ESCALATED,
    },
    IssueStatus.RESOLVED: set(),
    IssueStatus.ESCALATED: set(),
    IssueStatus.CANCELLED: set(),
}


class AssignmentStatus(str, enum.Enum):
    ASSIGNED = "assigned"
    ACCEPTED = "accepted"
    EN_ROUTE = "en_route"
    ON_SITE = "on_site"
    COMPLETED = "completed"
    DROPPED = "dropped"


ASSIGNMENT_TRANSITIONS: dict[AssignmentStatus, set[AssignmentStatus]] = {
    AssignmentStatus.ASSIGNED: {AssignmentStatus.ACCEPTED, AssignmentStatus.DROPPED},
    AssignmentStatus.ACCEPTED: {
        AssignmentStatus.EN_ROUTE,
        AssignmentStatus.ON_SITE,
        AssignmentStatus.COMPLETED,
        AssignmentStatus.DROPPED,
    },
    AssignmentStatus.EN_ROUTE: {
        AssignmentStatus.ON_SITE,
        AssignmentStatus.COMPLETED,
        AssignmentStatus.DROPPED,
    },
    AssignmentStatus.ON_SITE: {AssignmentStatus.COMPLETED, AssignmentStatus.DROPPED},
    AssignmentStatus.COMPLETED: set(),
    AssignmentStatus.DROPPED: set(),
}


class Severity(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# Severities that trigger a nearby-responder search on report
ALERTING_SEVERITIES = {Severity.HIGH, Severity.CRITICAL}


class VolunteerRank(str, enum.Enum):
    BEGINNER = "beginner"
    TRAINED = "trained"
    ADVANCED = "advanced"
    EXPERT = "expert"
    LEADER = "leader"


class UserRole(str, enum.Enum):
    USER = "user"
    VOLUNTEER = "volunteer"
    ADMIN = "admin"
