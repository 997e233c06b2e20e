"""
Domain entities with business logic.

Patterns used
-------------
- **State Pattern** on ``Issue`` and ``Assignment``: enforces valid
  lifecycle transitions (see ``enums.ISSUE_TRANSITIONS`` and
  ``enums.ASSIGNMENT_TRANSITIONS``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .enums import (
    ASSIGNMENT_TRANSITIONS,
    ISSUE_TRANSITIONS,
    AssignmentStatus,
    IssueStatus,
    Severity,
)
from .geo import Coordinate


class InvalidStateTransition(Exception):
    """Raised when a status change violates the state machine."""


def check_transition(current, new, transitions: dict) -> None:
    """Raise ``InvalidStateTransition`` unless *current* -> *new* is legal."""
    allowed = transitions.get(current, set())
    if new not in allowed:
        raise InvalidStateTransition(
            f"Cannot transition from {current.value} to {new.value}"
        )


# ── Entities ──────────────────────────────────────────────────────────


@dataclass
class Issue:
    id: Optional[str] = None
    location: Coordinate = field(default_factory=lambda: Coordinate(0, 0))
    severity: Severity = Severity.MEDIUM
    status: IssueStatus = IssueStatus.PENDING
    created_at: Optional[datetime] = None

    def transition_to(self, new_status: IssueStatus) -> None:
        """Move to *new_status* if the transition is legal, else raise."""
        check_transition(self.status, new_status, ISSUE_TRANSITIONS)
        self.status = new_status


@dataclass
class Assignment:
    id: Optional[int] = None
    issue_id: Optional[str] = None
    volunteer_id: Optional[int] = None
    status: AssignmentStatus = AssignmentStatus.ASSIGNED

    def transition_to(self, new_status: AssignmentStatus) -> None:
        check_transition(self.status, new_status, ASSIGNMENT_TRANSITIONS)
        self.status = new_status

