"""Unit tests for issue and assignment state transitions (State Pattern)."""

import pytest

from reliefnet.domain.entities import (
    Assignment,
    InvalidStateTransition,
    Issue,
    check_transition,
)
from reliefnet.domain.enums import (
    ISSUE_TRANSITIONS,
    AssignmentStatus,
    IssueStatus,
)


class TestIssueStateMachine:
    def test_initial_status_is_pending(self):
        assert Issue().status == IssueStatus.PENDING

    # ── Valid transitions ─────────────────────────────────────────

    @pytest.mark.parametrize(
        "start, target",
        [
            (IssueStatus.PENDING, IssueStatus.ACKNOWLEDGED),
            (IssueStatus.PENDING, IssueStatus.ASSIGNED),
            (IssueStatus.ACKNOWLEDGED, IssueStatus.ASSIGNED),
            (IssueStatus.ASSIGNED, IssueStatus.ASSIGNED),
            (IssueStatus.ASSIGNED, IssueStatus.IN_PROGRESS),
            (IssueStatus.ASSIGNED, IssueStatus.RESOLVED),
            (IssueStatus.IN_PROGRESS, IssueStatus.RESOLVED),
            (IssueStatus.IN_PROGRESS, IssueStatus.ESCALATED),
            (IssueStatus.PENDING, IssueStatus.CANCELLED),
        ],
    )
    def test_valid(self, start, target):
        issue = Issue(status=start)
        issue.transition_to(target)
        assert issue.status == target

    # ── Invalid transitions ───────────────────────────────────────

    def test_pending_to_resolved_fails(self):
        issue = Issue(status=IssueStatus.PENDING)
        with pytest.raises(InvalidStateTransition):
            issue.transition_to(IssueStatus.RESOLVED)

    def test_in_progress_cannot_take_new_volunteers(self):
        issue = Issue(status=IssueStatus.IN_PROGRESS)
        with pytest.raises(InvalidStateTransition):
            issue.transition_to(IssueStatus.ASSIGNED)

    def test_in_progress_to_cancelled_fails(self):
        """Once work has started the issue can only be resolved or escalated."""
        issue = Issue(status=IssueStatus.IN_PROGRESS)
        with pytest.raises(InvalidStateTransition):
            issue.transition_to(IssueStatus.CANCELLED)

    @pytest.mark.parametrize(
        "terminal",
        [IssueStatus.RESOLVED, IssueStatus.ESCALATED, IssueStatus.CANCELLED],
    )
    def test_terminal_states(self, terminal):
        issue = Issue(status=terminal)
        with pytest.raises(InvalidStateTransition):
            issue.transition_to(IssueStatus.PENDING)
        assert issue.status == terminal

    def test_error_message_names_both_states(self):
        with pytest.raises(InvalidStateTransition, match="from resolved to assigned"):
            check_transition(IssueStatus.RESOLVED, IssueStatus.ASSIGNED, ISSUE_TRANSITIONS)


class TestAssignmentStateMachine:
    def test_initial_status_is_assigned(self):
        assert Assignment().status == AssignmentStatus.ASSIGNED

    def test_full_field_workflow(self):
        a = Assignment(status=AssignmentStatus.ACCEPTED)
        for step in (
            AssignmentStatus.EN_ROUTE,
            AssignmentStatus.ON_SITE,
            AssignmentStatus.COMPLETED,
        ):
            a.transition_to(step)
        assert a.status == AssignmentStatus.COMPLETED

    def test_accepted_straight_to_on_site(self):
        a = Assignment(status=AssignmentStatus.ACCEPTED)
        a.transition_to(AssignmentStatus.ON_SITE)
        assert a.status == AssignmentStatus.ON_SITE

    def test_on_site_cannot_go_back_en_route(self):
        a = Assignment(status=AssignmentStatus.ON_SITE)
        with pytest.raises(InvalidStateTransition):
            a.transition_to(AssignmentStatus.EN_ROUTE)

    def test_completed_is_terminal(self):
        a = Assignment(status=AssignmentStatus.COMPLETED)
        with pytest.raises(InvalidStateTransition):
            a.transition_to(AssignmentStatus.COMPLETED)

    def test_dropped_is_terminal(self):
        a = Assignment(status=AssignmentStatus.DROPPED)
        with pytest.raises(InvalidStateTransition):
            a.transition_to(AssignmentStatus.ACCEPTED)
