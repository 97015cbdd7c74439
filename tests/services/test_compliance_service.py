"""Tests for ComplianceService over the SQLite issue repository."""

from datetime import date

import pytest

from clevio_kernel.domain.compliance import IssueCategory, IssueStatus, Severity
from clevio_kernel.exceptions import (
    InvalidEscalationError,
    InvalidTransitionError,
    RecordNotFoundError,
)
from clevio_services.compliance_service import ComplianceService


@pytest.fixture
def service(clock, issue_repo, sink):
    return ComplianceService(clock, issue_repo, sink)


@pytest.fixture
def issue(service):
    return service.raise_issue(
        "client-1",
        IssueCategory.AMEX_VERIFICATION,
        Severity.MEDIUM,
        "Amex card on file failed verification",
    )


class TestLifecycle:
    def test_raised_issue_is_open_today(self, issue, issue_repo):
        stored = issue_repo.get(issue.issue_id)

        assert stored.status == IssueStatus.OPEN
        assert stored.detected_on == date(2025, 3, 3)

    def test_acknowledge_then_resolve(self, service, issue, issue_repo):
        service.acknowledge(issue.issue_id)
        service.resolve(issue.issue_id)

        assert issue_repo.get(issue.issue_id).status == IssueStatus.RESOLVED

    def test_acknowledge_twice_rejected(self, service, issue):
        service.acknowledge(issue.issue_id)

        with pytest.raises(InvalidTransitionError):
            service.acknowledge(issue.issue_id)

    def test_unknown_issue(self, service):
        with pytest.raises(RecordNotFoundError):
            service.resolve("missing")


class TestEscalate:
    def test_persists_and_publishes(self, service, issue, issue_repo, sink):
        service.escalate(issue.issue_id, Severity.CRITICAL)

        stored = issue_repo.get(issue.issue_id)
        assert stored.severity == Severity.CRITICAL
        assert stored.status == IssueStatus.OPEN
        events = sink.of_type("issue_escalated")
        assert len(events) == 1
        assert events[0].previous_severity == Severity.MEDIUM

    def test_downgrade_rejected_without_event(self, service, issue, issue_repo, sink):
        with pytest.raises(InvalidEscalationError):
            service.escalate(issue.issue_id, Severity.LOW)

        assert issue_repo.get(issue.issue_id).severity == Severity.MEDIUM
        assert sink.events == []

    def test_resolved_issue_cannot_escalate(self, service, issue):
        service.resolve(issue.issue_id)

        with pytest.raises(InvalidTransitionError):
            service.escalate(issue.issue_id, Severity.HIGH)


class TestViews:
    def test_days_open_tracks_clock(self, service, issue, clock):
        clock.advance(days=5)

        assert service.days_open(issue.issue_id) == 5

    def test_unresolved_and_summary(self, service):
        first = service.raise_issue(
            "client-1",
            IssueCategory.EMPLOYEE_MINIMUM,
            Severity.CRITICAL,
            detected_on=date(2025, 2, 24),
        )
        service.raise_issue(
            "client-2",
            IssueCategory.CONTRACT_EXPIRY,
            Severity.LOW,
            detected_on=date(2025, 3, 1),
        )
        closed = service.raise_issue("client-1", IssueCategory.ADVISORY_OVERDUE, Severity.HIGH)
        service.resolve(closed.issue_id)
        service.acknowledge(first.issue_id)

        assert [i.issue_id for i in service.unresolved("client-1")] == [first.issue_id]

        summary = service.summary()
        assert summary.open == 1
        assert summary.acknowledged == 1
        assert summary.critical_unresolved == 1
        # (7 + 2) / 2 rounds half up
        assert summary.average_days_open == 5
