"""
clevio_services.compliance_service -- Admin compliance console operations.

Responsibility:
    Id-based create / acknowledge / escalate / resolve over stored
    compliance issues, publishing IssueEscalated events, plus the summary
    figures of the admin compliance page.

Architecture position:
    Services layer.  Thin coordinator over ComplianceIssueTracker.

Failure modes:
    - RecordNotFoundError for an unknown issue id.
    - InvalidTransitionError / InvalidEscalationError from the tracker.
"""

from __future__ import annotations

from datetime import date

from clevio_engines.compliance import ComplianceIssueTracker, ComplianceSummary
from clevio_kernel.domain.clock import Clock
from clevio_kernel.domain.compliance import ComplianceIssue, IssueCategory, Severity
from clevio_kernel.logging_config import LogContext
from clevio_services.collaborators import ComplianceIssueRepository, NotificationSink


class ComplianceService:
    def __init__(
        self,
        clock: Clock,
        issues: ComplianceIssueRepository,
        sink: NotificationSink,
    ):
        self._issues = issues
        self._sink = sink
        self._tracker = ComplianceIssueTracker(clock)

    def raise_issue(
        self,
        client_id: str,
        category: IssueCategory,
        severity: Severity,
        description: str = "",
        detected_on: date | None = None,
    ) -> ComplianceIssue:
        with LogContext.bind(client_id=client_id):
            issue = self._tracker.create(client_id, category, severity, description, detected_on)
            return self._issues.save(issue)

    def acknowledge(self, issue_id: str) -> ComplianceIssue:
        with LogContext.bind(issue_id=issue_id):
            return self._issues.save(self._tracker.acknowledge(self._issues.get(issue_id)))

    def resolve(self, issue_id: str) -> ComplianceIssue:
        with LogContext.bind(issue_id=issue_id):
            return self._issues.save(self._tracker.resolve(self._issues.get(issue_id)))

    def escalate(self, issue_id: str, new_severity: Severity) -> ComplianceIssue:
        with LogContext.bind(issue_id=issue_id):
            result = self._tracker.escalate(self._issues.get(issue_id), new_severity)
            saved = self._issues.save(result.issue)
            self._sink.publish(result.event)
            return saved

    def days_open(self, issue_id: str) -> int:
        return self._tracker.days_open(self._issues.get(issue_id))

    def unresolved(self, client_id: str | None = None) -> list[ComplianceIssue]:
        issues = (
            self._issues.list_for_client(client_id)
            if client_id is not None
            else self._issues.list_all()
        )
        return self._tracker.unresolved(issues)

    def summary(self) -> ComplianceSummary:
        return self._tracker.summarize(self._issues.list_all())
