"""
Module: clevio_engines.compliance
Responsibility:
    Lifecycle of compliance issues (open -> acknowledged -> resolved),
    severity escalation, and the derived ``days_open`` figure.

Architecture position:
    Engines -- pure state machine over frozen ComplianceIssue snapshots.
    Reads "today" from the injected Clock; never persists.

Invariants enforced:
    - Moves follow ``ISSUE_TRANSITIONS``; ``resolved`` is terminal.
    - Escalation strictly increases severity.
    - ``days_open`` is computed on every read and floored at zero.

Failure modes:
    - InvalidTransitionError for acknowledging a non-open issue, resolving a
      resolved one, or escalating a resolved one.
    - InvalidEscalationError when the new severity is not strictly higher.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from clevio_kernel.domain.clock import Clock
from clevio_kernel.domain.compliance import (
    ISSUE_TRANSITIONS,
    ComplianceIssue,
    IssueCategory,
    IssueStatus,
    Severity,
)
from clevio_kernel.domain.events import IssueEscalated
from clevio_kernel.exceptions import (
    InvalidEscalationError,
    InvalidTransitionError,
    RecordNotFoundError,
)
from clevio_kernel.logging_config import get_logger

logger = get_logger("engines.compliance")


@dataclass(frozen=True)
class EscalationResult:
    issue: ComplianceIssue
    event: IssueEscalated


@dataclass(frozen=True)
class ComplianceSummary:
    """Figures shown on the admin compliance page."""

    open: int
    acknowledged: int
    critical_unresolved: int
    average_days_open: int


class ComplianceIssueTracker:
    """Issue lifecycle and escalation for the admin console."""

    def __init__(self, clock: Clock):
        self._clock = clock

    def create(
        self,
        client_id: str,
        category: IssueCategory,
        severity: Severity,
        description: str = "",
        detected_on: date | None = None,
    ) -> ComplianceIssue:
        issue = ComplianceIssue(
            client_id=client_id,
            category=category,
            severity=severity,
            detected_on=detected_on or self._clock.today(),
            description=description,
        )
        logger.info(
            "issue_created",
            extra={
                "issue_id": issue.issue_id,
                "client_id": client_id,
                "category": issue.category.value,
                "severity": issue.severity.value,
            },
        )
        return issue

    def _move(self, issue: ComplianceIssue, target: IssueStatus, action: str) -> ComplianceIssue:
        if target not in ISSUE_TRANSITIONS[issue.status]:
            raise InvalidTransitionError("compliance_issue", issue.status.value, action)
        logger.info(
            "issue_transition",
            extra={
                "issue_id": issue.issue_id,
                "from_state": issue.status.value,
                "to_state": target.value,
            },
        )
        return issue.with_status(target)

    def acknowledge(self, issue: ComplianceIssue) -> ComplianceIssue:
        return self._move(issue, IssueStatus.ACKNOWLEDGED, "acknowledge")

    def resolve(self, issue: ComplianceIssue) -> ComplianceIssue:
        return self._move(issue, IssueStatus.RESOLVED, "resolve")

    def escalate(self, issue: ComplianceIssue, new_severity: Severity) -> EscalationResult:
        """Raise the issue's severity and build the matching event.

        Status is left unchanged.

        Raises:
            InvalidTransitionError: if the issue is already resolved.
            InvalidEscalationError: if ``new_severity`` is not strictly
                above the current severity.
        """
        new_severity = Severity(new_severity)
        if issue.is_resolved:
            raise InvalidTransitionError("compliance_issue", issue.status.value, "escalate")
        if not new_severity > issue.severity:
            raise InvalidEscalationError(
                issue.issue_id, issue.severity.value, new_severity.value
            )

        escalated = issue.with_severity(new_severity)
        event = IssueEscalated(
            occurred_at=self._clock.now(),
            issue_id=issue.issue_id,
            client_id=issue.client_id,
            previous_severity=issue.severity,
            new_severity=new_severity,
        )
        logger.warning(
            "issue_escalated",
            extra={
                "issue_id": issue.issue_id,
                "client_id": issue.client_id,
                "previous_severity": issue.severity.value,
                "new_severity": new_severity.value,
            },
        )
        return EscalationResult(issue=escalated, event=event)

    def days_open(self, issue: ComplianceIssue) -> int:
        """Whole days since detection; never negative."""
        return max(0, (self._clock.today() - issue.detected_on).days)

    @staticmethod
    def unresolved(issues: Iterable[ComplianceIssue]) -> list[ComplianceIssue]:
        return [i for i in issues if not i.is_resolved]

    @staticmethod
    def find(issues: Iterable[ComplianceIssue], issue_id: str) -> ComplianceIssue:
        for issue in issues:
            if issue.issue_id == issue_id:
                return issue
        raise RecordNotFoundError("ComplianceIssue", issue_id)

    def summarize(self, issues: Iterable[ComplianceIssue]) -> ComplianceSummary:
        """Open/acknowledged/critical counts and average age of unresolved issues."""
        pending = self.unresolved(issues)
        if pending:
            mean = Decimal(sum(self.days_open(i) for i in pending)) / len(pending)
            average = int(mean.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        else:
            average = 0
        return ComplianceSummary(
            open=sum(1 for i in pending if i.status == IssueStatus.OPEN),
            acknowledged=sum(1 for i in pending if i.status == IssueStatus.ACKNOWLEDGED),
            critical_unresolved=sum(1 for i in pending if i.severity == Severity.CRITICAL),
            average_days_open=average,
        )
