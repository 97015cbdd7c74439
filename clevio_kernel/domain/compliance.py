"""
Compliance issue types (``clevio_kernel.domain.compliance``).

Responsibility
--------------
Compliance issues raised against a client by the admin console, with an
ordered severity scale.  ``days_open`` is deliberately absent: it is always
derived from ``detected_on`` and the injected clock by
``ComplianceIssueTracker``.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.

Invariants enforced
-------------------
* Severity order: low < medium < high < critical.
* ``ISSUE_TRANSITIONS`` defines the only valid status moves; ``resolved``
  has no outgoing edges.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from uuid import uuid4


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank


_SEVERITY_RANK: dict[Severity, int] = {
    Severity.LOW: 0,
    Severity.MEDIUM: 1,
    Severity.HIGH: 2,
    Severity.CRITICAL: 3,
}


class IssueStatus(str, Enum):
    OPEN = "open"
    ACKNOWLEDGED = "acknowledged"
    RESOLVED = "resolved"


class IssueCategory(str, Enum):
    EMPLOYEE_MINIMUM = "employee_minimum"
    AMEX_VERIFICATION = "amex_verification"
    CONTRACT_EXPIRY = "contract_expiry"
    ADVISORY_OVERDUE = "advisory_overdue"


ISSUE_TRANSITIONS: dict[IssueStatus, frozenset[IssueStatus]] = {
    IssueStatus.OPEN: frozenset({IssueStatus.ACKNOWLEDGED, IssueStatus.RESOLVED}),
    IssueStatus.ACKNOWLEDGED: frozenset({IssueStatus.RESOLVED}),
    IssueStatus.RESOLVED: frozenset(),
}


@dataclass(frozen=True)
class ComplianceIssue:
    """A compliance problem detected for a client."""

    client_id: str
    category: IssueCategory
    severity: Severity
    detected_on: date
    status: IssueStatus = IssueStatus.OPEN
    description: str = ""
    issue_id: str = field(default_factory=lambda: str(uuid4()))

    def __post_init__(self) -> None:
        object.__setattr__(self, "category", IssueCategory(self.category))
        object.__setattr__(self, "severity", Severity(self.severity))
        object.__setattr__(self, "status", IssueStatus(self.status))

    @property
    def is_resolved(self) -> bool:
        return self.status == IssueStatus.RESOLVED

    def with_status(self, status: IssueStatus) -> ComplianceIssue:
        return replace(self, status=status)

    def with_severity(self, severity: Severity) -> ComplianceIssue:
        return replace(self, severity=severity)
