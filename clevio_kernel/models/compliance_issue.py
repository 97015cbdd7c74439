"""
Module: clevio_kernel.models.compliance_issue
Responsibility: ORM persistence for compliance issues.
Architecture position: Kernel > Models.  May import from db/base.py and
    domain/ value objects.

Invariants enforced:
    - There is no days_open column; aging is derived on read from
      ``detected_on`` and the injected clock.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import CheckConstraint, Date, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from clevio_kernel.db.base import TrackedBase
from clevio_kernel.domain.compliance import (
    ComplianceIssue,
    IssueCategory,
    IssueStatus,
    Severity,
)


class ComplianceIssueModel(TrackedBase):
    """Persistent compliance issue."""

    __tablename__ = "compliance_issues"

    __table_args__ = (
        CheckConstraint(
            "status IN ('open', 'acknowledged', 'resolved')",
            name="ck_compliance_issues_status",
        ),
        CheckConstraint(
            "severity IN ('low', 'medium', 'high', 'critical')",
            name="ck_compliance_issues_severity",
        ),
        Index("ix_compliance_issues_client_status", "client_id", "status"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    client_id: Mapped[str] = mapped_column(String(64), nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    severity: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="open")
    detected_on: Mapped[date] = mapped_column(Date, nullable=False)
    description: Mapped[str] = mapped_column(String(2000), nullable=False, default="")

    def __repr__(self) -> str:
        return f"<ComplianceIssue {self.id} {self.severity} status={self.status}>"

    def to_dto(self) -> ComplianceIssue:
        return ComplianceIssue(
            issue_id=self.id,
            client_id=self.client_id,
            category=IssueCategory(self.category),
            severity=Severity(self.severity),
            status=IssueStatus(self.status),
            detected_on=self.detected_on,
            description=self.description,
        )

    @classmethod
    def from_dto(cls, dto: ComplianceIssue) -> ComplianceIssueModel:
        return cls(
            id=dto.issue_id,
            client_id=dto.client_id,
            category=dto.category.value,
            severity=dto.severity.value,
            status=dto.status.value,
            detected_on=dto.detected_on,
            description=dto.description,
        )
