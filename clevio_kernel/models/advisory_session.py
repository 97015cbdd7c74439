"""
Module: clevio_kernel.models.advisory_session
Responsibility: ORM persistence for advisory sessions and payroll runs.
Architecture position: Kernel > Models.  May import from db/base.py and
    domain/ value objects.

Invariants enforced:
    - Only stored statuses are persisted; ``overdue`` is rejected by a
      CHECK constraint and by the domain record itself.
    - Round-trip (from_dto -> to_dto) preserves every field.
"""

from __future__ import annotations

from datetime import date, time
from decimal import Decimal

from sqlalchemy import JSON, CheckConstraint, Date, Index, Integer, String, Time
from sqlalchemy.orm import Mapped, mapped_column

from clevio_kernel.db.base import TrackedBase
from clevio_kernel.domain.booking import (
    AdvisorySession,
    FeeBreakdown,
    PayrollRun,
    PayrollRunStatus,
    SessionStatus,
)
from clevio_kernel.domain.client import ServiceTier
from clevio_kernel.domain.values import Money


class AdvisorySessionModel(TrackedBase):
    """Persistent advisory session."""

    __tablename__ = "advisory_sessions"

    __table_args__ = (
        CheckConstraint(
            "status IN ('scheduled', 'completed', 'cancelled')",
            name="ck_advisory_sessions_stored_status",
        ),
        CheckConstraint("duration_minutes > 0", name="ck_advisory_sessions_duration"),
        Index("ix_advisory_sessions_client", "client_id"),
        Index("ix_advisory_sessions_date", "scheduled_date"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    client_id: Mapped[str] = mapped_column(String(64), nullable=False)
    session_type: Mapped[str] = mapped_column(String(50), nullable=False)
    scheduled_date: Mapped[date] = mapped_column(Date, nullable=False)
    scheduled_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="scheduled")
    advisor_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    notes: Mapped[str] = mapped_column(String(2000), nullable=False, default="")

    def __repr__(self) -> str:
        return f"<AdvisorySession {self.id} {self.scheduled_date} status={self.status}>"

    def to_dto(self) -> AdvisorySession:
        """Convert ORM model to frozen domain record."""
        return AdvisorySession(
            session_id=self.id,
            client_id=self.client_id,
            session_type=self.session_type,
            scheduled_date=self.scheduled_date,
            scheduled_time=self.scheduled_time,
            duration_minutes=self.duration_minutes,
            status=SessionStatus(self.status),
            advisor_name=self.advisor_name,
            notes=self.notes,
        )

    @classmethod
    def from_dto(cls, dto: AdvisorySession) -> AdvisorySessionModel:
        """Create ORM model from domain record."""
        return cls(
            id=dto.session_id,
            client_id=dto.client_id,
            session_type=dto.session_type,
            scheduled_date=dto.scheduled_date,
            scheduled_time=dto.scheduled_time,
            duration_minutes=dto.duration_minutes,
            status=dto.status.value,
            advisor_name=dto.advisor_name,
            notes=dto.notes,
        )


class PayrollRunModel(TrackedBase):
    """Persistent payroll run with its fee breakdown."""

    __tablename__ = "payroll_runs"

    __table_args__ = (
        CheckConstraint(
            "status IN ('scheduled', 'completed', 'cancelled')",
            name="ck_payroll_runs_status",
        ),
        Index("ix_payroll_runs_client", "client_id", "run_date"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    client_id: Mapped[str] = mapped_column(String(64), nullable=False)
    run_date: Mapped[date] = mapped_column(Date, nullable=False)
    gross_amount: Mapped[Decimal] = mapped_column(nullable=False)
    fee_total: Mapped[Decimal] = mapped_column(nullable=False)
    # {"payroll": "1500.00", ...}; amounts as strings to keep Decimal exact
    fee_per_tier: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="scheduled")
    charge_reference: Mapped[str | None] = mapped_column(String(100), nullable=True)

    def __repr__(self) -> str:
        return f"<PayrollRun {self.id} {self.run_date} status={self.status}>"

    def to_dto(self) -> PayrollRun:
        fees = FeeBreakdown(
            per_tier={
                ServiceTier(tier): Money.of(amount, self.currency)
                for tier, amount in self.fee_per_tier.items()
            },
            total=Money(self.fee_total, self.currency).round(),
        )
        return PayrollRun(
            run_id=self.id,
            client_id=self.client_id,
            run_date=self.run_date,
            gross_amount=Money(self.gross_amount, self.currency).round(),
            fees=fees,
            status=PayrollRunStatus(self.status),
            charge_reference=self.charge_reference,
        )

    @classmethod
    def from_dto(cls, dto: PayrollRun) -> PayrollRunModel:
        return cls(
            id=dto.run_id,
            client_id=dto.client_id,
            run_date=dto.run_date,
            gross_amount=dto.gross_amount.amount,
            fee_total=dto.fees.total.amount,
            fee_per_tier={
                ServiceTier(tier).value: str(money.amount)
                for tier, money in dto.fees.per_tier.items()
            },
            currency=dto.gross_amount.currency,
            status=dto.status.value,
            charge_reference=dto.charge_reference,
        )
