"""
Booking record types (``clevio_kernel.domain.booking``).

Responsibility
--------------
Advisory sessions and payroll runs as immutable records, with their stored
status enums.  ``SessionStatus.OVERDUE`` exists only as a derived display
label; it is never persisted.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.

Invariants enforced
-------------------
* Stored session status is one of ``scheduled``/``completed``/``cancelled``.
* ``duration_minutes`` is positive.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, time, timedelta, tzinfo
from enum import Enum
from typing import Mapping
from uuid import uuid4

from clevio_kernel.domain.client import ServiceTier
from clevio_kernel.domain.values import Money


class SessionStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    OVERDUE = "overdue"  # derived only


STORED_SESSION_STATUSES: frozenset[SessionStatus] = frozenset({
    SessionStatus.SCHEDULED,
    SessionStatus.COMPLETED,
    SessionStatus.CANCELLED,
})


class PayrollRunStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class AdvisorySession:
    """
    A booked advisory session.

    Contract:
        Frozen.  ``scheduled_time`` of None marks a full-day booking.
    Guarantees:
        - ``status`` is a stored status, never ``OVERDUE``.
    """

    client_id: str
    session_type: str
    scheduled_date: date
    scheduled_time: time | None
    duration_minutes: int
    status: SessionStatus = SessionStatus.SCHEDULED
    session_id: str = field(default_factory=lambda: str(uuid4()))
    advisor_name: str = ""
    notes: str = ""

    def __post_init__(self) -> None:
        if self.duration_minutes <= 0:
            raise ValueError("duration_minutes must be positive")
        status = SessionStatus(self.status)
        if status not in STORED_SESSION_STATUSES:
            raise ValueError(f"'{status.value}' is a derived status and cannot be stored")
        object.__setattr__(self, "status", status)

    def starts_at(self, tz: tzinfo | None) -> datetime:
        """Scheduled start; full-day bookings are due by the end of their date."""
        if self.scheduled_time is None:
            return datetime.combine(self.scheduled_date + timedelta(days=1), time.min, tzinfo=tz)
        return datetime.combine(self.scheduled_date, self.scheduled_time, tzinfo=tz)

    def with_status(self, status: SessionStatus) -> AdvisorySession:
        return replace(self, status=status)


@dataclass(frozen=True)
class FeeBreakdown:
    """Per-tier fees and their sum-of-rounded total.

    ``total`` always equals the sum of the already-rounded ``per_tier``
    values, so the displayed breakdown adds up to the displayed total.
    """

    per_tier: Mapping[ServiceTier, Money]
    total: Money

    def fee_for(self, tier: ServiceTier) -> Money:
        return self.per_tier.get(tier, Money.zero(self.total.currency))


@dataclass(frozen=True)
class PayrollRun:
    """A scheduled payroll run for a client."""

    client_id: str
    run_date: date
    gross_amount: Money
    fees: FeeBreakdown
    status: PayrollRunStatus = PayrollRunStatus.SCHEDULED
    run_id: str = field(default_factory=lambda: str(uuid4()))
    charge_reference: str | None = None

    def with_status(self, status: PayrollRunStatus) -> PayrollRun:
        return replace(self, status=status)
