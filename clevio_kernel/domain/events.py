"""
Engine events (``clevio_kernel.domain.events``).

Plain data records handed to the notification collaborator.  The engine
only builds them; delivery (email, webhook) happens elsewhere.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime, time
from typing import Any, ClassVar
from uuid import uuid4

from clevio_kernel.domain.compliance import Severity
from clevio_kernel.domain.values import Money


@dataclass(frozen=True)
class EngineEvent:
    """Base for emitted events."""

    event_type: ClassVar[str] = "engine_event"

    occurred_at: datetime
    event_id: str = field(default_factory=lambda: str(uuid4()), kw_only=True)

    def to_payload(self) -> dict[str, Any]:
        """Flat, JSON-friendly representation for the notification collaborator."""
        payload: dict[str, Any] = {"event_type": self.event_type}
        for key, value in asdict(self).items():
            if isinstance(value, (datetime, date, time)):
                value = value.isoformat()
            elif isinstance(value, Severity):
                value = value.value
            elif isinstance(value, dict) and {"amount", "currency"} <= value.keys():
                value = {"amount": str(value["amount"]), "currency": value["currency"]}
            payload[key] = value
        return payload


@dataclass(frozen=True)
class SessionBooked(EngineEvent):
    event_type: ClassVar[str] = "session_booked"

    session_id: str
    client_id: str
    session_type: str
    scheduled_date: date
    scheduled_time: time | None
    duration_minutes: int


@dataclass(frozen=True)
class PayrollScheduled(EngineEvent):
    event_type: ClassVar[str] = "payroll_scheduled"

    run_id: str
    client_id: str
    run_date: date
    gross_amount: Money
    fee_total: Money


@dataclass(frozen=True)
class IssueEscalated(EngineEvent):
    event_type: ClassVar[str] = "issue_escalated"

    issue_id: str
    client_id: str
    previous_severity: Severity
    new_severity: Severity
