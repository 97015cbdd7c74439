"""
clevio_services.collaborators -- Ports to the host application.

Responsibility:
    Structural protocols for everything the services need from outside the
    engine: record storage, event delivery and card charging.  The host
    application supplies concrete implementations; the SQLAlchemy
    repositories in ``clevio_services.repository`` are the reference ones.

Architecture position:
    Services layer.  Imports kernel domain types only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Protocol, runtime_checkable

from clevio_kernel.domain.availability import BlackoutWindow
from clevio_kernel.domain.booking import AdvisorySession, PayrollRun
from clevio_kernel.domain.compliance import ComplianceIssue
from clevio_kernel.domain.events import EngineEvent
from clevio_kernel.domain.values import Money


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------


@runtime_checkable
class AdvisorySessionRepository(Protocol):
    def get(self, session_id: str) -> AdvisorySession: ...

    def save(self, record: AdvisorySession) -> AdvisorySession: ...

    def list_for_client(self, client_id: str) -> list[AdvisorySession]: ...

    def list_all(self) -> list[AdvisorySession]: ...


@runtime_checkable
class PayrollRunRepository(Protocol):
    def get(self, run_id: str) -> PayrollRun: ...

    def save(self, record: PayrollRun) -> PayrollRun: ...

    def list_for_client(self, client_id: str) -> list[PayrollRun]: ...


@runtime_checkable
class ComplianceIssueRepository(Protocol):
    def get(self, issue_id: str) -> ComplianceIssue: ...

    def save(self, record: ComplianceIssue) -> ComplianceIssue: ...

    def list_for_client(self, client_id: str) -> list[ComplianceIssue]: ...

    def list_all(self) -> list[ComplianceIssue]: ...


@runtime_checkable
class BlackoutWindowRepository(Protocol):
    def save(self, record: BlackoutWindow) -> BlackoutWindow: ...

    def delete(self, window_id: str) -> None: ...

    def list_between(self, start: date, end: date) -> list[BlackoutWindow]: ...


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


@runtime_checkable
class NotificationSink(Protocol):
    def publish(self, event: EngineEvent) -> None: ...


class InMemoryNotificationSink:
    """Collects published events; used by tests and local runs."""

    def __init__(self) -> None:
        self.events: list[EngineEvent] = []

    def publish(self, event: EngineEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: str) -> list[EngineEvent]:
        return [e for e in self.events if e.event_type == event_type]


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ChargeRequest:
    client_id: str
    amount: Money
    description: str = ""
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ChargeResult:
    """Opaque outcome from the payment collaborator."""

    succeeded: bool
    reference: str | None = None
    failure_reason: str = ""


@runtime_checkable
class PaymentGateway(Protocol):
    def charge(self, request: ChargeRequest) -> ChargeResult: ...

    def refund(self, reference: str, reason: str = "") -> ChargeResult:
        """Return a previously captured charge in full."""
        ...
