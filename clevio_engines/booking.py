"""
Module: clevio_engines.booking
Responsibility:
    Lifecycle of advisory sessions and payroll runs: creation from a
    validated slot, completion, cancellation, and the derived ``overdue``
    display status.

Architecture position:
    Engines -- pure state machine over frozen snapshots.  Interprets the
    canonical ``Workflow`` definitions from clevio_kernel.domain.workflow.
    Reads "now" from the injected Clock; never persists.

Invariants enforced:
    - Terminal states (``completed``, ``cancelled``) have no outgoing
      transitions.
    - A session can only be created from a successful ``SlotCheck``; the
      slot is not re-validated on later transitions.
    - ``overdue`` is derived on read and never written back.

Failure modes:
    - SlotConflictError from ``create`` when handed a conflicting check.
    - InvalidTransitionError for any move the workflow does not define.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from clevio_kernel.domain.availability import SlotCheck
from clevio_kernel.domain.booking import (
    AdvisorySession,
    PayrollRun,
    PayrollRunStatus,
    SessionStatus,
)
from clevio_kernel.domain.clock import Clock
from clevio_kernel.domain.workflow import (
    ADVISORY_SESSION_WORKFLOW,
    PAYROLL_RUN_WORKFLOW,
    Workflow,
)
from clevio_kernel.exceptions import InvalidTransitionError
from clevio_kernel.logging_config import get_logger

logger = get_logger("engines.booking")


def _apply(workflow: Workflow, entity_id: str, current: str, action: str) -> str:
    """Target state for ``action`` from ``current``, or raise."""
    transition = workflow.find(current, action)
    if transition is None:
        raise InvalidTransitionError(workflow.name, current, action)
    logger.info(
        "record_transition",
        extra={
            "workflow": workflow.name,
            "entity_id": entity_id,
            "from_state": current,
            "to_state": transition.to_state,
            "action": action,
        },
    )
    return transition.to_state


@dataclass(frozen=True)
class AdvisoryStats:
    """Counts shown on the admin advisory page."""

    total: int
    upcoming: int
    completed: int
    overdue: int


class BookingStateMachine:
    """State machine for advisory session bookings."""

    workflow: Workflow = ADVISORY_SESSION_WORKFLOW

    def __init__(self, clock: Clock):
        self._clock = clock

    def create(
        self,
        client_id: str,
        session_type: str,
        slot_check: SlotCheck,
        duration_minutes: int,
        advisor_name: str = "",
        notes: str = "",
    ) -> AdvisorySession:
        """New ``scheduled`` session on the checked slot.

        Raises:
            SlotConflictError: if ``slot_check`` carries a conflict.
        """
        slot_check.raise_for_conflict()
        session = AdvisorySession(
            client_id=client_id,
            session_type=session_type,
            scheduled_date=slot_check.on_date,
            scheduled_time=slot_check.at_time,
            duration_minutes=duration_minutes,
            status=SessionStatus(self.workflow.initial_state),
            advisor_name=advisor_name,
            notes=notes,
        )
        logger.info(
            "session_created",
            extra={
                "session_id": session.session_id,
                "client_id": client_id,
                "session_type": session_type,
                "scheduled_date": session.scheduled_date,
            },
        )
        return session

    def complete(self, session: AdvisorySession) -> AdvisorySession:
        target = _apply(self.workflow, session.session_id, session.status.value, "complete")
        return session.with_status(SessionStatus(target))

    def cancel(self, session: AdvisorySession) -> AdvisorySession:
        target = _apply(self.workflow, session.session_id, session.status.value, "cancel")
        return session.with_status(SessionStatus(target))

    def available_actions(self, session: AdvisorySession) -> tuple[str, ...]:
        return self.workflow.actions_from(session.status.value)

    def derived_status(self, session: AdvisorySession) -> SessionStatus:
        """Stored status, or ``overdue`` for a scheduled session already due."""
        if session.status != SessionStatus.SCHEDULED:
            return session.status
        now = self._clock.now()
        if session.starts_at(now.tzinfo) < now:
            return SessionStatus.OVERDUE
        return session.status

    def advisory_stats(self, sessions: Iterable[AdvisorySession]) -> AdvisoryStats:
        """Total, upcoming (scheduled or overdue), completed and overdue counts."""
        statuses = [self.derived_status(s) for s in sessions]
        overdue = statuses.count(SessionStatus.OVERDUE)
        return AdvisoryStats(
            total=len(statuses),
            upcoming=statuses.count(SessionStatus.SCHEDULED) + overdue,
            completed=statuses.count(SessionStatus.COMPLETED),
            overdue=overdue,
        )


class PayrollRunStateMachine:
    """State machine for scheduled payroll runs."""

    workflow: Workflow = PAYROLL_RUN_WORKFLOW

    def complete(self, run: PayrollRun) -> PayrollRun:
        target = _apply(self.workflow, run.run_id, PayrollRunStatus(run.status).value, "complete")
        return run.with_status(PayrollRunStatus(target))

    def cancel(self, run: PayrollRun) -> PayrollRun:
        target = _apply(self.workflow, run.run_id, PayrollRunStatus(run.status).value, "cancel")
        return run.with_status(PayrollRunStatus(target))
