"""
clevio_services.booking_service -- Advisory session booking.

Responsibility:
    Orchestrates an advisory booking end to end: eligibility gate for the
    session type's tier, duration check, slot validation against the stored
    blackout windows, record creation, persistence and the SessionBooked
    notification.  Also serves the calendar and listing views of the client
    dashboard and the admin advisory page.

Architecture position:
    Services layer.  Thin coordinator -- every rule lives in clevio_engines;
    I/O goes through the injected collaborators only.

Invariants enforced:
    - Nothing is persisted or published unless every check passed.
    - Listed statuses are derived (``overdue``) on read, never written.

Failure modes:
    - RequirementUnmetError when the client lacks the capability.
    - ValueError for an unknown session type or a duration not offered.
    - PastDateError (PastTimeError for a passed time today) /
      SlotConflictError from slot validation.
    - InvalidTransitionError from complete/cancel on a terminal session.
    - RecordNotFoundError for an unknown session id.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time

from clevio_config.schema import EngineConfig, SessionTypeDef
from clevio_engines.availability import AvailabilityCalendar
from clevio_engines.booking import AdvisoryStats, BookingStateMachine
from clevio_engines.eligibility import EligibilityEvaluator, capability_for_session_type
from clevio_kernel.domain.availability import BlackoutWindow, CalendarMonth, TimeSlot
from clevio_kernel.domain.booking import AdvisorySession, SessionStatus
from clevio_kernel.domain.client import Client
from clevio_kernel.domain.clock import Clock
from clevio_kernel.domain.events import SessionBooked
from clevio_kernel.logging_config import LogContext, get_logger
from clevio_services.collaborators import (
    AdvisorySessionRepository,
    BlackoutWindowRepository,
    NotificationSink,
)

logger = get_logger("services.booking")


@dataclass(frozen=True)
class SessionView:
    """A stored session paired with its display status."""

    session: AdvisorySession
    status: SessionStatus


class AdvisoryBookingService:
    """Books, completes and cancels advisory sessions."""

    def __init__(
        self,
        config: EngineConfig,
        clock: Clock,
        sessions: AdvisorySessionRepository,
        windows: BlackoutWindowRepository,
        sink: NotificationSink,
    ):
        self._config = config
        self._clock = clock
        self._sessions = sessions
        self._windows = windows
        self._sink = sink
        self._evaluator = EligibilityEvaluator.from_config(config)
        self._calendar = AvailabilityCalendar.from_config(clock, config)
        self._machine = BookingStateMachine(clock)

    def _session_type(self, type_id: str) -> SessionTypeDef:
        try:
            return self._config.session_type(type_id)
        except KeyError:
            raise ValueError(f"Unknown session type '{type_id}'") from None

    def book(
        self,
        client: Client,
        session_type: str,
        on_date: date,
        at_time: time | None = None,
        duration_minutes: int | None = None,
        notes: str = "",
    ) -> AdvisorySession:
        """Book a session for ``client``.

        ``duration_minutes`` defaults to the session type's default length
        and must be one of the configured durations.
        """
        type_def = self._session_type(session_type)
        duration = (
            type_def.default_duration_minutes if duration_minutes is None else duration_minutes
        )

        with LogContext.bind(client_id=client.client_id):
            self._evaluator.require(client, capability_for_session_type(type_def.tier))

            if duration not in self._config.allowed_durations:
                raise ValueError(
                    f"Duration {duration} not offered; choose one of "
                    f"{list(self._config.allowed_durations)}"
                )

            check = self._calendar.validate_slot(
                on_date,
                at_time,
                duration,
                self._windows.list_between(on_date, on_date),
            )
            session = self._machine.create(
                client.client_id,
                type_def.type_id,
                check,
                duration,
                advisor_name=self._config.advisor_name,
                notes=notes,
            )
            saved = self._sessions.save(session)
            self._sink.publish(
                SessionBooked(
                    occurred_at=self._clock.now(),
                    session_id=saved.session_id,
                    client_id=saved.client_id,
                    session_type=saved.session_type,
                    scheduled_date=saved.scheduled_date,
                    scheduled_time=saved.scheduled_time,
                    duration_minutes=saved.duration_minutes,
                )
            )
            logger.info(
                "session_booked",
                extra={
                    "session_id": saved.session_id,
                    "session_type": saved.session_type,
                    "scheduled_date": saved.scheduled_date,
                    "scheduled_time": saved.scheduled_time,
                    "duration_minutes": saved.duration_minutes,
                },
            )
            return saved

    def complete(self, session_id: str) -> AdvisorySession:
        with LogContext.bind(session_id=session_id):
            return self._sessions.save(self._machine.complete(self._sessions.get(session_id)))

    def cancel(self, session_id: str) -> AdvisorySession:
        with LogContext.bind(session_id=session_id):
            return self._sessions.save(self._machine.cancel(self._sessions.get(session_id)))

    # ------------------------------------------------------------------
    # Read views
    # ------------------------------------------------------------------

    def sessions_for(self, client_id: str) -> list[SessionView]:
        return [
            SessionView(s, self._machine.derived_status(s))
            for s in self._sessions.list_for_client(client_id)
        ]

    def all_sessions(self) -> list[SessionView]:
        return [
            SessionView(s, self._machine.derived_status(s))
            for s in self._sessions.list_all()
        ]

    def stats(self) -> AdvisoryStats:
        return self._machine.advisory_stats(self._sessions.list_all())

    def month(self, year: int, month: int, client_id: str | None = None) -> CalendarMonth:
        """Month grid with blackout windows and (optionally one client's) sessions."""
        first = date(year, month, 1)
        last = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
        windows = self._windows.list_between(first, last)
        sessions = (
            self._sessions.list_for_client(client_id)
            if client_id is not None
            else self._sessions.list_all()
        )
        return self._calendar.generate_month(year, month, windows, sessions)

    def slots(self, on_date: date) -> tuple[TimeSlot, ...]:
        return self._calendar.slots_for(on_date, self._windows.list_between(on_date, on_date))

    # ------------------------------------------------------------------
    # Admin: blackout windows
    # ------------------------------------------------------------------

    def add_blackout(self, window: BlackoutWindow) -> BlackoutWindow:
        saved = self._windows.save(window)
        logger.info(
            "blackout_added",
            extra={
                "window_id": saved.window_id,
                "on_date": saved.on_date,
                "is_full_day": saved.is_full_day,
            },
        )
        return saved

    def remove_blackout(self, window_id: str) -> None:
        self._windows.delete(window_id)
        logger.info("blackout_removed", extra={"window_id": window_id})
