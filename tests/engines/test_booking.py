"""
Tests for the booking state machines.

Covers:
- Creation from a validated slot
- Terminal states reject further transitions
- Derived overdue status
- Advisory stats
- Payroll run lifecycle
"""

from datetime import date, time

import pytest

from clevio_engines.availability import AvailabilityCalendar
from clevio_engines.booking import BookingStateMachine, PayrollRunStateMachine
from clevio_kernel.domain.availability import BlackoutWindow, SlotCheck
from clevio_kernel.domain.booking import (
    AdvisorySession,
    FeeBreakdown,
    PayrollRun,
    PayrollRunStatus,
    SessionStatus,
)
from clevio_kernel.domain.clock import DeterministicClock
from clevio_kernel.domain.values import Money
from clevio_kernel.exceptions import InvalidTransitionError, SlotConflictError


def _session(on: date, at: time | None = time(10, 0), status=SessionStatus.SCHEDULED):
    return AdvisorySession(
        client_id="c-1",
        session_type="quarterly_review",
        scheduled_date=on,
        scheduled_time=at,
        duration_minutes=60,
        status=status,
    )


class TestCreate:
    def test_creates_scheduled_session(self, clock):
        machine = BookingStateMachine(clock)
        check = AvailabilityCalendar(clock).validate_slot(date(2025, 3, 10), time(10, 0), 60, [])

        session = machine.create("c-1", "tax_strategy", check, 60, advisor_name="Advisor")

        assert session.status == SessionStatus.SCHEDULED
        assert session.scheduled_date == date(2025, 3, 10)
        assert session.scheduled_time == time(10, 0)
        assert session.advisor_name == "Advisor"
        assert session.session_id

    def test_conflicting_check_rejected(self, clock):
        window = BlackoutWindow.full_day(date(2025, 3, 10), "Closed")
        check = SlotCheck(date(2025, 3, 10), time(10, 0), 60, conflict=window)

        with pytest.raises(SlotConflictError):
            BookingStateMachine(clock).create("c-1", "tax_strategy", check, 60)

    def test_overdue_cannot_be_stored(self):
        with pytest.raises(ValueError):
            _session(date(2025, 3, 10), status=SessionStatus.OVERDUE)


class TestTransitions:
    """scheduled -> completed | cancelled; both terminal."""

    def setup_method(self):
        self.machine = BookingStateMachine(DeterministicClock())

    def test_complete(self):
        session = _session(date(2025, 3, 10))

        completed = self.machine.complete(session)

        assert completed.status == SessionStatus.COMPLETED
        assert completed.session_id == session.session_id
        assert session.status == SessionStatus.SCHEDULED

    def test_cancel(self):
        assert self.machine.cancel(_session(date(2025, 3, 10))).status == SessionStatus.CANCELLED

    @pytest.mark.parametrize("terminal", [SessionStatus.COMPLETED, SessionStatus.CANCELLED])
    @pytest.mark.parametrize("action", ["complete", "cancel"])
    def test_terminal_states_reject_transitions(self, terminal, action):
        session = _session(date(2025, 3, 10), status=terminal)

        with pytest.raises(InvalidTransitionError) as exc_info:
            getattr(self.machine, action)(session)

        assert exc_info.value.from_state == terminal.value
        assert exc_info.value.action == action

    def test_available_actions(self):
        assert set(self.machine.available_actions(_session(date(2025, 3, 10)))) == {
            "complete",
            "cancel",
        }
        cancelled = _session(date(2025, 3, 10), status=SessionStatus.CANCELLED)
        assert self.machine.available_actions(cancelled) == ()


class TestDerivedStatus:
    """Overdue is computed on read from the clock."""

    def test_past_scheduled_session_is_overdue(self, clock):
        machine = BookingStateMachine(clock)
        session = _session(date(2025, 2, 28))

        assert machine.derived_status(session) == SessionStatus.OVERDUE
        assert machine.derived_status(session) == SessionStatus.OVERDUE
        assert session.status == SessionStatus.SCHEDULED

    def test_future_session_is_scheduled(self, clock):
        assert BookingStateMachine(clock).derived_status(
            _session(date(2025, 3, 10))
        ) == SessionStatus.SCHEDULED

    def test_earlier_today_is_overdue(self, clock):
        """Clock reads 09:00; an 08:00 session today has passed."""
        machine = BookingStateMachine(clock)

        assert machine.derived_status(_session(date(2025, 3, 3), time(8, 0))) == SessionStatus.OVERDUE
        assert machine.derived_status(_session(date(2025, 3, 3), time(11, 0))) == SessionStatus.SCHEDULED

    def test_full_day_booking_due_at_end_of_day(self, clock):
        machine = BookingStateMachine(clock)
        session = _session(date(2025, 3, 3), at=None)

        assert machine.derived_status(session) == SessionStatus.SCHEDULED

        clock.advance(days=1)

        assert machine.derived_status(session) == SessionStatus.OVERDUE

    def test_completed_never_overdue(self, clock):
        session = _session(date(2025, 1, 1), status=SessionStatus.COMPLETED)

        assert BookingStateMachine(clock).derived_status(session) == SessionStatus.COMPLETED

    def test_advisory_stats(self, clock):
        sessions = [
            _session(date(2025, 2, 1)),
            _session(date(2025, 3, 20)),
            _session(date(2025, 3, 21)),
            _session(date(2025, 2, 2), status=SessionStatus.COMPLETED),
            _session(date(2025, 2, 3), status=SessionStatus.CANCELLED),
        ]

        stats = BookingStateMachine(clock).advisory_stats(sessions)

        assert stats.total == 5
        assert stats.upcoming == 3
        assert stats.completed == 1
        assert stats.overdue == 1


class TestPayrollRunLifecycle:
    def setup_method(self):
        self.machine = PayrollRunStateMachine()
        self.run = PayrollRun(
            client_id="c-1",
            run_date=date(2025, 3, 21),
            gross_amount=Money.of("75000"),
            fees=FeeBreakdown(per_tier={}, total=Money.zero()),
        )

    def test_complete_then_cancel_rejected(self):
        completed = self.machine.complete(self.run)

        assert completed.status == PayrollRunStatus.COMPLETED
        with pytest.raises(InvalidTransitionError):
            self.machine.cancel(completed)

    def test_cancel(self):
        assert self.machine.cancel(self.run).status == PayrollRunStatus.CANCELLED
