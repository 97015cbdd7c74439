"""
Module: clevio_engines.availability
Responsibility:
    Project a month of the advisory calendar with blocked days, list the
    bookable start times of a day, and validate a proposed booking slot
    against administrator-defined blackout windows.

Architecture position:
    Engines -- pure calculation layer.  The only ambient input is "now",
    read from the injected Clock.  Never creates or mutates records.

Invariants enforced:
    - Dates strictly before today, and times already passed today, are
      rejected (PastDateError / PastTimeError) before any blackout window
      is consulted.
    - A full-day window conflicts with every time on its date.
    - A partial window conflicts when start <= time <= end (inclusive).
    - A booking with no time conflicts with any window on its date.
    - Only the slot's start time is compared with partial windows; the
      duration is validated but does not widen the conflict test.

Failure modes:
    - PastDateError for dates before today; PastTimeError for a time
      earlier than now on today's date.
    - ValueError for a non-positive duration or an invalid month.
    - SlotConflictError via ``SlotCheck.raise_for_conflict()``.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import Iterable

from clevio_kernel.domain.availability import (
    BlackoutWindow,
    CalendarDay,
    CalendarMonth,
    SlotCheck,
    TimeSlot,
)
from clevio_kernel.domain.booking import AdvisorySession
from clevio_kernel.domain.clock import Clock
from clevio_kernel.exceptions import PastDateError, PastTimeError
from clevio_kernel.logging_config import get_logger
from clevio_engines.tracer import traced_engine

logger = get_logger("engines.availability")

# 09:00-17:00 every 30 minutes, lunch 12:00-13:00 excluded
DEFAULT_DAY_START = time(9, 0)
DEFAULT_DAY_END = time(17, 0)
DEFAULT_INTERVAL_MINUTES = 30
DEFAULT_EXCLUDED: tuple[tuple[time, time], ...] = ((time(12, 0), time(13, 0)),)


def _windows_on(windows: Iterable[BlackoutWindow], on_date: date) -> tuple[BlackoutWindow, ...]:
    return tuple(w for w in windows if w.on_date == on_date)


def _sunday_first_offset(first: date) -> int:
    return (first.weekday() + 1) % 7


class AvailabilityCalendar:
    """Calendar projection and slot validation for advisory bookings."""

    def __init__(
        self,
        clock: Clock,
        day_start: time = DEFAULT_DAY_START,
        day_end: time = DEFAULT_DAY_END,
        interval_minutes: int = DEFAULT_INTERVAL_MINUTES,
        excluded: tuple[tuple[time, time], ...] = DEFAULT_EXCLUDED,
    ):
        if not day_start < day_end:
            raise ValueError("day_start must be before day_end")
        if interval_minutes <= 0:
            raise ValueError("interval_minutes must be positive")
        self._clock = clock
        self._day_start = day_start
        self._day_end = day_end
        self._interval = timedelta(minutes=interval_minutes)
        self._excluded = excluded

    @classmethod
    def from_config(cls, clock: Clock, config) -> AvailabilityCalendar:
        grid = config.slot_grid
        return cls(
            clock,
            day_start=grid.day_start,
            day_end=grid.day_end,
            interval_minutes=grid.interval_minutes,
            excluded=grid.excluded,
        )

    # ------------------------------------------------------------------
    # Month projection
    # ------------------------------------------------------------------

    @traced_engine("availability_calendar", "1.0", fingerprint_fields=("year", "month"))
    def generate_month(
        self,
        year: int,
        month: int,
        blackout_windows: Iterable[BlackoutWindow],
        sessions: Iterable[AdvisorySession] = (),
    ) -> CalendarMonth:
        """Build the month grid.

        A day is blocked when a full-day window covers it; partial windows
        are listed on the day but only block the slots they cover.
        """
        if not 1 <= month <= 12:
            raise ValueError(f"month must be 1..12, got {month}")
        windows = tuple(blackout_windows)
        session_list = tuple(sessions)
        today = self._clock.today()

        days: list[CalendarDay] = []
        for day_number in range(1, calendar.monthrange(year, month)[1] + 1):
            current = date(year, month, day_number)
            on_day = _windows_on(windows, current)
            days.append(
                CalendarDay(
                    day=current,
                    is_blocked=any(w.is_full_day for w in on_day),
                    is_past=current < today,
                    is_today=current == today,
                    windows=on_day,
                    sessions_on_date=tuple(
                        s for s in session_list if s.scheduled_date == current
                    ),
                )
            )

        return CalendarMonth(
            year=year,
            month=month,
            leading_blanks=_sunday_first_offset(date(year, month, 1)),
            days=tuple(days),
        )

    # ------------------------------------------------------------------
    # Slots
    # ------------------------------------------------------------------

    def _grid(self) -> list[time]:
        starts: list[time] = []
        cursor = datetime.combine(date.min, self._day_start)
        end = datetime.combine(date.min, self._day_end)
        while cursor < end:
            t = cursor.time()
            if not any(lo <= t < hi for lo, hi in self._excluded):
                starts.append(t)
            cursor += self._interval
        return starts

    def slots_for(
        self, on_date: date, blackout_windows: Iterable[BlackoutWindow]
    ) -> tuple[TimeSlot, ...]:
        """Bookable start times on ``on_date``, each flagged blocked or free."""
        on_day = _windows_on(blackout_windows, on_date)
        slots: list[TimeSlot] = []
        for start in self._grid():
            blocker = next((w for w in on_day if w.conflicts_with(on_date, start)), None)
            slots.append(TimeSlot(start=start, is_blocked=blocker is not None, blocked_by=blocker))
        return tuple(slots)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @traced_engine(
        "availability_calendar", "1.0",
        fingerprint_fields=("on_date", "at_time", "duration_minutes"),
    )
    def validate_slot(
        self,
        on_date: date,
        at_time: time | None = None,
        duration_minutes: int | None = None,
        blackout_windows: Iterable[BlackoutWindow] = (),
    ) -> SlotCheck:
        """Check a proposed booking against today and the blackout windows.

        Raises:
            PastDateError: if ``on_date`` is strictly before today.
            PastTimeError: if ``on_date`` is today and ``at_time`` has passed.
            ValueError: if ``duration_minutes`` is not positive.

        Returns:
            SlotCheck -- ``ok`` or carrying the first conflicting window.
        """
        now = self._clock.now()
        today = now.date()
        if on_date < today:
            raise PastDateError(on_date, today)
        if on_date == today and at_time is not None and at_time < now.time():
            raise PastTimeError(on_date, at_time, now.time())
        if duration_minutes is not None and duration_minutes <= 0:
            raise ValueError("duration_minutes must be positive")

        conflict = next(
            (w for w in blackout_windows if w.conflicts_with(on_date, at_time)),
            None,
        )
        if conflict is not None:
            logger.info(
                "slot_conflict",
                extra={
                    "on_date": on_date,
                    "at_time": at_time,
                    "window_id": conflict.window_id,
                },
            )
        return SlotCheck(
            on_date=on_date,
            at_time=at_time,
            duration_minutes=duration_minutes,
            conflict=conflict,
        )
