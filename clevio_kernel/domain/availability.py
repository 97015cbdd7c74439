"""
Availability types (``clevio_kernel.domain.availability``).

Responsibility
--------------
Blackout windows defined by administrators and the read-only projections
the availability calendar produces from them: slot checks, time slots,
calendar days and months.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.

Invariants enforced
-------------------
* A full-day ``BlackoutWindow`` carries no times.
* A partial window carries both ``start_time`` and ``end_time`` with
  ``start_time < end_time``.
* A ``SlotCheck`` has a ``conflict`` iff ``ok`` is False.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from uuid import uuid4

from clevio_kernel.domain.booking import AdvisorySession
from clevio_kernel.exceptions import SlotConflictError


@dataclass(frozen=True)
class BlackoutWindow:
    """A date, or a time range on a date, during which nothing may be booked."""

    on_date: date
    reason: str = ""
    is_full_day: bool = True
    start_time: time | None = None
    end_time: time | None = None
    window_id: str = ""
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.window_id:
            object.__setattr__(self, "window_id", str(uuid4()))
        if self.is_full_day:
            if self.start_time is not None or self.end_time is not None:
                raise ValueError("A full-day blackout window cannot carry times")
            return
        if self.start_time is None or self.end_time is None:
            raise ValueError("A partial blackout window needs both start_time and end_time")
        if not self.start_time < self.end_time:
            raise ValueError(
                f"start_time {self.start_time.isoformat()} must be before "
                f"end_time {self.end_time.isoformat()}"
            )

    @classmethod
    def full_day(cls, on_date: date, reason: str = "", **kwargs) -> BlackoutWindow:
        return cls(on_date=on_date, reason=reason, is_full_day=True, **kwargs)

    @classmethod
    def partial(
        cls, on_date: date, start_time: time, end_time: time, reason: str = "", **kwargs
    ) -> BlackoutWindow:
        return cls(
            on_date=on_date,
            reason=reason,
            is_full_day=False,
            start_time=start_time,
            end_time=end_time,
            **kwargs,
        )

    def conflicts_with(self, on_date: date, at_time: time | None) -> bool:
        """True if a booking on ``on_date`` at ``at_time`` falls in this window.

        A booking without a time is a full-day booking and conflicts with any
        window on the same date.  Partial bounds are inclusive.
        """
        if on_date != self.on_date:
            return False
        if self.is_full_day or at_time is None:
            return True
        return self.start_time <= at_time <= self.end_time


@dataclass(frozen=True)
class SlotCheck:
    """Outcome of validating a proposed booking slot."""

    on_date: date
    at_time: time | None
    duration_minutes: int | None
    conflict: BlackoutWindow | None = None

    @property
    def ok(self) -> bool:
        return self.conflict is None

    def raise_for_conflict(self) -> None:
        if self.conflict is not None:
            raise SlotConflictError(self.conflict)


@dataclass(frozen=True)
class TimeSlot:
    """One bookable start time on a given date."""

    start: time
    is_blocked: bool = False
    blocked_by: BlackoutWindow | None = None


@dataclass(frozen=True)
class CalendarDay:
    day: date
    is_blocked: bool
    is_past: bool
    is_today: bool
    windows: tuple[BlackoutWindow, ...] = ()
    sessions_on_date: tuple[AdvisorySession, ...] = ()

    @property
    def is_selectable(self) -> bool:
        return not (self.is_past or self.is_blocked)


@dataclass(frozen=True)
class CalendarMonth:
    """A month grid.

    ``leading_blanks`` is the number of empty cells before the 1st in a
    Sunday-first week grid.
    """

    year: int
    month: int
    leading_blanks: int
    days: tuple[CalendarDay, ...]

    def day(self, on_date: date) -> CalendarDay:
        return self.days[on_date.day - 1]

    @property
    def blocked_days(self) -> tuple[CalendarDay, ...]:
        return tuple(d for d in self.days if d.is_blocked)
