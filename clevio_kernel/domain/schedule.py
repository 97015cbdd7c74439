"""
Payroll schedule rule types (``clevio_kernel.domain.schedule``).

Responsibility
--------------
Value objects describing how often a client runs payroll and on which day.
Rules arrive from the dashboard form or from storage and may be malformed;
they are checked by ``RecurringScheduleCalculator`` at computation time, not
at construction, so that a stored rule can always be loaded and reported on.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.

Conventions
-----------
* ``day_of_week`` uses 0 = Sunday .. 6 = Saturday, the convention of the
  dashboard's schedule picker.
* ``day_of_month`` is 1..31 or ``LAST_DAY_OF_MONTH``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal

LAST_DAY_OF_MONTH: Literal["last"] = "last"

DayOfMonth = int | Literal["last"]


class Frequency(str, Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


def python_weekday(day_of_week: int) -> int:
    """Convert a Sunday-first day index to ``date.weekday()`` (Monday = 0)."""
    return (day_of_week - 1) % 7


@dataclass(frozen=True)
class PayrollScheduleRule:
    """A recurring payroll rule.

    Contract: frozen.  Weekly and biweekly rules need ``day_of_week``;
    monthly rules need ``day_of_month``.  ``validation_error()`` reports the
    first problem, or None for a well-formed rule.
    """

    frequency: Frequency | str
    day_of_week: int | None = None
    day_of_month: DayOfMonth | None = None

    def validation_error(self) -> str | None:
        try:
            frequency = Frequency(self.frequency)
        except ValueError:
            return f"unknown frequency {self.frequency!r}"

        if frequency in (Frequency.WEEKLY, Frequency.BIWEEKLY):
            if self.day_of_week is None:
                return f"{frequency.value} rule requires day_of_week"
            if isinstance(self.day_of_week, bool) or not isinstance(self.day_of_week, int):
                return "day_of_week must be an integer"
            if not 0 <= self.day_of_week <= 6:
                return f"day_of_week {self.day_of_week} outside 0..6"
            return None

        if self.day_of_month is None:
            return "monthly rule requires day_of_month"
        if self.day_of_month == LAST_DAY_OF_MONTH:
            return None
        if isinstance(self.day_of_month, bool) or not isinstance(self.day_of_month, int):
            return f"day_of_month {self.day_of_month!r} is not a day number or 'last'"
        if not 1 <= self.day_of_month <= 31:
            return f"day_of_month {self.day_of_month} outside 1..31"
        return None

    @property
    def is_valid(self) -> bool:
        return self.validation_error() is None
