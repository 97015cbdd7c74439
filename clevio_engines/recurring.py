"""
Module: clevio_engines.recurring
Responsibility:
    Compute concrete payroll dates from a recurring schedule rule and a
    minimum lead time.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  "Today" is always passed
    in as ``from_date``; the engine never reads a clock.

Invariants enforced:
    - ``next_occurrence(rule, lead, from_date) >= from_date + lead`` for
      every well-formed rule.
    - Monthly days past a month's end clamp to that month's last day; no
      invalid date is ever constructed.
    - Malformed rules are rejected, never defaulted.

Failure modes:
    - InvalidScheduleRuleError for a rule missing the selector its
      frequency needs, or with an out-of-range selector.
    - LeadTimeViolationError from ``validate_run_date`` for a manually
      picked date inside the lead-time floor.

Usage:
    calc = RecurringScheduleCalculator()
    rule = PayrollScheduleRule(Frequency.BIWEEKLY, day_of_week=5)   # Friday
    calc.next_occurrence(rule, 14, date(2025, 3, 3))  # date(2025, 3, 21)
"""

from __future__ import annotations

import calendar
from datetime import date, timedelta

from clevio_kernel.domain.schedule import (
    LAST_DAY_OF_MONTH,
    Frequency,
    PayrollScheduleRule,
    python_weekday,
)
from clevio_kernel.exceptions import InvalidScheduleRuleError, LeadTimeViolationError
from clevio_engines.tracer import traced_engine

DEFAULT_LEAD_DAYS = 14

_INTERVAL_DAYS: dict[Frequency, int] = {
    Frequency.WEEKLY: 7,
    Frequency.BIWEEKLY: 14,
}


def _as_days(min_lead: int | timedelta) -> timedelta:
    lead = min_lead if isinstance(min_lead, timedelta) else timedelta(days=min_lead)
    if lead < timedelta(0):
        raise ValueError("Minimum lead time cannot be negative")
    return lead


def _day_in_month(year: int, month: int, day_of_month) -> date:
    last = calendar.monthrange(year, month)[1]
    if day_of_month == LAST_DAY_OF_MONTH:
        return date(year, month, last)
    return date(year, month, min(day_of_month, last))


def _next_month(year: int, month: int) -> tuple[int, int]:
    return (year + 1, 1) if month == 12 else (year, month + 1)


class RecurringScheduleCalculator:
    """Next-date arithmetic for weekly, biweekly and monthly payroll rules."""

    def __init__(self, default_lead_days: int = DEFAULT_LEAD_DAYS):
        self.default_lead_days = default_lead_days

    @classmethod
    def from_config(cls, config) -> RecurringScheduleCalculator:
        return cls(default_lead_days=config.payroll_lead_days)

    @staticmethod
    def check_rule(rule: PayrollScheduleRule) -> Frequency:
        """Return the rule's frequency or raise if the rule is malformed."""
        problem = rule.validation_error()
        if problem is not None:
            raise InvalidScheduleRuleError(rule, problem)
        return Frequency(rule.frequency)

    def earliest_date(self, from_date: date, min_lead: int | timedelta | None = None) -> date:
        """``from_date`` plus the lead time in calendar days."""
        if min_lead is None:
            min_lead = self.default_lead_days
        return from_date + _as_days(min_lead)

    @traced_engine(
        "recurring_schedule", "1.0",
        fingerprint_fields=("rule", "min_lead", "from_date"),
    )
    def next_occurrence(
        self,
        rule: PayrollScheduleRule,
        min_lead: int | timedelta | None,
        from_date: date,
    ) -> date:
        """First date matching ``rule`` on or after ``from_date + min_lead``.

        Weekly and biweekly rules are treated identically for the first
        occurrence; they differ only in ``following_occurrence``.
        """
        frequency = self.check_rule(rule)
        earliest = self.earliest_date(from_date, min_lead)

        if frequency in (Frequency.WEEKLY, Frequency.BIWEEKLY):
            target = python_weekday(rule.day_of_week)
            candidate = earliest
            while candidate.weekday() != target:
                candidate += timedelta(days=1)
            return candidate

        candidate = _day_in_month(earliest.year, earliest.month, rule.day_of_month)
        if candidate < earliest:
            year, month = _next_month(earliest.year, earliest.month)
            candidate = _day_in_month(year, month, rule.day_of_month)
        return candidate

    def following_occurrence(self, rule: PayrollScheduleRule, last_run: date) -> date:
        """The occurrence after a stored last run date.

        Weekly adds 7 days, biweekly 14; monthly moves to the selected day of
        the next month (clamped to its last day).
        """
        frequency = self.check_rule(rule)
        if frequency in _INTERVAL_DAYS:
            return last_run + timedelta(days=_INTERVAL_DAYS[frequency])
        year, month = _next_month(last_run.year, last_run.month)
        return _day_in_month(year, month, rule.day_of_month)

    def upcoming(
        self,
        rule: PayrollScheduleRule,
        min_lead: int | timedelta | None,
        from_date: date,
        count: int,
    ) -> tuple[date, ...]:
        """The next ``count`` consecutive occurrences."""
        if count <= 0:
            return ()
        dates = [self.next_occurrence(rule, min_lead, from_date)]
        while len(dates) < count:
            dates.append(self.following_occurrence(rule, dates[-1]))
        return tuple(dates)

    def validate_run_date(
        self,
        run_date: date,
        min_lead: int | timedelta | None,
        from_date: date,
    ) -> date:
        """Accept a manually chosen payroll date only outside the lead-time floor.

        Raises:
            LeadTimeViolationError: if ``run_date`` is before
                ``from_date + min_lead``.
        """
        earliest = self.earliest_date(from_date, min_lead)
        if run_date < earliest:
            raise LeadTimeViolationError(run_date, earliest)
        return run_date
