"""
Typed Exception Hierarchy for the CLEVIO engine.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers (the client dashboard, the admin console) must react to engine
failures precisely: a payroll date inside the lead-time floor is a
"pick another date" message, a blackout conflict names the offending
window, an unmet eligibility gate names the single most important
blocker.  Parsing messages for that is fragile, so:

  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, API-safe)
  3. Exceptions carry structured DATA (not just a message string)

Example:
    try:
        service.book(client, "tax_strategy", on_date, at_time, 60)
    except RequirementUnmetError as e:
        show_banner(e.primary_blocker)
    except SlotConflictError as e:
        show_conflict(e.window.reason)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    ClevioError (base)
    |
    +-- ScheduleError
    |   +-- InvalidScheduleRuleError
    |   +-- LeadTimeViolationError
    |
    +-- CalendarError
    |   +-- PastDateError
    |   |   +-- PastTimeError
    |   +-- SlotConflictError
    |
    +-- LifecycleError
    |   +-- InvalidTransitionError
    |   +-- InvalidEscalationError
    |
    +-- EligibilityError
    |   +-- RequirementUnmetError
    |
    +-- SubscriptionError
    |   +-- CommitmentActiveError
    |
    +-- PaymentError
    |   +-- PaymentDeclinedError
    |
    +-- RecordNotFoundError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category      | Code                   | When Raised
--------------|------------------------|---------------------------------------
Schedule      | INVALID_SCHEDULE_RULE  | Frequency/selector missing or invalid
              | LEAD_TIME_VIOLATION    | Payroll date earlier than lead floor
--------------|------------------------|---------------------------------------
Calendar      | PAST_DATE              | Booking date strictly before today
              | PAST_TIME              | Time of day already passed today
              | SLOT_CONFLICT          | Blackout window covers the slot
--------------|------------------------|---------------------------------------
Lifecycle     | INVALID_TRANSITION     | Move out of a terminal/wrong state
              | INVALID_ESCALATION     | Severity not strictly increasing
--------------|------------------------|---------------------------------------
Eligibility   | REQUIREMENT_UNMET      | Capability locked, carries blockers
--------------|------------------------|---------------------------------------
Subscription  | COMMITMENT_ACTIVE      | Tier still inside commitment window
--------------|------------------------|---------------------------------------
Payment       | PAYMENT_DECLINED       | Payment collaborator refused charge
--------------|------------------------|---------------------------------------
Lookup        | RECORD_NOT_FOUND       | Persistence has no such record

===============================================================================
"""

from __future__ import annotations

from datetime import date, time
from typing import Any, Sequence


class ClevioError(Exception):
    """
    Base exception for all engine errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "CLEVIO_ERROR"


# Schedule-related exceptions


class ScheduleError(ClevioError):
    """Base exception for recurring schedule errors."""

    code: str = "SCHEDULE_ERROR"


class InvalidScheduleRuleError(ScheduleError):
    """Payroll schedule rule is malformed for its frequency."""

    code: str = "INVALID_SCHEDULE_RULE"

    def __init__(self, rule: Any, reason: str):
        self.rule = rule
        self.reason = reason
        super().__init__(f"Invalid schedule rule {rule!r}: {reason}")


class LeadTimeViolationError(ScheduleError):
    """Requested payroll date is earlier than the minimum lead time allows."""

    code: str = "LEAD_TIME_VIOLATION"

    def __init__(self, run_date: date, earliest: date):
        self.run_date = run_date
        self.earliest = earliest
        super().__init__(
            f"Payroll date {run_date.isoformat()} is before the earliest "
            f"allowed date {earliest.isoformat()}"
        )


# Calendar-related exceptions


class CalendarError(ClevioError):
    """Base exception for availability calendar errors."""

    code: str = "CALENDAR_ERROR"


class PastDateError(CalendarError):
    """Requested date lies strictly before today."""

    code: str = "PAST_DATE"

    def __init__(self, requested: date, today: date):
        self.requested = requested
        self.today = today
        super().__init__(
            f"Date {requested.isoformat()} is in the past (today is {today.isoformat()})"
        )


class PastTimeError(PastDateError):
    """Requested time on today's date has already passed."""

    code: str = "PAST_TIME"

    def __init__(self, requested: date, requested_time: time, now: time):
        self.requested = requested
        self.today = requested
        self.requested_time = requested_time
        self.now = now
        CalendarError.__init__(
            self,
            f"Time {requested_time.isoformat()} on {requested.isoformat()} has passed "
            f"(now {now.isoformat(timespec='minutes')})",
        )


class SlotConflictError(CalendarError):
    """Proposed slot overlaps an administrator-defined blackout window."""

    code: str = "SLOT_CONFLICT"

    def __init__(self, window: Any):
        self.window = window
        super().__init__(
            f"Slot conflicts with blackout window on {window.on_date.isoformat()}: "
            f"{window.reason}"
        )


# Lifecycle-related exceptions


class LifecycleError(ClevioError):
    """Base exception for state machine errors."""

    code: str = "LIFECYCLE_ERROR"


class InvalidTransitionError(LifecycleError):
    """Action is not permitted from the record's current state."""

    code: str = "INVALID_TRANSITION"

    def __init__(self, entity: str, from_state: str, action: str):
        self.entity = entity
        self.from_state = from_state
        self.action = action
        super().__init__(
            f"Cannot {action} {entity} in state '{from_state}'"
        )


class InvalidEscalationError(LifecycleError):
    """Escalation target severity is not strictly above the current one."""

    code: str = "INVALID_ESCALATION"

    def __init__(self, issue_id: str, current: str, requested: str):
        self.issue_id = issue_id
        self.current = current
        self.requested = requested
        super().__init__(
            f"Cannot escalate issue {issue_id} from '{current}' to '{requested}'"
        )


# Eligibility-related exceptions


class EligibilityError(ClevioError):
    """Base exception for eligibility gate errors."""

    code: str = "ELIGIBILITY_ERROR"


class RequirementUnmetError(EligibilityError):
    """
    Capability is locked for the client.

    ``blockers`` is ordered by priority; ``blockers[0]`` is the message the
    host application should surface first.
    """

    code: str = "REQUIREMENT_UNMET"

    def __init__(self, capability: Any, blockers: Sequence[Any]):
        self.capability = capability
        self.blockers = tuple(blockers)
        names = ", ".join(getattr(b, "value", str(b)) for b in self.blockers)
        label = getattr(capability, "value", capability)
        super().__init__(f"Capability '{label}' blocked by: {names}")

    @property
    def primary_blocker(self) -> Any:
        """The highest-priority unmet requirement."""
        return self.blockers[0] if self.blockers else None


# Subscription-related exceptions


class SubscriptionError(ClevioError):
    """Base exception for tier subscription errors."""

    code: str = "SUBSCRIPTION_ERROR"


class CommitmentActiveError(SubscriptionError):
    """Tier cannot be deactivated while its commitment window is open."""

    code: str = "COMMITMENT_ACTIVE"

    def __init__(self, tier: Any, ends_on: date):
        self.tier = tier
        self.ends_on = ends_on
        label = getattr(tier, "value", tier)
        super().__init__(
            f"Tier '{label}' is under commitment until {ends_on.isoformat()}"
        )


# Payment-related exceptions


class PaymentError(ClevioError):
    """Base exception for payment collaborator errors."""

    code: str = "PAYMENT_ERROR"


class PaymentDeclinedError(PaymentError):
    """Payment collaborator refused the charge."""

    code: str = "PAYMENT_DECLINED"

    def __init__(self, client_id: str, reason: str):
        self.client_id = client_id
        self.reason = reason
        super().__init__(f"Charge for client {client_id} declined: {reason}")


# Lookup exceptions


class RecordNotFoundError(ClevioError):
    """Persistence collaborator has no record with the given id."""

    code: str = "RECORD_NOT_FOUND"

    def __init__(self, kind: str, record_id: Any):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} not found: {record_id}")
