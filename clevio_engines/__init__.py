"""
Module: clevio_engines
Responsibility:
    Package entrypoint re-exporting the public symbols of the pure engine
    sub-modules.  This is the import surface for clevio_services.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import clevio_kernel (domain, exceptions, logging).
    MUST NOT import clevio_services.

Invariants enforced:
    - Engines never call ``datetime.now()`` or ``date.today()``; they take
      dates as parameters or read an injected Clock.
    - Decimal-only money arithmetic.
    - Identical inputs produce identical outputs.

Audit relevance:
    Every traced engine invocation emits a CLEVIO_ENGINE_TRACE record (see
    ``clevio_engines.tracer``).

Usage:
    from clevio_engines import EligibilityEvaluator, FeeCalculator
    from clevio_engines import RecurringScheduleCalculator, AvailabilityCalendar
"""

from clevio_kernel.logging_config import get_logger

logger = get_logger("engines")

from clevio_engines.availability import AvailabilityCalendar
from clevio_engines.booking import (
    AdvisoryStats,
    BookingStateMachine,
    PayrollRunStateMachine,
)
from clevio_engines.compliance import (
    ComplianceIssueTracker,
    ComplianceSummary,
    EscalationResult,
)
from clevio_engines.eligibility import (
    CAPABILITY_REQUIREMENTS,
    REQUIREMENT_PRIORITY,
    Capability,
    EligibilityEvaluator,
    EligibilityResult,
    Requirement,
    capability_for_session_type,
)
from clevio_engines.fees import (
    DEFAULT_FEE_RATES,
    FeeCalculator,
    roster_payroll_amount,
)
from clevio_engines.recurring import (
    DEFAULT_LEAD_DAYS,
    RecurringScheduleCalculator,
)
from clevio_engines.subscriptions import SubscriptionPolicy
from clevio_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    "AdvisoryStats",
    "AvailabilityCalendar",
    "BookingStateMachine",
    "CAPABILITY_REQUIREMENTS",
    "Capability",
    "ComplianceIssueTracker",
    "ComplianceSummary",
    "DEFAULT_FEE_RATES",
    "DEFAULT_LEAD_DAYS",
    "EligibilityEvaluator",
    "EligibilityResult",
    "EscalationResult",
    "FeeCalculator",
    "PayrollRunStateMachine",
    "REQUIREMENT_PRIORITY",
    "RecurringScheduleCalculator",
    "Requirement",
    "SubscriptionPolicy",
    "capability_for_session_type",
    "compute_input_fingerprint",
    "roster_payroll_amount",
    "traced_engine",
]
