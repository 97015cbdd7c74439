"""
Module: clevio_engines.eligibility
Responsibility:
    Decide which payroll and advisory capabilities a client has unlocked and,
    for the locked ones, which requirements are unmet -- in a fixed priority
    order so the dashboard can show the single most important one first.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import clevio_kernel/domain types.

Invariants enforced:
    - Purity: the result is a function of the client snapshot alone and is
      recomputed on every call (no caching across roster or subscription
      changes).
    - Blocker order is defined once, in ``REQUIREMENT_PRIORITY``.

Failure modes:
    - ``RequirementUnmetError`` from ``require()`` when a capability is
      locked; carries the ordered blockers for that capability.

Usage:
    evaluator = EligibilityEvaluator(minimum_headcount=5)
    result = evaluator.evaluate(client)
    if Capability.RUN_PAYROLL not in result.unlocked:
        show(result.blockers[0])
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from clevio_kernel.domain.client import Client, ServiceTier
from clevio_kernel.exceptions import RequirementUnmetError
from clevio_kernel.logging_config import get_logger
from clevio_engines.tracer import traced_engine

logger = get_logger("engines.eligibility")

DEFAULT_MINIMUM_HEADCOUNT = 5


class Capability(str, Enum):
    RUN_PAYROLL = "run_payroll"
    SCHEDULE_ADVISORY = "schedule_advisory"
    BOOK_TAX_SESSION = "book_tax_session"
    BOOK_ADVISORY_SESSION = "book_advisory_session"


class Requirement(str, Enum):
    HEADCOUNT = "headcount"
    PAYMENT_INSTRUMENT = "payment_instrument"
    SERVICE_TIER = "service_tier"
    TAX_TIER = "tax_tier"
    ADVISORY_TIER = "advisory_tier"


REQUIREMENT_PRIORITY: tuple[Requirement, ...] = (
    Requirement.HEADCOUNT,
    Requirement.PAYMENT_INSTRUMENT,
    Requirement.SERVICE_TIER,
    Requirement.TAX_TIER,
    Requirement.ADVISORY_TIER,
)

CAPABILITY_REQUIREMENTS: dict[Capability, tuple[Requirement, ...]] = {
    Capability.RUN_PAYROLL: (
        Requirement.HEADCOUNT,
        Requirement.PAYMENT_INSTRUMENT,
    ),
    Capability.SCHEDULE_ADVISORY: (
        Requirement.HEADCOUNT,
        Requirement.SERVICE_TIER,
    ),
    Capability.BOOK_TAX_SESSION: (
        Requirement.HEADCOUNT,
        Requirement.TAX_TIER,
    ),
    Capability.BOOK_ADVISORY_SESSION: (
        Requirement.HEADCOUNT,
        Requirement.ADVISORY_TIER,
    ),
}

# Capabilities whose blockers make up EligibilityResult.blockers
_PRIMARY_CAPABILITIES = (Capability.RUN_PAYROLL, Capability.SCHEDULE_ADVISORY)

SESSION_TIER_CAPABILITY: dict[ServiceTier, Capability] = {
    ServiceTier.TAX: Capability.BOOK_TAX_SESSION,
    ServiceTier.ADVISORY: Capability.BOOK_ADVISORY_SESSION,
}


@dataclass(frozen=True)
class EligibilityResult:
    """
    Snapshot of a client's unlocked capabilities.

    Guarantees:
        - ``blockers`` lists each requirement blocking ``run_payroll`` or
          ``schedule_advisory`` once, in ``REQUIREMENT_PRIORITY`` order.
        - ``per_capability`` holds the ordered blockers of every capability
          (empty tuple when unlocked).
    """

    unlocked: frozenset[Capability]
    blockers: tuple[Requirement, ...]
    per_capability: dict[Capability, tuple[Requirement, ...]]

    def is_unlocked(self, capability: Capability) -> bool:
        return capability in self.unlocked

    def blockers_for(self, capability: Capability) -> tuple[Requirement, ...]:
        return self.per_capability[capability]

    @property
    def primary_blocker(self) -> Requirement | None:
        return self.blockers[0] if self.blockers else None


def _ordered(requirements: set[Requirement]) -> tuple[Requirement, ...]:
    return tuple(r for r in REQUIREMENT_PRIORITY if r in requirements)


class EligibilityEvaluator:
    """Pure rules engine gating payroll and advisory actions."""

    def __init__(self, minimum_headcount: int = DEFAULT_MINIMUM_HEADCOUNT):
        if minimum_headcount < 0:
            raise ValueError("minimum_headcount cannot be negative")
        self._minimum_headcount = minimum_headcount

    @classmethod
    def from_config(cls, config) -> EligibilityEvaluator:
        return cls(minimum_headcount=config.minimum_headcount)

    @property
    def minimum_headcount(self) -> int:
        return self._minimum_headcount

    def unmet_requirements(self, client: Client) -> set[Requirement]:
        """Every requirement the client currently fails, unordered."""
        unmet: set[Requirement] = set()
        if client.roster_size < self._minimum_headcount:
            unmet.add(Requirement.HEADCOUNT)
        if not client.has_payment_instrument:
            unmet.add(Requirement.PAYMENT_INSTRUMENT)
        has_tax = client.has_tier(ServiceTier.TAX)
        has_advisory = client.has_tier(ServiceTier.ADVISORY)
        if not (has_tax or has_advisory):
            unmet.add(Requirement.SERVICE_TIER)
        if not has_tax:
            unmet.add(Requirement.TAX_TIER)
        if not has_advisory:
            unmet.add(Requirement.ADVISORY_TIER)
        return unmet

    @traced_engine("eligibility", "1.0", fingerprint_fields=("client",))
    def evaluate(self, client: Client) -> EligibilityResult:
        """Evaluate every capability for ``client``."""
        unmet = self.unmet_requirements(client)

        per_capability: dict[Capability, tuple[Requirement, ...]] = {}
        for capability, needs in CAPABILITY_REQUIREMENTS.items():
            per_capability[capability] = _ordered(unmet & set(needs))

        unlocked = frozenset(c for c, blocking in per_capability.items() if not blocking)

        primary: set[Requirement] = set()
        for capability in _PRIMARY_CAPABILITIES:
            primary.update(per_capability[capability])

        return EligibilityResult(
            unlocked=unlocked,
            blockers=_ordered(primary),
            per_capability=per_capability,
        )

    def blockers_for(self, client: Client, capability: Capability) -> tuple[Requirement, ...]:
        return self.evaluate(client).blockers_for(capability)

    def require(self, client: Client, capability: Capability) -> EligibilityResult:
        """Return the evaluation, or raise if ``capability`` is locked.

        Raises:
            RequirementUnmetError: carrying the capability's ordered blockers.
        """
        result = self.evaluate(client)
        blockers = result.blockers_for(capability)
        if blockers:
            logger.info(
                "capability_blocked",
                extra={
                    "client_id": client.client_id,
                    "capability": capability.value,
                    "blockers": [b.value for b in blockers],
                },
            )
            raise RequirementUnmetError(capability, blockers)
        return result


def capability_for_session_type(tier: ServiceTier) -> Capability:
    """Capability needed to book a session type belonging to ``tier``."""
    try:
        return SESSION_TIER_CAPABILITY[tier]
    except KeyError:
        raise ValueError(f"No advisory session capability for tier '{tier.value}'") from None
