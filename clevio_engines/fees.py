"""
Module: clevio_engines.fees
Responsibility:
    Compute per-tier service fees on a payroll base amount and their total.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Fees are additive: each selected tier's rate is applied to the same
      base amount, never to a running total.
    - Each tier fee is rounded to the currency's minor unit with
      ROUND_HALF_UP, then the rounded values are summed (sum-of-rounded),
      so the displayed breakdown always adds up to the displayed total.
    - Decimal-only arithmetic.

Failure modes:
    - ValueError for a negative base amount or a tier with no configured
      rate.

Usage:
    calculator = FeeCalculator()
    fees = calculator.compute_fee({ServiceTier.PAYROLL, ServiceTier.TAX}, Money.of("75000"))
    fees.total  # Money("3000.00", "USD")
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Mapping

from clevio_kernel.domain.booking import FeeBreakdown
from clevio_kernel.domain.client import Member, ServiceTier
from clevio_kernel.domain.values import Money
from clevio_engines.tracer import traced_engine

DEFAULT_FEE_RATES: dict[ServiceTier, Decimal] = {
    ServiceTier.PAYROLL: Decimal("0.02"),
    ServiceTier.TAX: Decimal("0.02"),
    ServiceTier.ADVISORY: Decimal("0.01"),
}

# Fixed breakdown order for display
TIER_ORDER: tuple[ServiceTier, ...] = (
    ServiceTier.PAYROLL,
    ServiceTier.TAX,
    ServiceTier.ADVISORY,
)


class FeeCalculator:
    """Additive percentage fees across selected service tiers.

    Whether ``payroll`` must be selected is a business rule enforced by the
    caller; the calculator prices whatever it is given.
    """

    def __init__(self, rates: Mapping[ServiceTier, Decimal] | None = None):
        self._rates = dict(rates if rates is not None else DEFAULT_FEE_RATES)

    @classmethod
    def from_config(cls, config) -> FeeCalculator:
        return cls(rates=config.fee_rates)

    def rate_for(self, tier: ServiceTier) -> Decimal:
        try:
            return self._rates[tier]
        except KeyError:
            raise ValueError(f"No fee rate configured for tier '{tier.value}'") from None

    @traced_engine("fees", "1.0", fingerprint_fields=("selected_tiers", "base_amount"))
    def compute_fee(
        self,
        selected_tiers: Iterable[ServiceTier],
        base_amount: Money | Decimal | int | str,
    ) -> FeeBreakdown:
        """Per-tier fees and their sum-of-rounded total.

        Args:
            selected_tiers: Active tiers to price; unselected tiers are
                omitted from the breakdown.
            base_amount: The payroll amount the rates apply to.  Bare
                numbers are taken as USD.

        Returns:
            FeeBreakdown in ``TIER_ORDER``.
        """
        if not isinstance(base_amount, Money):
            base_amount = Money.of(base_amount)
        if base_amount.is_negative:
            raise ValueError(f"Base amount cannot be negative: {base_amount}")

        selected = {ServiceTier(t) for t in selected_tiers}
        per_tier: dict[ServiceTier, Money] = {}
        total = Money.zero(base_amount.currency)
        for tier in TIER_ORDER:
            if tier not in selected:
                continue
            fee = (base_amount * self.rate_for(tier)).round()
            per_tier[tier] = fee
            total = total + fee

        return FeeBreakdown(per_tier=per_tier, total=total)


def roster_payroll_amount(members: Iterable[Member], currency: str = "USD") -> Money:
    """Sum of member compensation -- the base amount a payroll run is priced on."""
    total = Money.zero(currency)
    for member in members:
        total = total + member.compensation
    return total
