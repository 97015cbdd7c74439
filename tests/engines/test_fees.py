"""
Tests for the fee calculator.

Covers:
- Additive per-tier fees on the payroll base
- Half-up rounding per tier and sum-of-rounded totals
- Input validation
"""

from decimal import Decimal

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from clevio_engines.fees import FeeCalculator, roster_payroll_amount
from clevio_kernel.domain.client import Member, ServiceTier
from clevio_kernel.domain.values import Money


class TestComputeFee:
    """Additive percentage fees."""

    def setup_method(self):
        self.calculator = FeeCalculator()

    def test_payroll_and_tax_on_75000(self):
        """2% payroll plus 2% tax on 75,000."""
        fees = self.calculator.compute_fee(
            {ServiceTier.PAYROLL, ServiceTier.TAX}, Money.of("75000")
        )

        assert fees.fee_for(ServiceTier.PAYROLL) == Money.of("1500.00")
        assert fees.fee_for(ServiceTier.TAX) == Money.of("1500.00")
        assert fees.total == Money.of("3000.00")
        assert ServiceTier.ADVISORY not in fees.per_tier

    def test_all_tiers(self):
        fees = self.calculator.compute_fee(list(ServiceTier), Money.of("10000"))

        assert fees.fee_for(ServiceTier.ADVISORY) == Money.of("100.00")
        assert fees.total == Money.of("500.00")

    def test_breakdown_in_display_order(self):
        fees = self.calculator.compute_fee(
            [ServiceTier.ADVISORY, ServiceTier.PAYROLL], Money.of("100")
        )

        assert list(fees.per_tier) == [ServiceTier.PAYROLL, ServiceTier.ADVISORY]

    def test_no_tiers_is_zero(self):
        fees = self.calculator.compute_fee([], Money.of("5000"))

        assert fees.per_tier == {}
        assert fees.total.is_zero

    def test_bare_number_taken_as_usd(self):
        fees = self.calculator.compute_fee([ServiceTier.PAYROLL], "1000")

        assert fees.total == Money.of("20.00", "USD")

    def test_currency_preserved(self):
        fees = self.calculator.compute_fee([ServiceTier.PAYROLL], Money.of("1000", "EUR"))

        assert fees.total.currency == "EUR"

    def test_negative_base_rejected(self):
        with pytest.raises(ValueError):
            self.calculator.compute_fee([ServiceTier.PAYROLL], Money.of("-1"))

    def test_unconfigured_tier_rejected(self):
        calculator = FeeCalculator(rates={ServiceTier.PAYROLL: Decimal("0.02")})

        with pytest.raises(ValueError, match="tax"):
            calculator.compute_fee([ServiceTier.TAX], Money.of("100"))


class TestRounding:
    """Each tier fee rounds half-up; the total is the sum of rounded fees."""

    def setup_method(self):
        self.calculator = FeeCalculator()

    def test_half_cent_rounds_up(self):
        """0.02 * 0.25 = 0.005 rounds to 0.01."""
        fees = self.calculator.compute_fee([ServiceTier.PAYROLL], Money.of("0.25"))

        assert fees.total == Money.of("0.01")

    def test_sum_of_rounded_not_rounded_sum(self):
        """Three fees of 0.005 each round to 0.01 apiece; total 0.03, not 0.02."""
        calculator = FeeCalculator(rates={t: Decimal("0.02") for t in ServiceTier})

        fees = calculator.compute_fee(list(ServiceTier), Money.of("0.25"))

        assert fees.total == Money.of("0.03")

    @given(
        base=st.decimals(
            min_value=Decimal("0"),
            max_value=Decimal("10000000"),
            places=2,
            allow_nan=False,
            allow_infinity=False,
        ),
        tiers=st.sets(st.sampled_from(list(ServiceTier))),
    )
    @settings(max_examples=200)
    def test_total_equals_sum_of_breakdown(self, base, tiers):
        fees = self.calculator.compute_fee(tiers, Money.of(base))

        total = sum((m.amount for m in fees.per_tier.values()), Decimal("0"))
        assert fees.total.amount == total
        for fee in fees.per_tier.values():
            assert fee.amount == fee.amount.quantize(Decimal("0.01"))


class TestRosterAmount:
    def test_sums_member_compensation(self):
        members = [
            Member(member_id="a", compensation=Money.of("50000")),
            Member(member_id="b", compensation=Money.of("25000")),
        ]

        assert roster_payroll_amount(members) == Money.of("75000")

    def test_empty_roster(self):
        assert roster_payroll_amount([]).is_zero
