"""Tests for tier activation and the commitment window."""

from datetime import date

import pytest

from clevio_engines.subscriptions import SubscriptionPolicy
from clevio_kernel.domain.client import Client, ServiceTier, TierSubscription, add_months
from clevio_kernel.exceptions import CommitmentActiveError


class TestActivate:
    def setup_method(self):
        self.policy = SubscriptionPolicy()
        self.client = Client(client_id="c-1")

    def test_adds_subscription_with_six_month_commitment(self):
        client = self.policy.activate(self.client, ServiceTier.TAX, date(2025, 3, 3))

        subscription = client.subscription_for(ServiceTier.TAX)
        assert subscription.started_on == date(2025, 3, 3)
        assert self.policy.commitment_ends_on(subscription) == date(2025, 9, 3)
        assert self.client.subscriptions == ()

    def test_already_active_is_noop(self):
        client = self.policy.activate(self.client, ServiceTier.TAX, date(2025, 3, 3))

        again = self.policy.activate(client, ServiceTier.TAX, date(2025, 4, 1))

        assert again is client

    def test_configured_commitment(self, engine_config):
        policy = SubscriptionPolicy.from_config(engine_config)

        client = policy.activate(self.client, ServiceTier.ADVISORY, date(2025, 1, 31))

        assert client.subscription_for(ServiceTier.ADVISORY).commitment_ends_on == date(2025, 7, 31)


class TestDeactivate:
    def setup_method(self):
        self.policy = SubscriptionPolicy()
        self.client = Client(
            client_id="c-1",
            subscriptions=(TierSubscription(ServiceTier.ADVISORY, date(2025, 3, 3)),),
        )

    def test_inside_commitment_rejected(self):
        with pytest.raises(CommitmentActiveError) as exc_info:
            self.policy.deactivate(self.client, ServiceTier.ADVISORY, date(2025, 9, 2))

        assert exc_info.value.tier == ServiceTier.ADVISORY
        assert exc_info.value.ends_on == date(2025, 9, 3)
        assert exc_info.value.code == "COMMITMENT_ACTIVE"

    def test_on_end_date_allowed(self):
        client = self.policy.deactivate(self.client, ServiceTier.ADVISORY, date(2025, 9, 3))

        assert not client.has_tier(ServiceTier.ADVISORY)

    def test_unknown_tier_is_noop(self):
        assert self.policy.deactivate(self.client, ServiceTier.TAX, date(2025, 3, 3)) is self.client


class TestAddMonths:
    @pytest.mark.parametrize(
        "start, months, expected",
        [
            (date(2025, 8, 31), 6, date(2026, 2, 28)),
            (date(2023, 8, 31), 6, date(2024, 2, 29)),
            (date(2025, 7, 15), 6, date(2026, 1, 15)),
            (date(2025, 3, 3), 0, date(2025, 3, 3)),
        ],
    )
    def test_clamps_to_month_end(self, start, months, expected):
        assert add_months(start, months) == expected
