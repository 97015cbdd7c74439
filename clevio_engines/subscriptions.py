"""
Module: clevio_engines.subscriptions
Responsibility:
    Activate and deactivate service tiers on a client snapshot while
    honouring each tier's commitment window.

Architecture position:
    Engines -- pure, returns new Client snapshots.

Invariants enforced:
    - A tier cannot be dropped before its commitment window ends.
    - Activating an already-active tier leaves the snapshot unchanged.

Failure modes:
    - CommitmentActiveError while ``on_date < commitment_ends_on``.
"""

from __future__ import annotations

from datetime import date

from clevio_kernel.domain.client import Client, ServiceTier, TierSubscription
from clevio_kernel.exceptions import CommitmentActiveError
from clevio_kernel.logging_config import get_logger

logger = get_logger("engines.subscriptions")

DEFAULT_COMMITMENT_MONTHS = 6


class SubscriptionPolicy:
    """Tier activation with a minimum commitment per tier."""

    def __init__(self, commitment_months: dict[ServiceTier, int] | None = None):
        self._commitment_months = dict(commitment_months or {})

    @classmethod
    def from_config(cls, config) -> SubscriptionPolicy:
        return cls({t.tier: t.commitment_months for t in config.tiers})

    def commitment_months_for(self, tier: ServiceTier) -> int:
        return self._commitment_months.get(tier, DEFAULT_COMMITMENT_MONTHS)

    @staticmethod
    def commitment_ends_on(subscription: TierSubscription) -> date:
        return subscription.commitment_ends_on

    def activate(self, client: Client, tier: ServiceTier, on_date: date) -> Client:
        tier = ServiceTier(tier)
        if client.has_tier(tier):
            return client
        subscription = TierSubscription(
            tier=tier,
            started_on=on_date,
            commitment_months=self.commitment_months_for(tier),
        )
        logger.info(
            "tier_activated",
            extra={
                "client_id": client.client_id,
                "tier": tier.value,
                "commitment_ends_on": subscription.commitment_ends_on,
            },
        )
        return client.with_subscriptions(client.subscriptions + (subscription,))

    def deactivate(self, client: Client, tier: ServiceTier, on_date: date) -> Client:
        """Drop ``tier`` once its commitment window has ended.

        Deactivating a tier the client does not hold is a no-op.

        Raises:
            CommitmentActiveError: while the tier is still committed.
        """
        tier = ServiceTier(tier)
        subscription = client.subscription_for(tier)
        if subscription is None:
            return client
        if subscription.is_committed(on_date):
            raise CommitmentActiveError(tier, subscription.commitment_ends_on)
        logger.info(
            "tier_deactivated",
            extra={"client_id": client.client_id, "tier": tier.value},
        )
        return client.with_subscriptions(
            tuple(s for s in client.subscriptions if s.tier != tier)
        )
