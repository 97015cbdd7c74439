"""
Client snapshot types (``clevio_kernel.domain.client``).

Responsibility
--------------
Immutable snapshots of a client account as the engines see it: roster,
tier subscriptions and payment-instrument presence.  The persistence
collaborator loads a ``Client`` before each engine call; engines return new
snapshots rather than mutating the one they were given.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.

Invariants enforced
-------------------
* A client holds at most one subscription per tier.
* ``PaymentInstrument.last4`` is exactly four digits.
* ``TierSubscription.commitment_months`` is non-negative.
* Clients are never hard-deleted; ``status`` moves between soft states.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Any, Mapping

from clevio_kernel.domain.values import Money


class ServiceTier(str, Enum):
    """Selectable service subscriptions."""

    PAYROLL = "payroll"
    TAX = "tax"
    ADVISORY = "advisory"


class MemberClassification(str, Enum):
    EMPLOYEE = "employee"
    CONTRACTOR = "contractor"


class ClientStatus(str, Enum):
    """Soft lifecycle status; clients are never hard-deleted."""

    ACTIVE = "active"
    SUSPENDED = "suspended"
    CLOSED = "closed"


def add_months(start: date, months: int) -> date:
    """Calendar-month addition clamped to the last day of the target month."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(start.day, last_day))


@dataclass(frozen=True)
class Member:
    """An employee or contractor on the client's roster.

    Only the count and classification matter to the eligibility rules;
    ``compensation`` feeds the payroll base amount and ``payload`` is
    carried through untouched.
    """

    member_id: str
    classification: MemberClassification = MemberClassification.EMPLOYEE
    compensation: Money = field(default_factory=Money.zero)
    payload: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PaymentInstrument:
    """Reference to the card on file (never the card number itself)."""

    last4: str
    brand: str = "amex"

    def __post_init__(self) -> None:
        if len(self.last4) != 4 or not self.last4.isdigit():
            raise ValueError(f"last4 must be exactly four digits, got {self.last4!r}")


@dataclass(frozen=True)
class TierSubscription:
    """An active tier with its commitment window.

    Contract: frozen.  The commitment window starts on ``started_on`` and
    lasts ``commitment_months`` calendar months.
    """

    tier: ServiceTier
    started_on: date
    commitment_months: int = 6

    def __post_init__(self) -> None:
        if self.commitment_months < 0:
            raise ValueError("commitment_months cannot be negative")

    @property
    def commitment_ends_on(self) -> date:
        return add_months(self.started_on, self.commitment_months)

    def is_committed(self, on_date: date) -> bool:
        """True while ``on_date`` is inside the commitment window."""
        return on_date < self.commitment_ends_on


@dataclass(frozen=True)
class Client:
    """
    Snapshot of a client account.

    Contract:
        Frozen; the ``with_*`` helpers return new snapshots.
    Guarantees:
        - At most one subscription per tier.
    Non-goals:
        - Does not decide eligibility -- see ``EligibilityEvaluator``.
    """

    client_id: str
    members: tuple[Member, ...] = ()
    subscriptions: tuple[TierSubscription, ...] = ()
    payment_instrument: PaymentInstrument | None = None
    status: ClientStatus = ClientStatus.ACTIVE
    name: str = ""

    def __post_init__(self) -> None:
        tiers = [s.tier for s in self.subscriptions]
        if len(tiers) != len(set(tiers)):
            raise ValueError(f"Client {self.client_id} has duplicate tier subscriptions")

    @property
    def roster_size(self) -> int:
        return len(self.members)

    @property
    def has_payment_instrument(self) -> bool:
        return self.payment_instrument is not None

    @property
    def active_tiers(self) -> frozenset[ServiceTier]:
        return frozenset(s.tier for s in self.subscriptions)

    def has_tier(self, tier: ServiceTier) -> bool:
        return tier in self.active_tiers

    def subscription_for(self, tier: ServiceTier) -> TierSubscription | None:
        for sub in self.subscriptions:
            if sub.tier == tier:
                return sub
        return None

    def count_by_classification(self, classification: MemberClassification) -> int:
        return sum(1 for m in self.members if m.classification == classification)

    def with_members(self, members: tuple[Member, ...]) -> Client:
        return replace(self, members=tuple(members))

    def with_subscriptions(self, subscriptions: tuple[TierSubscription, ...]) -> Client:
        return replace(self, subscriptions=tuple(subscriptions))

    def with_payment_instrument(self, instrument: PaymentInstrument | None) -> Client:
        return replace(self, payment_instrument=instrument)
