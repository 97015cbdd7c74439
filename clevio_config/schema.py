"""
Configuration schema (``clevio_config.schema``).

Responsibility
--------------
Frozen dataclasses describing the engine configuration: fee rates per tier,
the eligibility thresholds, payroll lead time, commitment length, the
advisory session catalog and the bookable slot grid.

Architecture position
---------------------
**Config layer** -- pure data.  Imports kernel domain enums only.

Invariants enforced
-------------------
* Every ``ServiceTier`` has exactly one ``TierDef``.
* Fee rates are non-negative Decimals.
* Slot grid: ``day_start < day_end`` and a positive interval.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from decimal import Decimal

from clevio_kernel.domain.client import ServiceTier


@dataclass(frozen=True)
class TierDef:
    """Fee rate and commitment length of one service tier."""

    tier: ServiceTier
    fee_rate: Decimal
    commitment_months: int = 6
    label: str = ""

    def __post_init__(self) -> None:
        if self.fee_rate < 0:
            raise ValueError(f"fee_rate for {self.tier.value} cannot be negative")
        if self.commitment_months < 0:
            raise ValueError(f"commitment_months for {self.tier.value} cannot be negative")


@dataclass(frozen=True)
class SessionTypeDef:
    """An advisory session type offered on the dashboard."""

    type_id: str
    name: str
    tier: ServiceTier
    default_duration_minutes: int
    description: str = ""

    def __post_init__(self) -> None:
        if self.tier == ServiceTier.PAYROLL:
            raise ValueError(f"session type {self.type_id} must belong to the tax or advisory tier")
        if self.default_duration_minutes <= 0:
            raise ValueError(f"session type {self.type_id} needs a positive default duration")


@dataclass(frozen=True)
class SlotGridDef:
    """Half-hourly start times offered for advisory bookings."""

    day_start: time
    day_end: time
    interval_minutes: int
    excluded: tuple[tuple[time, time], ...] = ()

    def __post_init__(self) -> None:
        if not self.day_start < self.day_end:
            raise ValueError("slot grid day_start must be before day_end")
        if self.interval_minutes <= 0:
            raise ValueError("slot grid interval_minutes must be positive")
        for start, end in self.excluded:
            if not start < end:
                raise ValueError("slot grid exclusions need start < end")


@dataclass(frozen=True)
class EngineConfig:
    """Complete engine configuration."""

    currency: str
    minimum_headcount: int
    payroll_lead_days: int
    tiers: tuple[TierDef, ...]
    allowed_durations: tuple[int, ...]
    session_types: tuple[SessionTypeDef, ...]
    slot_grid: SlotGridDef
    advisor_name: str = ""
    checksum: str = ""

    def __post_init__(self) -> None:
        if self.minimum_headcount < 0:
            raise ValueError("minimum_headcount cannot be negative")
        if self.payroll_lead_days < 0:
            raise ValueError("payroll_lead_days cannot be negative")
        declared = [t.tier for t in self.tiers]
        if sorted(declared, key=lambda t: t.value) != sorted(ServiceTier, key=lambda t: t.value):
            raise ValueError("every service tier must be configured exactly once")
        ids = [s.type_id for s in self.session_types]
        if len(ids) != len(set(ids)):
            raise ValueError("duplicate session type ids")
        if not self.allowed_durations or any(d <= 0 for d in self.allowed_durations):
            raise ValueError("allowed_durations must be non-empty and positive")

    def tier(self, tier: ServiceTier) -> TierDef:
        for t in self.tiers:
            if t.tier == tier:
                return t
        raise KeyError(tier)

    @property
    def fee_rates(self) -> dict[ServiceTier, Decimal]:
        return {t.tier: t.fee_rate for t in self.tiers}

    def session_type(self, type_id: str) -> SessionTypeDef:
        for s in self.session_types:
            if s.type_id == type_id:
                return s
        raise KeyError(type_id)
