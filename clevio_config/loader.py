"""
Configuration Loader (``clevio_config.loader``).

Responsibility
--------------
Loads the engine YAML file and parses it into the typed
``clevio_config.schema`` dataclasses.  Runtime callers go through
``clevio_config.get_active_config()`` instead of calling this directly.

Invariants enforced
-------------------
* Parse errors raise ``ValueError`` or ``KeyError``; required fields never
  receive silent defaults.
* Fee rates are parsed into ``Decimal`` from their string form.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys -> ``KeyError`` propagates.
* Bad time strings / rates -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from datetime import time
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from clevio_config.schema import EngineConfig, SessionTypeDef, SlotGridDef, TierDef
from clevio_kernel.domain.client import ServiceTier


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_time(value: Any) -> time:
    """Parse ``HH:MM`` strings (or time objects) from YAML."""
    if isinstance(value, time):
        return value
    if isinstance(value, str):
        return time.fromisoformat(value)
    raise ValueError(f"Cannot parse time from {value!r}")


def parse_rate(value: Any) -> Decimal:
    """Parse a fee rate; floats are rejected to keep rates exact."""
    if isinstance(value, float):
        raise ValueError(f"Fee rate {value!r} must be quoted to stay exact")
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"Invalid fee rate {value!r}") from e


def parse_tier(data: dict[str, Any]) -> TierDef:
    return TierDef(
        tier=ServiceTier(data["tier"]),
        fee_rate=parse_rate(data["fee_rate"]),
        commitment_months=int(data.get("commitment_months", 6)),
        label=data.get("label", ""),
    )


def parse_session_type(data: dict[str, Any]) -> SessionTypeDef:
    return SessionTypeDef(
        type_id=data["id"],
        name=data["name"],
        tier=ServiceTier(data["tier"]),
        default_duration_minutes=int(data["default_duration_minutes"]),
        description=data.get("description", ""),
    )


def parse_slot_grid(data: dict[str, Any]) -> SlotGridDef:
    return SlotGridDef(
        day_start=parse_time(data["day_start"]),
        day_end=parse_time(data["day_end"]),
        interval_minutes=int(data["interval_minutes"]),
        excluded=tuple(
            (parse_time(start), parse_time(end))
            for start, end in data.get("excluded", ())
        ),
    )


def parse_engine_config(data: dict[str, Any]) -> EngineConfig:
    """
    Parse an ``EngineConfig`` from a dict.

    Raises:
        KeyError: if a required key is missing.
        ValueError: if a value is out of range or malformed.
    """
    return EngineConfig(
        currency=data["currency"],
        minimum_headcount=int(data["minimum_headcount"]),
        payroll_lead_days=int(data["payroll_lead_days"]),
        tiers=tuple(parse_tier(t) for t in data["tiers"]),
        allowed_durations=tuple(int(d) for d in data["allowed_durations"]),
        session_types=tuple(parse_session_type(s) for s in data["session_types"]),
        slot_grid=parse_slot_grid(data["slot_grid"]),
        advisor_name=data.get("advisor_name", ""),
        checksum=compute_checksum(data),
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
