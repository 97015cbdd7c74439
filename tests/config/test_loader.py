"""
Tests for the YAML configuration loader and the active-config entrypoint.
"""

from datetime import time
from decimal import Decimal
from pathlib import Path

import pytest
import yaml

from clevio_config import DEFAULT_CONFIG_PATH, get_active_config
from clevio_config.loader import (
    compute_checksum,
    load_yaml_file,
    parse_engine_config,
    parse_rate,
    parse_time,
)
from clevio_kernel.domain.client import ServiceTier


def _raw() -> dict:
    return load_yaml_file(DEFAULT_CONFIG_PATH)


class TestPackagedDefaults:
    def test_scalar_settings(self, engine_config):
        assert engine_config.currency == "USD"
        assert engine_config.minimum_headcount == 5
        assert engine_config.payroll_lead_days == 14
        assert engine_config.allowed_durations == (30, 60, 90)

    def test_fee_rates_are_exact_decimals(self, engine_config):
        assert engine_config.fee_rates == {
            ServiceTier.PAYROLL: Decimal("0.02"),
            ServiceTier.TAX: Decimal("0.02"),
            ServiceTier.ADVISORY: Decimal("0.01"),
        }

    def test_session_catalog(self, engine_config):
        assert engine_config.session_type("tax_strategy").tier == ServiceTier.TAX
        assert engine_config.session_type("annual_planning").default_duration_minutes == 90
        assert {s.type_id for s in engine_config.session_types} == {
            "quarterly_review",
            "annual_planning",
            "tax_strategy",
            "cash_flow",
        }

    def test_slot_grid(self, engine_config):
        grid = engine_config.slot_grid

        assert grid.day_start == time(9, 0)
        assert grid.day_end == time(17, 0)
        assert grid.excluded == ((time(12, 0), time(13, 0)),)

    def test_checksum_present(self, engine_config):
        assert len(engine_config.checksum) == 64

    def test_unknown_session_type(self, engine_config):
        with pytest.raises(KeyError):
            engine_config.session_type("golf")


class TestValidation:
    def test_missing_key_raises_key_error(self):
        data = _raw()
        del data["minimum_headcount"]

        with pytest.raises(KeyError):
            parse_engine_config(data)

    def test_missing_tier_rejected(self):
        data = _raw()
        data["tiers"] = [t for t in data["tiers"] if t["tier"] != "advisory"]

        with pytest.raises(ValueError):
            parse_engine_config(data)

    def test_float_rate_rejected(self):
        with pytest.raises(ValueError):
            parse_rate(0.02)

    def test_negative_rate_rejected(self):
        data = _raw()
        data["tiers"][0]["fee_rate"] = "-0.01"

        with pytest.raises(ValueError):
            parse_engine_config(data)

    def test_payroll_session_type_rejected(self):
        data = _raw()
        data["session_types"][0]["tier"] = "payroll"

        with pytest.raises(ValueError):
            parse_engine_config(data)

    def test_bad_time(self):
        with pytest.raises(ValueError):
            parse_time(900)


class TestChecksum:
    def test_deterministic(self):
        assert compute_checksum(_raw()) == compute_checksum(_raw())

    def test_changes_with_content(self):
        data = _raw()
        before = compute_checksum(data)
        data["payroll_lead_days"] = 7

        assert compute_checksum(data) != before


class TestActiveConfig:
    def test_override_path(self, tmp_path: Path):
        data = _raw()
        data["minimum_headcount"] = 3
        path = tmp_path / "engine.yaml"
        path.write_text(yaml.safe_dump(data))

        assert get_active_config(path).minimum_headcount == 3

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            get_active_config(tmp_path / "absent.yaml")

    def test_emits_config_trace(self, captured_logs):
        get_active_config()

        traces = [r for r in captured_logs() if r["message"] == "CLEVIO_CONFIG_TRACE"]
        assert traces
        assert traces[-1]["config_path"].endswith("engine.yaml")
        assert traces[-1]["tier_count"] == 3
