"""
clevio_config -- single public entrypoint for engine configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  Engines and services receive the returned
    ``EngineConfig`` by injection and never read YAML themselves.

Architecture position:
    Configuration -- sits above ``clevio_kernel`` and below
    ``clevio_engines`` / ``clevio_services``.  The kernel MUST NEVER import
    from ``clevio_config``.

Failure modes:
    - ``FileNotFoundError`` -- the configuration file does not exist.
    - ``KeyError`` / ``ValueError`` -- schema validation failures.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``CLEVIO_CONFIG_TRACE`` log entry with the file path and checksum, so
    each computed fee or date can be tied to the configuration that
    governed it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from clevio_config.loader import load_yaml_file, parse_engine_config
from clevio_config.schema import EngineConfig, SessionTypeDef, SlotGridDef, TierDef

_logger = logging.getLogger("clevio.config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults" / "engine.yaml"


def get_active_config(config_path: Path | None = None) -> EngineConfig:
    """The ONLY public configuration entrypoint.

    Args:
        config_path: Override path to the YAML file.  Defaults to the
            packaged ``defaults/engine.yaml``.

    Returns:
        A validated, frozen ``EngineConfig``.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    config = parse_engine_config(load_yaml_file(path))

    _logger.info(
        "CLEVIO_CONFIG_TRACE",
        extra={
            "trace_type": "CLEVIO_CONFIG_TRACE",
            "config_path": str(path),
            "checksum": config.checksum,
            "tier_count": len(config.tiers),
            "session_type_count": len(config.session_types),
        },
    )
    return config


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "EngineConfig",
    "SessionTypeDef",
    "SlotGridDef",
    "TierDef",
    "get_active_config",
]
