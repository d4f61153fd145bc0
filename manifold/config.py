"""
Engine configuration.

Values are layered: built-in defaults, then an optional YAML file, then
MANIFOLD_* environment variables.

Environment:
    MANIFOLD_CONFIG_FILE            Path to a YAML config file
    MANIFOLD_LOG_LEVEL              Logging level for setup_logging()
    MANIFOLD_CACHE_ENABLED          "0"/"false" disables memo caches
    MANIFOLD_DEFAULT_GAME_VERSION   min_game_version for unregistered games
    MANIFOLD_POWER_TOLERANCE        Allowed power/power_tier divergence
    MANIFOLD_HIGH_VALUE_THRESHOLD   Numeric property warning threshold
    MANIFOLD_MAX_ABILITIES          Ability count warning threshold
"""

from __future__ import annotations
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any
import os

import yaml

from .utils.logger import get_logger

logger = get_logger(__name__)

ENV_PREFIX = "MANIFOLD_"


@dataclass(frozen=True)
class EngineConfig:
    """Tunable engine settings."""
    log_level: str = "INFO"
    cache_enabled: bool = True
    default_game_version: str = "1.0.0"
    power_tolerance: float = 0.2
    high_value_threshold: float = 10000.0
    max_abilities: int = 8

    @classmethod
    def load(cls, path: str | Path | None = None) -> EngineConfig:
        """Load config from defaults, YAML file and environment."""
        values: dict[str, Any] = {}

        path = path or os.getenv(f"{ENV_PREFIX}CONFIG_FILE")
        if path:
            values.update(_read_yaml(Path(path)))

        for f in fields(cls):
            raw = os.getenv(f"{ENV_PREFIX}{f.name.upper()}")
            if raw is not None:
                values[f.name] = raw

        return cls.from_dict(values)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EngineConfig:
        """Build a config, coercing values to the declared field types."""
        kwargs: dict[str, Any] = {}
        defaults = cls()
        for f in fields(cls):
            if f.name not in data:
                continue
            kwargs[f.name] = _coerce(data[f.name], type(getattr(defaults, f.name)))
        unknown = set(data) - {f.name for f in fields(cls)}
        if unknown:
            logger.debug(f"Ignoring unknown config keys: {sorted(unknown)}")
        return cls(**kwargs)


def _read_yaml(path: Path) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    # Allow the settings to be nested under a top-level "manifold" key
    return data.get("manifold", data)


def _coerce(value: Any, target: type) -> Any:
    if target is bool:
        if isinstance(value, str):
            return value.strip().lower() not in ("0", "false", "no", "off", "")
        return bool(value)
    return target(value)
