"""Load, validate, and hot-reload the cycle engine configuration.

The config lives in ``cycle_config.yaml`` alongside this module.  At startup
it is loaded once and cached.  Call ``reload_cycle_config()`` to re-read from
disk after an edit; no restart required.

Usage::

    from src.cycle.config_loader import get_cycle_config

    config = get_cycle_config()
    config.luteal_phase_days        # 14
    config.default_cycle_length     # 28
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger("lunara.cycle.config")

# Path to the YAML file sitting next to this module
_CONFIG_PATH = Path(__file__).parent / "cycle_config.yaml"


@dataclass(frozen=True)
class CycleConfig:
    """Complete, validated cycle engine configuration.

    The defaults match the bundled YAML, so ``CycleConfig()`` is usable in
    tests without touching disk.

    Attributes:
        version:                  Config schema version string.
        default_cycle_length:     Fallback cycle length in days.
        default_period_length:    Fallback period length in days.
        luteal_phase_days:        Days from ovulation to the next period.
        fertile_days_before_ovulation: Fertile window reach before ovulation.
        pms_days:                 Length of the PMS window.
        medium_min_cycles:        Intervals needed for medium confidence.
        high_min_cycles:          Intervals needed for high confidence.
        calendar_horizon_days:    Default span for calendar marks.
        strip_days:               Default span for the day strip.
    """

    version: str = "1.0"
    default_cycle_length: int = 28
    default_period_length: int = 5
    luteal_phase_days: int = 14
    fertile_days_before_ovulation: int = 5
    pms_days: int = 5
    medium_min_cycles: int = 1
    high_min_cycles: int = 3
    calendar_horizon_days: int = 90
    strip_days: int = 30


class ConfigValidationError(ValueError):
    """Raised when cycle_config.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigValidationError: If the YAML is malformed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Cycle config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            return yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error in {path}: {exc}") from exc


def _validate_and_build(raw: dict) -> CycleConfig:
    """Validate the raw YAML dict and construct a CycleConfig.

    Missing keys fall back to the dataclass defaults; present keys must be
    positive integers (zero is allowed only for the confidence thresholds).

    Raises:
        ConfigValidationError: Listing every invalid value found.
    """
    errors: list[str] = []
    base = CycleConfig()

    def _int(section: dict, key: str, path: str, default: int, minimum: int = 1) -> int:
        if key not in section:
            return default
        value = section[key]
        if isinstance(value, bool) or not isinstance(value, int):
            errors.append(f"{path} must be an integer, got {value!r}")
            return default
        if value < minimum:
            errors.append(f"{path} = {value} must be >= {minimum}")
            return default
        return value

    def _section(key: str) -> dict:
        section = raw.get(key) or {}
        if not isinstance(section, dict):
            errors.append(f"'{key}' must be a mapping")
            return {}
        return section

    defaults = _section("defaults")
    fertile = _section("fertile_window")
    pms = _section("pms_window")
    confidence = _section("confidence")
    calendar = _section("calendar")

    medium = _int(confidence, "medium_min_cycles", "confidence.medium_min_cycles",
                  base.medium_min_cycles, minimum=0)
    high = _int(confidence, "high_min_cycles", "confidence.high_min_cycles",
                base.high_min_cycles, minimum=0)
    if high < medium:
        errors.append(
            f"confidence.high_min_cycles ({high}) must be >= "
            f"confidence.medium_min_cycles ({medium})"
        )

    config = CycleConfig(
        version=str(raw.get("version", base.version)),
        default_cycle_length=_int(defaults, "cycle_length", "defaults.cycle_length",
                                  base.default_cycle_length),
        default_period_length=_int(defaults, "period_length", "defaults.period_length",
                                   base.default_period_length),
        luteal_phase_days=_int(raw, "luteal_phase_days", "luteal_phase_days",
                               base.luteal_phase_days),
        fertile_days_before_ovulation=_int(
            fertile, "days_before_ovulation", "fertile_window.days_before_ovulation",
            base.fertile_days_before_ovulation, minimum=0,
        ),
        pms_days=_int(pms, "days", "pms_window.days", base.pms_days),
        medium_min_cycles=medium,
        high_min_cycles=high,
        calendar_horizon_days=_int(calendar, "horizon_days", "calendar.horizon_days",
                                   base.calendar_horizon_days),
        strip_days=_int(calendar, "strip_days", "calendar.strip_days", base.strip_days),
    )

    if errors:
        raise ConfigValidationError(
            f"cycle_config.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )
    return config


def load_cycle_config(path: Path | None = None) -> CycleConfig:
    """Load and validate the cycle config from disk.

    Args:
        path: Override path to YAML. Uses the bundled cycle_config.yaml by default.
    """
    target = path or _CONFIG_PATH
    raw: Any = _load_yaml(target)
    if not isinstance(raw, dict):
        raise ConfigValidationError(f"{target} must contain a mapping at the top level")
    config = _validate_and_build(raw)
    logger.info("Loaded cycle config v%s from %s", config.version, target)
    return config


# ---------------------------------------------------------------------------
# Global singleton with hot-reload support
# ---------------------------------------------------------------------------

_config: CycleConfig | None = None
_config_lock = threading.Lock()


def get_cycle_config() -> CycleConfig:
    """Return the global CycleConfig singleton, loading it on first call."""
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:  # double-checked locking
                _config = load_cycle_config()
    return _config


def reload_cycle_config(path: Path | None = None) -> CycleConfig:
    """Reload the cycle config from disk and replace the global singleton.

    If validation fails, the old config is retained and the error is re-raised.

    Raises:
        ConfigValidationError: If the new config is invalid.
        FileNotFoundError:     If the config file is missing.
    """
    global _config
    new_config = load_cycle_config(path)  # validate before acquiring lock
    with _config_lock:
        old_version = _config.version if _config else "none"
        _config = new_config
    logger.info("Reloaded cycle config: %s → %s", old_version, new_config.version)
    return new_config
