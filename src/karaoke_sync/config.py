"""Configuration settings for karaoke_sync."""

import math
import os
from dataclasses import dataclass
from typing import Optional

from .exceptions import ConfigError


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# Alignment (can be overridden via environment variables)
TOLERANCE = _env_float("KARAOKE_SYNC_TOLERANCE", 0.3)
MIN_SEGMENT_DURATION = _env_float("KARAOKE_SYNC_MIN_DURATION", 0.1)
STRICT_LINE_COUNT = _env_flag("KARAOKE_SYNC_STRICT_LINE_COUNT")

# Quality reporting
LOW_CONFIDENCE_RATIO = _env_float("KARAOKE_SYNC_LOW_CONFIDENCE_RATIO", 2.0)

# Upstream oracle calls
ORACLE_TIMEOUT = _env_float("KARAOKE_SYNC_ORACLE_TIMEOUT", 180.0)

# Editing
MIN_EDIT_DURATION = 0.1  # Nudged segments keep at least this span
MAX_TOLERANCE = 2.0


def _check(
    tolerance: float,
    min_duration: float,
    low_confidence_ratio: float,
    oracle_timeout: Optional[float],
) -> None:
    if not math.isfinite(tolerance) or not (0.0 <= tolerance <= MAX_TOLERANCE):
        raise ConfigError(f"Tolerance must be between 0 and {MAX_TOLERANCE} seconds")

    if not math.isfinite(min_duration) or min_duration <= 0:
        raise ConfigError("Minimum segment duration must be positive")

    if not math.isfinite(low_confidence_ratio) or low_confidence_ratio < 1.0:
        raise ConfigError("Low-confidence ratio must be >= 1.0")

    if oracle_timeout is not None and (not math.isfinite(oracle_timeout) or oracle_timeout <= 0):
        raise ConfigError("Oracle timeout must be a positive number of seconds")


def validate_config() -> None:
    """Validate configuration values."""
    _check(TOLERANCE, MIN_SEGMENT_DURATION, LOW_CONFIDENCE_RATIO, ORACLE_TIMEOUT)


# Validate config on import
validate_config()


@dataclass(frozen=True)
class SyncConfig:
    """Immutable settings for one sync service instance."""

    tolerance: float = TOLERANCE
    min_duration: float = MIN_SEGMENT_DURATION
    strict_line_count: bool = STRICT_LINE_COUNT
    low_confidence_ratio: float = LOW_CONFIDENCE_RATIO
    oracle_timeout: Optional[float] = ORACLE_TIMEOUT

    def __post_init__(self) -> None:
        _check(
            self.tolerance,
            self.min_duration,
            self.low_confidence_ratio,
            self.oracle_timeout,
        )

    @classmethod
    def from_env(cls) -> "SyncConfig":
        """Build a config from the current environment (re-read, not cached)."""
        return cls(
            tolerance=_env_float("KARAOKE_SYNC_TOLERANCE", 0.3),
            min_duration=_env_float("KARAOKE_SYNC_MIN_DURATION", 0.1),
            strict_line_count=_env_flag("KARAOKE_SYNC_STRICT_LINE_COUNT"),
            low_confidence_ratio=_env_float("KARAOKE_SYNC_LOW_CONFIDENCE_RATIO", 2.0),
            oracle_timeout=_env_float("KARAOKE_SYNC_ORACLE_TIMEOUT", 180.0),
        )
