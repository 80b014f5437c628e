"""Configuration for croncalc.

Values come from environment variables with the ``CRONCALC_`` prefix:

    CRONCALC_MAX_YEAR    last year an occurrence sequence may reach (default 9000)
    CRONCALC_MIN_YEAR    first year an occurrence sequence may reach (default 1)
    CRONCALC_LOG_LEVEL   log level used by the command line (default WARNING)

Usage:
    >>> from croncalc.config import get_config, load_config
    >>>
    >>> config = get_config()
    >>> config.max_year
    9000
    >>> load_config({"CRONCALC_MAX_YEAR": "2100"}).max_year
    2100
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from datetime import MAXYEAR, MINYEAR
from typing import Mapping

from croncalc.errors import ConfigError

ENV_PREFIX = "CRONCALC_"

DEFAULT_MAX_YEAR = 9000
DEFAULT_LOG_LEVEL = "WARNING"

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class CronConfig:
    """Process-wide settings.

    Attributes:
        max_year: Occurrence sequences end once a result lies after this year.
        min_year: Occurrence sequences end once a result lies before this year.
        log_level: Log level name used by the command line.
    """

    max_year: int = DEFAULT_MAX_YEAR
    min_year: int = MINYEAR
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self) -> None:
        if not MINYEAR <= self.max_year <= MAXYEAR:
            raise ConfigError(f"max_year must be between {MINYEAR} and {MAXYEAR}, got {self.max_year}")
        if not MINYEAR <= self.min_year <= self.max_year:
            raise ConfigError(
                f"min_year must be between {MINYEAR} and max_year ({self.max_year}), got {self.min_year}"
            )
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(f"Unknown log level: {self.log_level!r}")

    @property
    def log_level_value(self) -> int:
        """Numeric logging level."""
        return getattr(logging, self.log_level.upper())


def _read_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from None


def load_config(environ: Mapping[str, str] | None = None) -> CronConfig:
    """Build a configuration from environment variables.

    Args:
        environ: Mapping to read from. Defaults to ``os.environ``.

    Returns:
        CronConfig instance.

    Raises:
        ConfigError: If a value is malformed or out of range.
    """
    env = os.environ if environ is None else environ
    return CronConfig(
        max_year=_read_int(env, "MAX_YEAR", DEFAULT_MAX_YEAR),
        min_year=_read_int(env, "MIN_YEAR", MINYEAR),
        log_level=env.get(ENV_PREFIX + "LOG_LEVEL") or DEFAULT_LOG_LEVEL,
    )


_global_config: CronConfig | None = None
_lock = threading.Lock()


def get_config() -> CronConfig:
    """Get the global configuration, loading it from the environment once."""
    global _global_config

    with _lock:
        if _global_config is None:
            _global_config = load_config()
        return _global_config


def reset_config() -> None:
    """Drop the global configuration so the next access reloads it."""
    global _global_config

    with _lock:
        _global_config = None
