"""Engine configuration loaded from environment variables."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Optional

from planning_engine.schema import WEEK_STARTS

ENV_PREFIX = "PLANNING_ENGINE_"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class EngineConfig:
    """Tunable policy values threaded into the engine by callers."""

    week_start: str = "sunday"
    cycle_week_count: int = 12
    authentic_weekly_cap: int = 14
    min_display_minutes: int = 30
    streak_lookback_weeks: int = 52
    analytics_window_weeks: int = 12
    month_padding_days: int = 0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> EngineConfig:
        """Build a config from ``PLANNING_ENGINE_*`` variables, falling back to defaults."""

        environ = os.environ if environ is None else environ
        defaults = cls()

        def _int(name: str, default: int, minimum: int = 1) -> int:
            key = ENV_PREFIX + name
            raw = environ.get(key)
            if raw in (None, ""):
                return default
            try:
                value = int(raw)
            except ValueError as exc:
                raise ValueError(f"{key} must be an integer, got '{raw}'") from exc
            if value < minimum:
                raise ValueError(f"{key} must be >= {minimum}, got {value}")
            return value

        week_start = environ.get(ENV_PREFIX + "WEEK_START", defaults.week_start).strip().lower()
        if week_start not in WEEK_STARTS:
            raise ValueError(f"{ENV_PREFIX}WEEK_START must be one of {WEEK_STARTS}, got '{week_start}'")

        log_level = environ.get(ENV_PREFIX + "LOG_LEVEL", defaults.log_level).strip().upper()
        if log_level not in LOG_LEVELS:
            raise ValueError(f"{ENV_PREFIX}LOG_LEVEL must be one of {LOG_LEVELS}, got '{log_level}'")

        return cls(
            week_start=week_start,
            cycle_week_count=_int("CYCLE_WEEK_COUNT", defaults.cycle_week_count),
            authentic_weekly_cap=_int("AUTHENTIC_WEEKLY_CAP", defaults.authentic_weekly_cap),
            min_display_minutes=_int("MIN_DISPLAY_MINUTES", defaults.min_display_minutes),
            streak_lookback_weeks=_int("STREAK_LOOKBACK_WEEKS", defaults.streak_lookback_weeks),
            analytics_window_weeks=_int("ANALYTICS_WINDOW_WEEKS", defaults.analytics_window_weeks),
            month_padding_days=_int("MONTH_PADDING_DAYS", defaults.month_padding_days, minimum=0),
            log_level=log_level,
        )


def setup_logging(config: EngineConfig) -> logging.Logger:
    """Configure root logging for scripts."""

    logging.basicConfig(level=getattr(logging, config.log_level), format=LOG_FORMAT)
    return logging.getLogger("planning_engine")
