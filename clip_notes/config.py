"""Runtime settings for clip-notes, read from the environment (and .env)."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv


def _read_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {raw!r}")
    return value


def _read_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be a whole number, got {raw!r}")
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {raw!r}")
    return value


@dataclass(frozen=True)
class Settings:
    """Playback tuning knobs. Defaults match a ~100ms progress cadence."""

    epsilon: float = 0.1  # advance this early before a clip ends
    seek_guard: float = 0.5  # min distance from the last seek before auto-seeking again
    seek_dedup: float = 0.1  # virtual seeks closer than this to the last one are dropped
    seek_settle_samples: int = 10  # stale samples tolerated before a seek counts as landed
    prev_restart_threshold: float = 2.0
    skip_seconds: float = 5.0
    tick_seconds: float = 0.1
    gemini_model: str = "gemini-3-flash-preview"
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """
        Build settings from CLIPNOTE_* environment variables.

        Raises:
            ValueError: If a variable is set to something unusable
        """
        if dotenv:
            load_dotenv()

        defaults = cls()
        return cls(
            epsilon=_read_float("CLIPNOTE_EPSILON", defaults.epsilon),
            seek_guard=_read_float("CLIPNOTE_SEEK_GUARD", defaults.seek_guard),
            seek_dedup=_read_float("CLIPNOTE_SEEK_DEDUP", defaults.seek_dedup),
            seek_settle_samples=_read_int(
                "CLIPNOTE_SEEK_SETTLE_SAMPLES", defaults.seek_settle_samples
            ),
            prev_restart_threshold=_read_float(
                "CLIPNOTE_PREV_RESTART_SECONDS", defaults.prev_restart_threshold
            ),
            skip_seconds=_read_float("CLIPNOTE_SKIP_SECONDS", defaults.skip_seconds),
            tick_seconds=_read_float("CLIPNOTE_TICK_SECONDS", defaults.tick_seconds),
            gemini_model=os.environ.get("CLIPNOTE_GEMINI_MODEL") or defaults.gemini_model,
            log_level=(os.environ.get("CLIPNOTE_LOG_LEVEL") or defaults.log_level).upper(),
        )
