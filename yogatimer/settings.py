"""Runtime settings resolved from the environment.

Every value can be overridden with a ``YOGATIMER_*`` environment variable;
the CLI applies its own flags on top for a single run.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal


Theme = Literal["light", "dark", "system"]

_THEMES: tuple[Theme, ...] = ("light", "dark", "system")
_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _default_workouts_dir() -> Path:
    return Path.home() / ".yogatimer" / "workouts"


@dataclass(frozen=True)
class Settings:
    """Immutable application settings."""

    workouts_dir: Path
    log_level: str = "INFO"
    tick_seconds: float = 1.0

    # Audio
    enable_tts: bool = True
    tts_language: str = "en-US"
    enable_sound_effects: bool = True
    sound_volume: float = 0.7

    # Display
    theme: Theme = "system"


def parse_theme(value: str | None) -> Theme:
    normalized = (value or "").strip().lower()
    for theme in _THEMES:
        if theme == normalized:
            return theme
    return "system"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    normalized = raw.strip().lower()
    if normalized in _TRUTHY:
        return True
    if normalized in _FALSY:
        return False
    return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def get_settings() -> Settings:
    """Build Settings from defaults merged with environment overrides."""
    workouts_dir = os.getenv("YOGATIMER_WORKOUTS_DIR")
    tick_seconds = _env_float("YOGATIMER_TICK_SECONDS", 1.0)
    return Settings(
        workouts_dir=Path(workouts_dir).expanduser() if workouts_dir else _default_workouts_dir(),
        log_level=os.getenv("YOGATIMER_LOG_LEVEL", "INFO").upper(),
        tick_seconds=tick_seconds if tick_seconds > 0 else 1.0,
        enable_tts=_env_bool("YOGATIMER_ENABLE_TTS", True),
        tts_language=os.getenv("YOGATIMER_TTS_LANGUAGE", "en-US"),
        enable_sound_effects=_env_bool("YOGATIMER_ENABLE_SOUND", True),
        sound_volume=max(0.0, min(1.0, _env_float("YOGATIMER_SOUND_VOLUME", 0.7))),
        theme=parse_theme(os.getenv("YOGATIMER_THEME")),
    )
