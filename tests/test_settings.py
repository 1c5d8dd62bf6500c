from __future__ import annotations

from pathlib import Path

import pytest

from yogatimer.settings import get_settings, parse_theme


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "YOGATIMER_WORKOUTS_DIR",
        "YOGATIMER_LOG_LEVEL",
        "YOGATIMER_TICK_SECONDS",
        "YOGATIMER_ENABLE_TTS",
        "YOGATIMER_ENABLE_SOUND",
        "YOGATIMER_SOUND_VOLUME",
        "YOGATIMER_THEME",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings.workouts_dir == Path.home() / ".yogatimer" / "workouts"
    assert settings.log_level == "INFO"
    assert settings.tick_seconds == 1.0
    assert settings.enable_tts
    assert settings.enable_sound_effects
    assert settings.theme == "system"


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("YOGATIMER_WORKOUTS_DIR", str(tmp_path))
    monkeypatch.setenv("YOGATIMER_LOG_LEVEL", "debug")
    monkeypatch.setenv("YOGATIMER_TICK_SECONDS", "0.5")
    monkeypatch.setenv("YOGATIMER_ENABLE_TTS", "off")
    monkeypatch.setenv("YOGATIMER_ENABLE_SOUND", "no")
    monkeypatch.setenv("YOGATIMER_SOUND_VOLUME", "3")
    monkeypatch.setenv("YOGATIMER_THEME", "Dark")

    settings = get_settings()

    assert settings.workouts_dir == tmp_path
    assert settings.log_level == "DEBUG"
    assert settings.tick_seconds == 0.5
    assert not settings.enable_tts
    assert not settings.enable_sound_effects
    assert settings.sound_volume == 1.0
    assert settings.theme == "dark"


def test_bad_values_fall_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("YOGATIMER_TICK_SECONDS", "-2")
    monkeypatch.setenv("YOGATIMER_ENABLE_TTS", "maybe")
    monkeypatch.setenv("YOGATIMER_SOUND_VOLUME", "loud")

    settings = get_settings()

    assert settings.tick_seconds == 1.0
    assert settings.enable_tts
    assert settings.sound_volume == 0.7


def test_parse_theme() -> None:
    assert parse_theme("light") == "light"
    assert parse_theme(" DARK ") == "dark"
    assert parse_theme("neon") == "system"
    assert parse_theme(None) == "system"
