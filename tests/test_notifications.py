from __future__ import annotations

from pathlib import Path

from yogatimer.core.notifications import (
    WORKOUT_COMPLETE_MESSAGE,
    Announcer,
    section_announcement,
)
from yogatimer.settings import Settings
from yogatimer.workout.flatten import flatten_workout
from yogatimer.workout.library import get_library_workout


def _announcer(tmp_path: Path, **overrides: object) -> tuple[Announcer, list[str], list[str]]:
    spoken: list[str] = []
    chimes: list[str] = []
    settings = Settings(workouts_dir=tmp_path, **overrides)  # type: ignore[arg-type]
    announcer = Announcer(settings, speak=spoken.append, chime=lambda: chimes.append("ding"))
    return announcer, spoken, chimes


def test_section_announcement_mentions_repeats_only_when_repeating() -> None:
    assert section_announcement("Sun Salutations", 2, 3) == "Sun Salutations, repeat 2 of 3"
    assert section_announcement("Cool Down", 1, 1) == "Cool Down"


def test_sections_are_announced_when_entered(tmp_path: Path) -> None:
    announcer, spoken, _ = _announcer(tmp_path)
    steps = flatten_workout(get_library_workout("advanced-vinyasa"))

    for step in steps[:7]:
        announcer.on_step_started(step)

    assert spoken[0] == "Sun Salutations, repeat 1 of 3. Forward Fold"
    assert spoken[1] == "Plank"
    assert spoken[5] == "Sun Salutations, repeat 2 of 3. Forward Fold"
    assert spoken[6] == "Plank"

    warrior = [s for s in steps if s.section.name == "Right Side"][0]
    announcer.on_step_started(warrior)
    assert spoken[-1] == "Warrior Flow, repeat 1 of 2. Right Side. Warrior I"


def test_first_step_resets_announcement_context(tmp_path: Path) -> None:
    announcer, spoken, _ = _announcer(tmp_path)
    steps = flatten_workout(get_library_workout("beginner-yoga-flow"))

    announcer.on_step_started(steps[0])
    announcer.on_step_started(steps[0])

    assert spoken == ["Warm Up. Child's Pose", "Warm Up. Child's Pose"]


def test_settings_silence_speech_and_chime(tmp_path: Path) -> None:
    announcer, spoken, chimes = _announcer(
        tmp_path, enable_tts=False, enable_sound_effects=False
    )
    step = flatten_workout(get_library_workout("beginner-yoga-flow"))[0]

    announcer.on_step_started(step)
    announcer.on_step_completed(step)
    announcer.on_workout_completed(None)

    assert spoken == []
    assert chimes == []


def test_completion_cues(tmp_path: Path) -> None:
    announcer, spoken, chimes = _announcer(tmp_path)
    step = flatten_workout(get_library_workout("beginner-yoga-flow"))[0]

    announcer.on_step_completed(step)
    announcer.on_workout_completed(None)

    assert chimes == ["ding"]
    assert spoken == [WORKOUT_COMPLETE_MESSAGE]
