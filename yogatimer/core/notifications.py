"""Notification hooks fired by the engine and a settings-aware announcer."""

from __future__ import annotations

from typing import Callable, Optional, Protocol

from yogatimer.settings import Settings
from yogatimer.workout.flatten import FlattenedStep, RepeatContext
from yogatimer.workout.model import Workout


WORKOUT_COMPLETE_MESSAGE = "Workout complete! Great job!"


class Notifier(Protocol):
    def on_step_started(self, step: FlattenedStep) -> None: ...

    def on_step_completed(self, step: FlattenedStep) -> None: ...

    def on_workout_completed(self, workout: Optional[Workout]) -> None: ...


class NullNotifier:
    def on_step_started(self, step: FlattenedStep) -> None:
        return None

    def on_step_completed(self, step: FlattenedStep) -> None:
        return None

    def on_workout_completed(self, workout: Optional[Workout]) -> None:
        return None


def section_announcement(name: str, current_repeat: int, total_repeats: int) -> str:
    if total_repeats > 1:
        return f"{name}, repeat {current_repeat} of {total_repeats}"
    return name


class Announcer:
    """Turns engine notifications into speech and chime cues.

    A section is announced when the step sequence enters one of its
    iterations, so outer sections are not repeated while their children play.
    """

    def __init__(
        self,
        settings: Settings,
        speak: Callable[[str], None],
        chime: Callable[[], None],
    ) -> None:
        self._settings = settings
        self._speak = speak
        self._chime = chime
        self._last_lineage: tuple[RepeatContext, ...] = ()

    def on_step_started(self, step: FlattenedStep) -> None:
        if step.global_index == 0:
            self._last_lineage = ()
        entered = _entered_contexts(self._last_lineage, step.lineage)
        self._last_lineage = step.lineage
        if not self._settings.enable_tts:
            return
        parts = [
            section_announcement(ctx.section.name, ctx.current_repeat, ctx.total_repeats)
            for ctx in entered
        ]
        parts.append(step.name)
        self._speak(". ".join(parts))

    def on_step_completed(self, step: FlattenedStep) -> None:
        if self._settings.enable_sound_effects:
            self._chime()

    def on_workout_completed(self, workout: Optional[Workout]) -> None:
        self._last_lineage = ()
        if self._settings.enable_tts:
            self._speak(WORKOUT_COMPLETE_MESSAGE)


def _entered_contexts(
    previous: tuple[RepeatContext, ...],
    current: tuple[RepeatContext, ...],
) -> list[RepeatContext]:
    for depth, ctx in enumerate(current):
        if depth >= len(previous) or not _same_iteration(previous[depth], ctx):
            return list(current[depth:])
    return []


def _same_iteration(a: RepeatContext, b: RepeatContext) -> bool:
    return a.section.id == b.section.id and a.current_repeat == b.current_repeat
