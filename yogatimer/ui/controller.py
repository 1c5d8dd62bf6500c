"""Controller shared by the CLI and the web UI."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from yogatimer.core.engine import WorkoutEngine
from yogatimer.core.notifications import Notifier
from yogatimer.core.state import TimerState
from yogatimer.settings import Settings, get_settings
from yogatimer.workout.flatten import FlattenedStep
from yogatimer.workout.library import (
    WorkoutNotFoundError,
    get_library_workout,
    list_library,
)
from yogatimer.workout.model import Workout
from yogatimer.workout.parser import load_workout
from yogatimer.workout.user_workouts import (
    list_user_workouts,
    load_user_workout,
    user_workout_path,
)


WorkoutSource = Literal["builtin", "custom"]


@dataclass(frozen=True)
class WorkoutOption:
    key: str
    name: str
    description: str
    source: WorkoutSource


class TimerController:
    """Resolves workouts from storage and forwards commands to the engine.

    Storage failures raise ``WorkoutNotFoundError``/``WorkoutParseError`` here
    and leave the engine's session untouched.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        notifier: Notifier | None = None,
        *,
        engine: WorkoutEngine | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._engine = engine or WorkoutEngine(
            notifier,
            tick_seconds=self._settings.tick_seconds,
        )

    @property
    def engine(self) -> WorkoutEngine:
        return self._engine

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def state(self) -> TimerState:
        return self._engine.state

    @property
    def steps(self) -> tuple[FlattenedStep, ...]:
        return self._engine.steps

    def list_workouts(self) -> list[WorkoutOption]:
        options = [
            WorkoutOption(
                key=entry.key,
                name=entry.name,
                description=entry.description,
                source="builtin",
            )
            for entry in list_library()
        ]
        builtin_keys = {option.key for option in options}
        for item in list_user_workouts(base_dir=self._settings.workouts_dir):
            if item.key in builtin_keys:
                continue
            options.append(
                WorkoutOption(
                    key=item.key,
                    name=item.name,
                    description=item.description,
                    source="custom",
                )
            )
        return options

    def get_workout(self, key: str) -> Workout:
        try:
            return get_library_workout(key)
        except WorkoutNotFoundError:
            pass
        path = user_workout_path(key, base_dir=self._settings.workouts_dir)
        if not path.exists():
            raise WorkoutNotFoundError(f"Unknown workout '{key}'")
        return load_user_workout(path)

    def open_workout(self, key: str) -> Workout:
        workout = self.get_workout(key)
        self._engine.load(workout)
        return workout

    def open_file(self, path: str | Path) -> Workout:
        workout = load_workout(path)
        self._engine.load(workout)
        return workout

    def start(self) -> None:
        self._engine.start()

    def toggle_pause(self) -> None:
        self._engine.toggle_pause()

    def skip(self) -> None:
        self._engine.skip()

    def jump_to_timer(self, index: int) -> None:
        self._engine.jump_to_timer(index)

    def stop(self) -> None:
        self._engine.stop()
