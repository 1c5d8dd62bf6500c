"""Built-in workouts shipped with the app."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from yogatimer.workout.model import Section, Timer, Workout


class WorkoutNotFoundError(LookupError):
    """Raised when no workout exists for a requested key."""


@dataclass(frozen=True)
class LibraryEntry:
    key: str
    name: str
    description: str
    build: Callable[[], Workout]


def _timers(*items: tuple[str, int]) -> tuple[Timer, ...]:
    return tuple(Timer(name=name, duration_sec=duration) for name, duration in items)


def _beginner_yoga_flow() -> Workout:
    return Workout(
        id="beginner-yoga-flow",
        name="Beginner Yoga Flow",
        description="Gentle introduction to yoga poses",
        is_preloaded=True,
        sections=(
            Section(
                name="Warm Up",
                description="Prepare your body",
                timers=_timers(("Child's Pose", 60), ("Cat-Cow", 30), ("Downward Dog", 45)),
            ),
            Section(
                name="Standing Poses",
                description="Build strength and balance",
                timers=_timers(
                    ("Mountain Pose", 30),
                    ("Forward Fold", 45),
                    ("Tree Pose (Right)", 30),
                    ("Tree Pose (Left)", 30),
                ),
            ),
            Section(
                name="Cool Down",
                timers=_timers(("Seated Twist", 30), ("Corpse Pose", 120)),
            ),
        ),
    )


def _advanced_vinyasa() -> Workout:
    warrior_side = (("Warrior I", 45), ("Warrior II", 45), ("Triangle", 30))
    return Workout(
        id="advanced-vinyasa",
        name="Advanced Vinyasa",
        description="Dynamic flow for experienced practitioners",
        is_preloaded=True,
        sections=(
            Section(
                name="Sun Salutations",
                description="Warm up with sun salutations",
                repeat_count=3,
                timers=_timers(
                    ("Forward Fold", 15),
                    ("Plank", 20),
                    ("Chaturanga", 10),
                    ("Upward Dog", 15),
                    ("Downward Dog", 20),
                ),
            ),
            Section(
                name="Warrior Flow",
                repeat_count=2,
                child_sections=(
                    Section(name="Right Side", level=1, timers=_timers(*warrior_side)),
                    Section(name="Left Side", level=1, timers=_timers(*warrior_side)),
                ),
            ),
            Section(
                name="Cool Down",
                timers=_timers(("Pigeon Pose", 60), ("Savasana", 180)),
            ),
        ),
    )


LIBRARY: tuple[LibraryEntry, ...] = (
    LibraryEntry(
        key="beginner-yoga-flow",
        name="Beginner Yoga Flow",
        description="Gentle introduction to yoga poses",
        build=_beginner_yoga_flow,
    ),
    LibraryEntry(
        key="advanced-vinyasa",
        name="Advanced Vinyasa",
        description="Dynamic flow for experienced practitioners",
        build=_advanced_vinyasa,
    ),
)


def list_library() -> tuple[LibraryEntry, ...]:
    return LIBRARY


def get_library_workout(key: str) -> Workout:
    entry = next((item for item in LIBRARY if item.key == key), None)
    if entry is None:
        raise WorkoutNotFoundError(f"Unknown workout '{key}'")
    return entry.build()
