"""Expansion of nested, repeating workouts into a linear step sequence."""

from __future__ import annotations

from dataclasses import dataclass, replace

from yogatimer.workout.model import Section, Timer, Workout


@dataclass(frozen=True)
class RepeatContext:
    section: Section
    current_repeat: int
    total_repeats: int


@dataclass(frozen=True)
class FlattenedStep:
    """One playable occurrence of a timer.

    ``section`` is the innermost section owning ``timer``; the repeat fields and
    ``index_in_repeat``/``steps_in_repeat`` describe that section's iteration.
    ``lineage`` holds the repeat context of every enclosing section, outermost
    first, ending with the owning section itself.
    """

    timer: Timer
    section: Section
    current_repeat: int
    total_repeats: int
    index_in_repeat: int
    steps_in_repeat: int
    global_index: int
    root_index: int
    lineage: tuple[RepeatContext, ...] = ()

    @property
    def name(self) -> str:
        return self.timer.name

    @property
    def duration_sec(self) -> int:
        return self.timer.duration_sec


def flatten_workout(workout: Workout) -> tuple[FlattenedStep, ...]:
    """Return every playable step of ``workout`` in depth-first, repeat-major order."""
    steps: list[FlattenedStep] = []
    for root_index, section in enumerate(workout.sections):
        steps.extend(_expand_section(section, root_index=root_index, lineage=()))
    return tuple(replace(step, global_index=index) for index, step in enumerate(steps))


def timers_in_one_iteration(section: Section) -> tuple[Timer, ...]:
    """Timers played by a single repeat of ``section`` (child repeats expanded)."""
    timers = [timer for timer in section.timers if timer.is_playable]
    for child in section.child_sections:
        timers.extend(timers_in_one_iteration(child) * child.repeats)
    return tuple(timers)


def _expand_section(
    section: Section,
    *,
    root_index: int,
    lineage: tuple[RepeatContext, ...],
) -> list[FlattenedStep]:
    own_timers = [timer for timer in section.timers if timer.is_playable]
    total_repeats = section.repeats
    out: list[FlattenedStep] = []
    for repeat in range(1, total_repeats + 1):
        context = lineage + (RepeatContext(section, repeat, total_repeats),)
        nested: list[FlattenedStep] = []
        for child in section.child_sections:
            nested.extend(_expand_section(child, root_index=root_index, lineage=context))

        steps_in_repeat = len(own_timers) + len(nested)
        for index, timer in enumerate(own_timers):
            out.append(
                FlattenedStep(
                    timer=timer,
                    section=section,
                    current_repeat=repeat,
                    total_repeats=total_repeats,
                    index_in_repeat=index,
                    steps_in_repeat=steps_in_repeat,
                    global_index=-1,
                    root_index=root_index,
                    lineage=context,
                )
            )
        out.extend(nested)
    return out
