"""Immutable snapshots published by the workout engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from yogatimer.workout.flatten import FlattenedStep
from yogatimer.workout.model import Section, Timer


@dataclass(frozen=True)
class SectionProgress:
    section_id: str
    current_repeat: int
    total_repeats: int
    current_step_index: int
    total_steps: int

    @property
    def completed_repeats_fraction(self) -> float:
        if self.total_repeats <= 0:
            return 0.0
        return (self.current_repeat - 1) / self.total_repeats

    @property
    def within_repeat_fraction(self) -> float:
        if self.total_steps <= 0:
            return 0.0
        return self.current_step_index / self.total_steps

    @property
    def combined_progress(self) -> float:
        """Repeat-aware progress through the section, monotonic across repeats."""
        if self.total_repeats <= 1:
            return self.within_repeat_fraction
        return self.completed_repeats_fraction + (
            self.within_repeat_fraction / self.total_repeats
        )


@dataclass(frozen=True)
class WorkoutProgress:
    current_step: int  # 1-based
    total_steps: int
    elapsed_sec: int
    total_sec: int
    current_section_index: int = 0
    total_sections: int = 0

    @property
    def step_fraction(self) -> float:
        if self.total_steps <= 0:
            return 0.0
        return self.current_step / self.total_steps

    @property
    def time_fraction(self) -> float:
        if self.total_sec <= 0:
            return 0.0
        return min(1.0, self.elapsed_sec / self.total_sec)

    @property
    def remaining_sec(self) -> int:
        return max(0, self.total_sec - self.elapsed_sec)


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Completed:
    pass


@dataclass(frozen=True)
class _ActiveState:
    step: FlattenedStep
    remaining_sec: int
    section_progress: SectionProgress
    overall_progress: WorkoutProgress

    @property
    def timer(self) -> Timer:
        return self.step.timer

    @property
    def section(self) -> Section:
        return self.step.section

    @property
    def elapsed_sec(self) -> int:
        return self.overall_progress.elapsed_sec

    @property
    def step_elapsed_sec(self) -> int:
        return self.step.duration_sec - self.remaining_sec


@dataclass(frozen=True)
class Running(_ActiveState):
    pass


@dataclass(frozen=True)
class Paused(_ActiveState):
    pass


TimerState = Union[Idle, Running, Paused, Completed]
