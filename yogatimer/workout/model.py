"""Workout domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import uuid4


MIN_REPEAT_COUNT = 1
MAX_REPEAT_COUNT = 99
MAX_NESTING_LEVEL = 2
MIN_DURATION_SEC = 1
MAX_DURATION_SEC = 5940  # 99 minutes


def _new_id() -> str:
    return uuid4().hex


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass(frozen=True)
class Timer:
    name: str
    duration_sec: int
    description: str = ""
    id: str = field(default_factory=_new_id)

    @property
    def formatted_duration(self) -> str:
        minutes, seconds = divmod(max(0, self.duration_sec), 60)
        return f"{minutes:d}:{seconds:02d}"

    @property
    def is_playable(self) -> bool:
        return self.duration_sec > 0

    def is_valid(self) -> bool:
        return bool(self.name.strip()) and self.duration_sec > 0


@dataclass(frozen=True)
class Section:
    name: str
    repeat_count: int = 1
    timers: tuple[Timer, ...] = ()
    child_sections: tuple[Section, ...] = ()
    description: str = ""
    level: int = 0
    id: str = field(default_factory=_new_id)

    @property
    def repeats(self) -> int:
        # A repeat count below one still plays the content once.
        return max(1, self.repeat_count)

    def calculate_total_steps(self) -> int:
        """Number of steps this section produces, child repeats included."""
        per_repeat = sum(1 for timer in self.timers if timer.is_playable)
        per_repeat += sum(child.calculate_total_steps() for child in self.child_sections)
        return per_repeat * self.repeats

    def calculate_total_duration(self) -> int:
        per_repeat = sum(timer.duration_sec for timer in self.timers if timer.is_playable)
        per_repeat += sum(child.calculate_total_duration() for child in self.child_sections)
        return per_repeat * self.repeats

    def has_child_sections(self) -> bool:
        return bool(self.child_sections)

    def has_repeats(self) -> bool:
        return self.repeat_count > 1


@dataclass(frozen=True)
class Workout:
    name: str
    sections: tuple[Section, ...] = ()
    description: str = ""
    is_preloaded: bool = False
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)
    id: str = field(default_factory=_new_id)

    def calculate_total_steps(self) -> int:
        return sum(section.calculate_total_steps() for section in self.sections)

    def calculate_total_duration(self) -> int:
        return sum(section.calculate_total_duration() for section in self.sections)

    @property
    def total_duration_sec(self) -> int:
        return self.calculate_total_duration()
