"""Pure execution state machine for workout sessions.

``apply`` is the single transition function: it takes the current
:class:`Session` and an event and returns the next session. Events that are not
legal in the current state return the session unchanged (the same object), so
callers can detect ignored commands with an identity check. Nothing here knows
about clocks or tasks; the engine feeds ``Tick`` events from its countdown.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal, Optional, Union

from yogatimer.core.state import (
    Completed,
    Idle,
    Paused,
    Running,
    SectionProgress,
    TimerState,
    WorkoutProgress,
)
from yogatimer.workout.flatten import FlattenedStep, flatten_workout
from yogatimer.workout.model import Workout


SessionStatus = Literal["idle", "running", "paused", "completed"]


@dataclass(frozen=True)
class Session:
    workout: Optional[Workout] = None
    steps: tuple[FlattenedStep, ...] = ()
    total_sec: int = 0
    position: int = 0
    remaining_sec: int = 0
    elapsed_sec: int = 0
    status: SessionStatus = "idle"

    @property
    def current_step(self) -> FlattenedStep | None:
        if self.status not in ("running", "paused"):
            return None
        if 0 <= self.position < len(self.steps):
            return self.steps[self.position]
        return None


@dataclass(frozen=True)
class Load:
    workout: Workout


@dataclass(frozen=True)
class Start:
    pass


@dataclass(frozen=True)
class Pause:
    pass


@dataclass(frozen=True)
class Resume:
    pass


@dataclass(frozen=True)
class Skip:
    pass


@dataclass(frozen=True)
class JumpTo:
    index: int


@dataclass(frozen=True)
class Stop:
    pass


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class Advance:
    """Internal advance after the active step ran out of time."""


Event = Union[Load, Start, Pause, Resume, Skip, JumpTo, Stop, Tick, Advance]


def apply(session: Session, event: Event) -> Session:
    if isinstance(event, Load):
        return Session(
            workout=event.workout,
            steps=flatten_workout(event.workout),
            total_sec=event.workout.calculate_total_duration(),
        )

    if isinstance(event, Start):
        if session.status != "idle" or session.workout is None:
            return session
        steps = session.steps or flatten_workout(session.workout)
        if not steps:
            return Session(
                workout=session.workout,
                total_sec=session.total_sec,
                status="completed",
            )
        return _begin_step(replace(session, steps=steps, elapsed_sec=0), 0)

    if isinstance(event, Pause):
        if session.status != "running":
            return session
        return replace(session, status="paused")

    if isinstance(event, Resume):
        if session.status != "paused":
            return session
        if session.remaining_sec <= 0:
            # Paused right as the step ran out.
            return _advance(session)
        return replace(session, status="running")

    if isinstance(event, Skip):
        if session.status not in ("running", "paused"):
            return session
        return _advance(session)

    if isinstance(event, Advance):
        if session.status != "running" or session.remaining_sec > 0:
            return session
        return _advance(session)

    if isinstance(event, JumpTo):
        if not 0 <= event.index < len(session.steps):
            return session
        elapsed = elapsed_before(session.steps, event.index)
        return _begin_step(replace(session, elapsed_sec=elapsed), event.index)

    if isinstance(event, Stop):
        if session.status == "idle" and not session.steps:
            return session
        return Session(workout=session.workout, total_sec=session.total_sec)

    if isinstance(event, Tick):
        if session.status != "running":
            return session
        if session.remaining_sec <= 0:
            return _advance(session)
        return replace(
            session,
            remaining_sec=session.remaining_sec - 1,
            elapsed_sec=session.elapsed_sec + 1,
        )

    raise TypeError(f"Unsupported event {event!r}")


def elapsed_before(steps: tuple[FlattenedStep, ...], index: int) -> int:
    return sum(step.duration_sec for step in steps[:index])


def snapshot(session: Session) -> TimerState:
    """Build the published state for ``session``."""
    if session.status == "completed":
        return Completed()
    step = session.current_step
    if step is None:
        return Idle()

    section_progress = SectionProgress(
        section_id=step.section.id,
        current_repeat=step.current_repeat,
        total_repeats=step.total_repeats,
        current_step_index=step.index_in_repeat,
        total_steps=step.steps_in_repeat,
    )
    overall_progress = WorkoutProgress(
        current_step=session.position + 1,
        total_steps=len(session.steps),
        elapsed_sec=session.elapsed_sec,
        total_sec=session.total_sec,
        current_section_index=step.root_index,
        total_sections=len(session.workout.sections) if session.workout else 0,
    )
    state_cls = Running if session.status == "running" else Paused
    return state_cls(
        step=step,
        remaining_sec=session.remaining_sec,
        section_progress=section_progress,
        overall_progress=overall_progress,
    )


def _begin_step(session: Session, index: int) -> Session:
    return replace(
        session,
        position=index,
        remaining_sec=session.steps[index].duration_sec,
        status="running",
    )


def _advance(session: Session) -> Session:
    next_index = session.position + 1
    if next_index >= len(session.steps):
        return Session(
            workout=session.workout,
            total_sec=session.total_sec,
            status="completed",
        )
    return _begin_step(session, next_index)
