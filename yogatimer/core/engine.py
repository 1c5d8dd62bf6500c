"""Async countdown engine driving a workout session."""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
import threading
from typing import Awaitable, Callable, Optional, Union

from yogatimer.core.broadcast import StateBroadcast
from yogatimer.core.machine import (
    Advance,
    Event,
    JumpTo,
    Load,
    Pause,
    Resume,
    Session,
    Skip,
    Start,
    Stop,
    Tick,
    apply,
    snapshot,
)
from yogatimer.core.notifications import Notifier, NullNotifier
from yogatimer.core.state import Idle, TimerState
from yogatimer.workout.flatten import FlattenedStep
from yogatimer.workout.model import Workout


SleepFn = Callable[[float], Awaitable[None]]
_Ticker = Union[asyncio.Task, concurrent.futures.Future]

logger = logging.getLogger(__name__)


class WorkoutEngine:
    """Owns one workout session and counts its steps down in real time.

    Commands are synchronous and serialized with the ticker through a single
    re-entrant lock. At most one ticker task exists; every command that
    changes state cancels it before mutating, and a tick from a cancelled
    ticker is dropped by its generation number.
    """

    def __init__(
        self,
        notifier: Notifier | None = None,
        *,
        tick_seconds: float = 1.0,
        sleep: SleepFn = asyncio.sleep,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._notifier: Notifier = notifier or NullNotifier()
        self._tick_seconds = tick_seconds
        self._sleep = sleep
        self._loop = loop
        self._lock = threading.RLock()
        self._session = Session()
        self._states: StateBroadcast[TimerState] = StateBroadcast(Idle())
        self._ticker: Optional[_Ticker] = None
        self._generation = 0

    @property
    def state(self) -> TimerState:
        return self._states.value

    @property
    def states(self) -> StateBroadcast[TimerState]:
        return self._states

    @property
    def workout(self) -> Workout | None:
        return self._session.workout

    @property
    def steps(self) -> tuple[FlattenedStep, ...]:
        return self._session.steps

    @property
    def is_ticking(self) -> bool:
        return self._ticker is not None and not self._ticker.done()

    def load(self, workout: Workout) -> None:
        self._dispatch(Load(workout))

    def start(self) -> None:
        self._dispatch(Start())

    def pause(self) -> None:
        self._dispatch(Pause())

    def resume(self) -> None:
        self._dispatch(Resume())

    def toggle_pause(self) -> None:
        with self._lock:
            if self._session.status == "running":
                self._dispatch(Pause())
            elif self._session.status == "paused":
                self._dispatch(Resume())

    def skip(self) -> None:
        self._dispatch(Skip())

    def jump_to_timer(self, index: int) -> None:
        self._dispatch(JumpTo(index))

    def stop(self) -> None:
        self._dispatch(Stop())

    def _dispatch(self, event: Event) -> None:
        with self._lock:
            prev = self._session
            nxt = apply(prev, event)
            if nxt is prev:
                logger.debug("Ignoring %s while %s", type(event).__name__, prev.status)
                return

            loop = self._resolve_loop() if nxt.status == "running" else None
            self._cancel_ticker()
            self._commit(prev, nxt, event)
            if loop is not None and self._session is nxt:
                self._spawn_ticker(loop)

    def _commit(self, prev: Session, nxt: Session, event: Event) -> None:
        self._session = nxt
        self._states.publish(snapshot(nxt))

        if isinstance(event, Load):
            logger.info(
                "Loaded workout '%s' (%d steps, %ds)",
                event.workout.name,
                len(nxt.steps),
                nxt.total_sec,
            )
        elif isinstance(event, Stop):
            logger.info("Workout stopped")

        step = nxt.current_step
        if (
            step is not None
            and nxt.status == "running"
            and (
                isinstance(event, (Start, Skip, JumpTo, Advance))
                or (isinstance(event, Resume) and prev.remaining_sec <= 0)
            )
        ):
            logger.debug(
                "Step %d/%d started: %s (%ds)",
                step.global_index + 1,
                len(nxt.steps),
                step.name,
                step.duration_sec,
            )
            self._notify("on_step_started", step)

        if nxt.status == "completed" and prev.status != "completed":
            logger.info("Workout completed")
            self._notify("on_workout_completed", nxt.workout)

    def _notify(self, hook: str, *args: object) -> None:
        try:
            getattr(self._notifier, hook)(*args)
        except Exception:
            logger.warning("Notifier hook %s failed", hook, exc_info=True)

    def _resolve_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        running = _running_loop()
        if running is None:
            raise RuntimeError("WorkoutEngine needs a running event loop to count down")
        return running

    def _spawn_ticker(self, loop: asyncio.AbstractEventLoop) -> None:
        coro = self._run_ticker(self._generation)
        if loop is _running_loop():
            self._ticker = loop.create_task(coro)
        else:
            self._ticker = asyncio.run_coroutine_threadsafe(coro, loop)

    def _cancel_ticker(self) -> None:
        self._generation += 1
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

    async def _run_ticker(self, generation: int) -> None:
        while True:
            await self._sleep(self._tick_seconds)
            with self._lock:
                if generation != self._generation:
                    return
                if not self._tick():
                    if generation == self._generation:
                        self._ticker = None
                    return

    def _tick(self) -> bool:
        """Apply one second; return whether the ticker should keep going."""
        prev = self._session
        if prev.status == "running" and prev.remaining_sec <= 0:
            advanced = apply(prev, Advance())
            self._commit(prev, advanced, Advance())
            return advanced.status == "running"

        ticked = apply(prev, Tick())
        if ticked is prev:
            return False
        self._commit(prev, ticked, Tick())
        if ticked.remaining_sec > 0:
            return True

        finished = ticked.current_step
        if finished is not None:
            self._notify("on_step_completed", finished)
        if self._session is not ticked:
            # A notifier issued a command of its own.
            return False

        advanced = apply(ticked, Advance())
        self._commit(ticked, advanced, Advance())
        return advanced.status == "running"


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None
