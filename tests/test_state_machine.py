from __future__ import annotations

from yogatimer.core.machine import (
    Advance,
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
    elapsed_before,
    snapshot,
)
from yogatimer.core.state import Completed, Idle, Paused, Running
from yogatimer.workout.model import Section, Timer, Workout


def _workout() -> Workout:
    return Workout(
        name="Scenario",
        sections=(
            Section(
                name="Main",
                repeat_count=2,
                timers=(
                    Timer(name="T10", duration_sec=10),
                    Timer(name="T20", duration_sec=20),
                ),
            ),
        ),
    )


def _run(session: Session, *events: object) -> Session:
    for event in events:
        session = apply(session, event)  # type: ignore[arg-type]
    return session


def _ticks(session: Session, count: int) -> Session:
    for _ in range(count):
        session = apply(session, Tick())
        if session.status == "running" and session.remaining_sec == 0:
            session = apply(session, Advance())
    return session


def test_load_prepares_idle_session() -> None:
    session = apply(Session(), Load(_workout()))

    assert session.status == "idle"
    assert len(session.steps) == 4
    assert session.total_sec == 60
    assert session.position == 0
    assert session.elapsed_sec == 0
    assert snapshot(session) == Idle()


def test_scenario_fifteen_ticks_lands_in_second_step() -> None:
    session = _run(Session(), Load(_workout()), Start())
    session = _ticks(session, 15)

    state = snapshot(session)
    assert isinstance(state, Running)
    assert state.timer.name == "T20"
    assert state.remaining_sec == 15
    assert state.overall_progress.elapsed_sec == 15
    assert state.overall_progress.current_step == 2
    assert state.overall_progress.total_steps == 4
    assert state.overall_progress.total_sec == 60


def test_empty_workout_completes_immediately() -> None:
    session = _run(Session(), Load(Workout(name="Empty")), Start())

    assert session.status == "completed"
    assert snapshot(session) == Completed()


def test_start_without_workout_is_ignored() -> None:
    session = Session()
    assert apply(session, Start()) is session


def test_illegal_transitions_return_same_session() -> None:
    idle = apply(Session(), Load(_workout()))
    assert apply(idle, Pause()) is idle
    assert apply(idle, Resume()) is idle
    assert apply(idle, Skip()) is idle
    assert apply(idle, Tick()) is idle

    running = apply(idle, Start())
    assert apply(running, Start()) is running
    assert apply(running, Resume()) is running
    assert apply(running, Advance()) is running

    paused = apply(running, Pause())
    assert apply(paused, Pause()) is paused
    assert apply(paused, Tick()) is paused


def test_pause_resume_preserves_remaining_time() -> None:
    session = _ticks(_run(Session(), Load(_workout()), Start()), 7)
    paused = apply(session, Pause())
    resumed = apply(paused, Resume())

    paused_state = snapshot(paused)
    assert isinstance(paused_state, Paused)
    assert paused_state.remaining_sec == 3
    resumed_state = snapshot(resumed)
    assert isinstance(resumed_state, Running)
    assert resumed_state.remaining_sec == 3
    assert resumed_state.overall_progress.elapsed_sec == 7


def test_skip_advances_one_step_and_resets_remaining() -> None:
    session = _ticks(_run(Session(), Load(_workout()), Start()), 4)
    skipped = apply(session, Skip())

    assert skipped.position == 1
    assert skipped.remaining_sec == 20
    assert skipped.status == "running"

    paused = apply(skipped, Pause())
    skipped_from_pause = apply(paused, Skip())
    assert skipped_from_pause.position == 2
    assert skipped_from_pause.status == "running"


def test_skip_from_last_step_completes() -> None:
    session = _run(Session(), Load(_workout()), Start(), JumpTo(3), Skip())

    assert session.status == "completed"
    assert session.steps == ()


def test_jump_sets_elapsed_to_durations_before_index() -> None:
    loaded = apply(Session(), Load(_workout()))
    for index, expected in enumerate([0, 10, 30, 40]):
        jumped = apply(loaded, JumpTo(index))
        assert jumped.status == "running"
        assert jumped.position == index
        assert jumped.elapsed_sec == expected == elapsed_before(loaded.steps, index)
        assert jumped.remaining_sec == loaded.steps[index].duration_sec


def test_jump_out_of_range_is_ignored() -> None:
    session = _run(Session(), Load(_workout()), Start())
    assert apply(session, JumpTo(4)) is session
    assert apply(session, JumpTo(-1)) is session


def test_stop_then_start_replays_from_first_step() -> None:
    session = _ticks(_run(Session(), Load(_workout()), Start()), 25)
    stopped = apply(session, Stop())

    assert stopped.status == "idle"
    assert stopped.steps == ()
    assert stopped.elapsed_sec == 0

    restarted = apply(stopped, Start())
    state = snapshot(restarted)
    assert isinstance(state, Running)
    assert state.step.global_index == 0
    assert state.remaining_sec == 10
    assert state.overall_progress.elapsed_sec == 0


def test_stop_on_stopped_session_is_ignored() -> None:
    stopped = apply(_run(Session(), Load(_workout()), Start()), Stop())
    assert apply(stopped, Stop()) is stopped
    assert apply(Session(), Stop()) == Session()


def test_full_run_completes_after_all_ticks() -> None:
    session = _ticks(_run(Session(), Load(_workout()), Start()), 60)
    assert session.status == "completed"
    assert apply(session, Start()) is session


def test_section_progress_is_monotonic_across_repeats() -> None:
    session = _run(Session(), Load(_workout()), Start())
    values = []
    for _ in range(4):
        state = snapshot(session)
        assert isinstance(state, Running)
        values.append(state.section_progress.combined_progress)
        session = apply(session, Skip())

    assert values == [0.0, 0.25, 0.5, 0.75]


def test_step_that_ran_out_advances_on_resume_or_tick() -> None:
    session = _run(Session(), Load(_workout()), Start())
    for _ in range(10):
        session = apply(session, Tick())
    assert session.status == "running"
    assert session.remaining_sec == 0

    paused = apply(session, Pause())
    resumed = apply(paused, Resume())
    assert resumed.status == "running"
    assert resumed.position == 1
    assert resumed.remaining_sec == 20
    assert resumed.elapsed_sec == 10

    ticked = apply(session, Tick())
    assert ticked.position == 1
    assert ticked.remaining_sec == 20
    assert ticked.elapsed_sec == 10


def test_snapshot_reports_step_and_workout_progress() -> None:
    session = _ticks(_run(Session(), Load(_workout()), Start()), 15)
    state = snapshot(session)

    assert isinstance(state, Running)
    assert state.step_elapsed_sec == 5
    assert state.overall_progress.step_fraction == 0.5
    assert state.overall_progress.time_fraction == 0.25
    assert state.overall_progress.remaining_sec == 45
