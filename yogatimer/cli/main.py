"""Terminal CLI entrypoint for Yoga Timer."""

from __future__ import annotations

import argparse
import asyncio
import sys
import threading
from dataclasses import replace
from pathlib import Path

from yogatimer.core.notifications import Announcer
from yogatimer.core.state import Completed, Idle, Paused, Running, TimerState
from yogatimer.logging_config import setup_logging
from yogatimer.settings import Settings, get_settings
from yogatimer.ui.controller import TimerController
from yogatimer.workout.flatten import flatten_workout
from yogatimer.workout.library import WorkoutNotFoundError
from yogatimer.workout.model import Section, Workout
from yogatimer.workout.parser import WorkoutParseError


COMMAND_HELP = "Commands: [enter] pause/resume, n skip, j N jump to step N, q stop"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Yoga Timer terminal runner")
    parser.add_argument("--list", action="store_true", help="List available workouts")
    parser.add_argument("--show", metavar="KEY", help="Print a workout and its step sequence")
    parser.add_argument("--run", metavar="KEY", help="Run a built-in or saved workout")
    parser.add_argument("--file", type=Path, help="Run a workout JSON file")
    parser.add_argument(
        "--start-at",
        type=int,
        default=None,
        help="Jump to this step number (1-based) right after starting",
    )
    parser.add_argument(
        "--ui-web",
        action="store_true",
        help="Launch web UI (NiceGUI)",
    )
    parser.add_argument("--web-host", default="127.0.0.1", help="Host bind for --ui-web")
    parser.add_argument("--web-port", type=int, default=8089, help="Port for --ui-web")
    parser.add_argument("--no-tts", action="store_true", help="Disable spoken announcements")
    parser.add_argument("--no-sound", action="store_true", help="Disable the completion chime")
    parser.add_argument("--log-level", default=None, help="Logging level (default from env)")
    parser.add_argument(
        "--log-json",
        action="store_true",
        help="Emit log records as JSON lines on stderr",
    )
    return parser


def _fmt_duration(total_seconds: int) -> str:
    minutes, seconds = divmod(max(0, total_seconds), 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours:d}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"


def format_state_line(state: TimerState) -> str:
    if isinstance(state, Idle):
        return "Idle"
    if not isinstance(state, (Running, Paused)):
        return "Workout complete"
    overall = state.overall_progress
    section = state.section.name
    if state.step.total_repeats > 1:
        section += f" ({state.step.current_repeat}/{state.step.total_repeats})"
    line = (
        f"[{overall.current_step}/{overall.total_steps}] {section} | {state.timer.name}"
        f" | {_fmt_duration(state.remaining_sec)} left"
        f" | {_fmt_duration(overall.elapsed_sec)}/{_fmt_duration(overall.total_sec)}"
    )
    if isinstance(state, Paused):
        line += " | PAUSED"
    return line


def describe_workout(workout: Workout) -> list[str]:
    lines = [
        f"{workout.name} | {workout.calculate_total_steps()} steps"
        f" | {_fmt_duration(workout.calculate_total_duration())}"
    ]
    if workout.description:
        lines.append(workout.description)

    def _walk(section: Section, depth: int) -> None:
        indent = "  " * (depth + 1)
        repeat = f" x{section.repeat_count}" if section.has_repeats() else ""
        lines.append(f"{indent}{section.name}{repeat}")
        for timer in section.timers:
            lines.append(f"{indent}  - {timer.name} ({timer.formatted_duration})")
        for child in section.child_sections:
            _walk(child, depth + 1)

    for section in workout.sections:
        _walk(section, 0)

    lines.append("Steps:")
    for step in flatten_workout(workout):
        repeat = (
            f" [{step.current_repeat}/{step.total_repeats}]" if step.total_repeats > 1 else ""
        )
        lines.append(
            f"  {step.global_index + 1:>3}. {step.section.name}{repeat}"
            f" - {step.name} ({step.timer.formatted_duration})"
        )
    return lines


def handle_command(controller: TimerController, line: str) -> str | None:
    """Apply one line typed by the user; return a message for unknown input."""
    parts = line.strip().lower().split()
    if not parts:
        controller.toggle_pause()
        return None
    command, args = parts[0], parts[1:]
    if command in {"p", "pause", "r", "resume"}:
        controller.toggle_pause()
    elif command in {"n", "next", "skip"}:
        controller.skip()
    elif command in {"q", "quit", "stop"}:
        controller.stop()
    elif command in {"j", "jump"}:
        if len(args) != 1 or not args[0].isdigit():
            return "Usage: j N"
        controller.jump_to_timer(int(args[0]) - 1)
    else:
        return COMMAND_HELP
    return None


def _console_announcer(settings: Settings) -> Announcer:
    return Announcer(
        settings,
        speak=lambda text: print(f">> {text}"),
        chime=lambda: print("\a", end="", flush=True),
    )


async def run_workout(
    controller: TimerController,
    *,
    key: str | None = None,
    path: Path | None = None,
    start_at: int | None = None,
    interactive: bool = True,
) -> int:
    try:
        workout = controller.open_file(path) if path else controller.open_workout(key or "")
    except (WorkoutNotFoundError, WorkoutParseError) as exc:
        print(f"Error: {exc}")
        return 1

    loop = asyncio.get_running_loop()
    finished = asyncio.Event()

    def on_state(state: TimerState) -> None:
        print(format_state_line(state))
        if isinstance(state, (Completed, Idle)):
            loop.call_soon_threadsafe(finished.set)

    remove_listener = controller.engine.states.add_listener(on_state)
    print(f"Starting {workout.name}")
    if interactive:
        print(COMMAND_HELP)
        _start_command_reader(controller, loop)
    try:
        controller.start()
        if start_at is not None:
            controller.jump_to_timer(start_at - 1)
        if isinstance(controller.state, (Completed, Idle)):
            finished.set()
        await finished.wait()
    finally:
        remove_listener()
        controller.stop()
    return 0


def _start_command_reader(controller: TimerController, loop: asyncio.AbstractEventLoop) -> None:
    def _read() -> None:
        for line in sys.stdin:
            loop.call_soon_threadsafe(_apply, line)

    def _apply(line: str) -> None:
        message = handle_command(controller, line)
        if message:
            print(message)

    threading.Thread(target=_read, name="yogatimer-stdin", daemon=True).start()


def run_list(controller: TimerController) -> int:
    options = controller.list_workouts()
    if not options:
        print("No workouts found")
        return 0
    for option in options:
        print(f"{option.key:<28} {option.name:<28} [{option.source}]")
    return 0


def run_show(controller: TimerController, key: str) -> int:
    try:
        workout = controller.get_workout(key)
    except (WorkoutNotFoundError, WorkoutParseError) as exc:
        print(f"Error: {exc}")
        return 1
    for line in describe_workout(workout):
        print(line)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    if args.no_tts:
        settings = replace(settings, enable_tts=False)
    if args.no_sound:
        settings = replace(settings, enable_sound_effects=False)
    setup_logging(args.log_level or settings.log_level, json_output=args.log_json)

    if args.ui_web:
        from yogatimer.ui.web_app import run_web_ui

        return run_web_ui(settings=settings, host=args.web_host, port=args.web_port)

    controller = TimerController(settings, _console_announcer(settings))
    if args.list:
        return run_list(controller)
    if args.show:
        return run_show(controller, args.show)
    if args.run is None and args.file is None:
        parser.print_help()
        return 1

    try:
        return asyncio.run(
            run_workout(
                controller,
                key=args.run,
                path=args.file,
                start_at=args.start_at,
                interactive=sys.stdin.isatty(),
            )
        )
    except KeyboardInterrupt:
        print("Stopped")
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
