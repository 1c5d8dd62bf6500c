"""NiceGUI web UI for Yoga Timer."""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from nicegui import ui

from yogatimer.core.notifications import Announcer
from yogatimer.core.state import Completed, Idle, Paused, Running
from yogatimer.settings import Settings, get_settings
from yogatimer.ui.controller import TimerController, WorkoutOption
from yogatimer.workout.library import WorkoutNotFoundError
from yogatimer.workout.parser import WorkoutParseError


@dataclass
class CueQueue:
    """Speech/chime cues raised by the engine, drained by the page refresh."""

    spoken: list[str] = field(default_factory=list)
    chimes: int = 0

    def speak(self, text: str) -> None:
        self.spoken.append(text)

    def chime(self) -> None:
        self.chimes += 1

    def drain(self) -> tuple[str, int]:
        """Return everything queued since the last drain as one phrase."""
        spoken, chimes = self.spoken, self.chimes
        self.spoken = []
        self.chimes = 0
        return ". ".join(spoken), chimes


def _fmt_duration(total_seconds: int) -> str:
    minutes, seconds = divmod(max(0, total_seconds), 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours:d}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"


def _option_label(option: WorkoutOption) -> str:
    suffix = " (custom)" if option.source == "custom" else ""
    return f"{option.name}{suffix}"


def _speech_js(text: str, language: str) -> str:
    return f"""
    (() => {{
      const u = new SpeechSynthesisUtterance({json.dumps(text)});
      u.lang = {json.dumps(language)};
      u.rate = 0.9;
      window.speechSynthesis.cancel();
      window.speechSynthesis.speak(u);
    }})();
    """


def _chime_js(volume: float) -> str:
    gain = max(0.0, min(1.0, volume)) * 0.2
    return f"""
    (() => {{
      const ctx = new (window.AudioContext || window.webkitAudioContext)();
      const osc = ctx.createOscillator();
      const gain = ctx.createGain();
      osc.type = 'sine';
      osc.frequency.value = 880;
      gain.gain.value = {gain:.3f};
      osc.connect(gain);
      gain.connect(ctx.destination);
      osc.start();
      setTimeout(() => {{ osc.stop(); ctx.close(); }}, 300);
    }})();
    """


def run_web_ui(
    *,
    settings: Settings | None = None,
    host: str = "127.0.0.1",
    port: int = 8089,
) -> int:
    settings = settings or get_settings()
    cues = CueQueue()
    controller = TimerController(
        settings,
        Announcer(settings, speak=cues.speak, chime=cues.chime),
    )
    option_by_label: dict[str, WorkoutOption] = {}

    if settings.theme == "dark":
        ui.dark_mode().enable()
    elif settings.theme == "light":
        ui.dark_mode().disable()

    with ui.column().classes("w-full gap-1"):
        ui.label("YOGA TIMER").classes("text-xl font-semibold tracking-wide")
        status_label = ui.label("Pick a workout").classes("text-lg font-semibold")

    with ui.column().classes("w-full gap-4") as setup_view:
        with ui.card().classes("w-full"):
            with ui.row().classes("w-full items-end gap-2"):
                workout_select = ui.select([], label="Workout").classes("min-w-[320px]")
                refresh_btn = ui.button("Refresh")
                start_btn = ui.button("Start")
            workout_info = ui.label("No workout loaded").classes("text-sm")

    with ui.column().classes("w-full gap-3") as workout_view:
        with ui.card().classes("w-full items-center"):
            section_label = ui.label("-").classes("text-lg")
            repeat_label = ui.label("").classes("text-sm")
            timer_label = ui.label("-").classes("text-2xl font-bold")
            remaining_label = ui.label("00:00").classes("text-6xl font-bold")
            pose_bar = ui.linear_progress(value=0, show_value=False).classes("w-full")
            ui.label("Section").classes("text-xs self-start")
            section_bar = ui.linear_progress(value=0, show_value=False).classes("w-full")
            ui.label("Workout").classes("text-xs self-start")
            overall_bar = ui.linear_progress(value=0, show_value=False).classes("w-full")
            ui.label("Steps").classes("text-xs self-start")
            steps_bar = ui.linear_progress(value=0, show_value=False).classes("w-full")
            overall_label = ui.label("-").classes("text-sm")
            with ui.row().classes("gap-2"):
                pause_btn = ui.button("Pause")
                skip_btn = ui.button("Skip")
                stop_btn = ui.button("Stop", color="negative")
        ui.label("Steps").classes("text-base font-medium")
        steps_column = ui.column().classes("w-full gap-0")

    def show_setup_screen() -> None:
        setup_view.set_visibility(True)
        workout_view.set_visibility(False)

    def show_workout_screen() -> None:
        setup_view.set_visibility(False)
        workout_view.set_visibility(True)

    def refresh_workouts() -> None:
        option_by_label.clear()
        for option in controller.list_workouts():
            option_by_label[_option_label(option)] = option
        labels = list(option_by_label)
        workout_select.options = labels
        if labels and workout_select.value not in option_by_label:
            workout_select.value = labels[0]
        workout_select.update()
        load_selected_workout()

    def load_selected_workout() -> None:
        option = option_by_label.get(str(workout_select.value or ""))
        if option is None:
            workout_info.text = "No workout loaded"
            return
        try:
            workout = controller.open_workout(option.key)
        except (WorkoutNotFoundError, WorkoutParseError) as exc:
            workout_info.text = "No workout loaded"
            ui.notify(str(exc), color="negative")
            return
        workout_info.text = (
            f"{workout.name} | {workout.calculate_total_steps()} steps"
            f" | {_fmt_duration(workout.calculate_total_duration())}"
        )
        rebuild_steps()

    def rebuild_steps() -> None:
        steps_column.clear()
        with steps_column:
            for step in controller.steps:
                repeat = (
                    f" [{step.current_repeat}/{step.total_repeats}]"
                    if step.total_repeats > 1
                    else ""
                )
                label = (
                    f"{step.global_index + 1}. {step.section.name}{repeat}"
                    f" - {step.name} ({step.timer.formatted_duration})"
                )
                ui.button(
                    label,
                    on_click=lambda _, index=step.global_index: on_jump(index),
                ).props("flat align=left no-caps").classes("w-full")

    def play_cues() -> None:
        spoken, chimes = cues.drain()
        if chimes and settings.enable_sound_effects:
            ui.run_javascript(_chime_js(settings.sound_volume))
        if spoken and settings.enable_tts:
            ui.run_javascript(_speech_js(spoken, settings.tts_language))

    def refresh_ui() -> None:
        play_cues()
        state = controller.state
        if isinstance(state, (Running, Paused)):
            show_workout_screen()
            step = state.step
            section_label.text = state.section.name
            repeat_label.text = (
                f"Repeat {step.current_repeat} of {step.total_repeats}"
                if step.total_repeats > 1
                else ""
            )
            timer_label.text = state.timer.name
            remaining_label.text = _fmt_duration(state.remaining_sec)
            duration = state.step.duration_sec
            pose_bar.value = round(state.step_elapsed_sec / duration, 3) if duration else 0
            section_bar.value = round(state.section_progress.combined_progress, 3)
            overall = state.overall_progress
            overall_bar.value = round(overall.time_fraction, 3)
            steps_bar.value = round(overall.step_fraction, 3)
            overall_label.text = (
                f"Step {overall.current_step}/{overall.total_steps}"
                f" | {_fmt_duration(overall.elapsed_sec)} / {_fmt_duration(overall.total_sec)}"
                f" | {_fmt_duration(overall.remaining_sec)} left"
            )
            pause_btn.text = "Resume" if isinstance(state, Paused) else "Pause"
            status_label.text = "Paused" if isinstance(state, Paused) else "Running"
        elif isinstance(state, Completed):
            status_label.text = "Workout complete"
            show_setup_screen()
        elif isinstance(state, Idle):
            show_setup_screen()
        start_btn.set_enabled(
            isinstance(state, (Idle, Completed)) and controller.engine.workout is not None
        )

    def on_start() -> None:
        if isinstance(controller.state, Completed):
            controller.stop()
        controller.start()
        refresh_ui()

    def on_jump(index: int) -> None:
        controller.jump_to_timer(index)
        refresh_ui()

    def on_pause() -> None:
        controller.toggle_pause()
        refresh_ui()

    def on_skip() -> None:
        controller.skip()
        refresh_ui()

    def on_stop() -> None:
        controller.stop()
        load_selected_workout()
        status_label.text = "Workout stopped"
        refresh_ui()

    def on_workout_change() -> None:
        load_selected_workout()
        status_label.text = "Ready"
        refresh_ui()

    workout_select.on_value_change(lambda _: on_workout_change())
    refresh_btn.on_click(lambda: refresh_workouts())
    start_btn.on_click(on_start)
    pause_btn.on_click(on_pause)
    skip_btn.on_click(on_skip)
    stop_btn.on_click(on_stop)

    refresh_workouts()
    show_setup_screen()
    ui.timer(0.25, refresh_ui)
    ui.run(host=host, port=port, reload=False, title="Yoga Timer")
    return 0
