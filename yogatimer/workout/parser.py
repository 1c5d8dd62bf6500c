"""Workout file parser (JSON)."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from yogatimer.workout.model import (
    MAX_DURATION_SEC,
    MAX_NESTING_LEVEL,
    MAX_REPEAT_COUNT,
    MIN_DURATION_SEC,
    MIN_REPEAT_COUNT,
    Section,
    Timer,
    Workout,
)


class WorkoutParseError(ValueError):
    """Raised when a workout file is invalid."""


def load_workout(path: str | Path) -> Workout:
    file_path = Path(path)
    if file_path.suffix.lower() != ".json":
        raise WorkoutParseError(
            f"Unsupported workout format '{file_path.suffix}'. Use .json"
        )
    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise WorkoutParseError(f"Invalid JSON: {exc}") from exc
    except OSError as exc:
        raise WorkoutParseError(f"Cannot read {file_path}: {exc}") from exc

    if isinstance(data, dict) and "name" not in data:
        data = {**data, "name": file_path.stem}
    return parse_workout(data)


def parse_workout(data: object) -> Workout:
    if not isinstance(data, dict):
        raise WorkoutParseError("Workout JSON must be an object")

    name = _parse_name(data.get("name"), where="Workout")
    sections_obj = data.get("sections")
    if not isinstance(sections_obj, list):
        raise WorkoutParseError("Workout field 'sections' must be an array")

    sections = tuple(
        _parse_section(raw, level=0, where=f"Section {i + 1}")
        for i, raw in enumerate(sections_obj)
    )
    kwargs: dict[str, Any] = {}
    for field_name in ("created_at", "updated_at"):
        if data.get(field_name) is not None:
            kwargs[field_name] = _parse_timestamp(data[field_name], field_name=field_name)
    if data.get("id") is not None:
        kwargs["id"] = str(data["id"])

    return Workout(
        name=name,
        sections=sections,
        description=_parse_description(data.get("description")),
        is_preloaded=bool(data.get("is_preloaded", False)),
        **kwargs,
    )


def workout_to_dict(workout: Workout) -> dict[str, Any]:
    return {
        "id": workout.id,
        "name": workout.name,
        "description": workout.description,
        "created_at": workout.created_at.isoformat(),
        "updated_at": workout.updated_at.isoformat(),
        "sections": [_section_to_dict(section) for section in workout.sections],
    }


def _section_to_dict(section: Section) -> dict[str, Any]:
    return {
        "id": section.id,
        "name": section.name,
        "description": section.description,
        "repeat_count": section.repeat_count,
        "timers": [
            {
                "id": timer.id,
                "name": timer.name,
                "description": timer.description,
                "duration_sec": timer.duration_sec,
            }
            for timer in section.timers
        ],
        "sections": [_section_to_dict(child) for child in section.child_sections],
    }


def _parse_section(raw: object, *, level: int, where: str) -> Section:
    if not isinstance(raw, dict):
        raise WorkoutParseError(f"{where}: must be an object")
    if level > MAX_NESTING_LEVEL:
        raise WorkoutParseError(
            f"{where}: sections may be nested at most {MAX_NESTING_LEVEL} levels deep"
        )

    name = _parse_name(raw.get("name"), where=where)
    repeat_obj = raw.get("repeat_count", MIN_REPEAT_COUNT)
    repeat_count = _parse_int_field(raw=repeat_obj, field_name="repeat_count", where=where)
    if not MIN_REPEAT_COUNT <= repeat_count <= MAX_REPEAT_COUNT:
        raise WorkoutParseError(
            f"{where}: repeat_count must be between {MIN_REPEAT_COUNT} and {MAX_REPEAT_COUNT}"
        )

    timers_obj = raw.get("timers", [])
    children_obj = raw.get("sections", [])
    if not isinstance(timers_obj, list):
        raise WorkoutParseError(f"{where}: 'timers' must be an array")
    if not isinstance(children_obj, list):
        raise WorkoutParseError(f"{where}: 'sections' must be an array")

    timers = tuple(
        _parse_timer(item, where=f"{where} > Timer {i + 1}")
        for i, item in enumerate(timers_obj)
    )
    children = tuple(
        _parse_section(item, level=level + 1, where=f"{where} > Section {i + 1}")
        for i, item in enumerate(children_obj)
    )
    kwargs: dict[str, Any] = {}
    if raw.get("id") is not None:
        kwargs["id"] = str(raw["id"])
    return Section(
        name=name,
        repeat_count=repeat_count,
        timers=timers,
        child_sections=children,
        description=_parse_description(raw.get("description")),
        level=level,
        **kwargs,
    )


def _parse_timer(raw: object, *, where: str) -> Timer:
    if not isinstance(raw, dict):
        raise WorkoutParseError(f"{where}: must be an object")
    name = _parse_name(raw.get("name"), where=where)
    duration_sec = _parse_int_field(
        raw=raw.get("duration_sec"),
        field_name="duration_sec",
        where=where,
    )
    if not MIN_DURATION_SEC <= duration_sec <= MAX_DURATION_SEC:
        raise WorkoutParseError(
            f"{where}: duration_sec must be between {MIN_DURATION_SEC} and {MAX_DURATION_SEC}"
        )
    kwargs: dict[str, Any] = {}
    if raw.get("id") is not None:
        kwargs["id"] = str(raw["id"])
    return Timer(
        name=name,
        duration_sec=duration_sec,
        description=_parse_description(raw.get("description")),
        **kwargs,
    )


def _parse_name(raw: object, *, where: str) -> str:
    if not isinstance(raw, str) or not raw.strip():
        raise WorkoutParseError(f"{where}: 'name' must be a non-empty string")
    return raw.strip()


def _parse_description(raw: object) -> str:
    if raw is None:
        return ""
    return str(raw).strip()


def _parse_int_field(*, raw: object, field_name: str, where: str) -> int:
    if raw is None or isinstance(raw, bool):
        raise WorkoutParseError(f"{where}: invalid {field_name}")
    if isinstance(raw, float) and not raw.is_integer():
        raise WorkoutParseError(f"{where}: {field_name} must be a whole number")
    try:
        return int(str(raw).strip()) if not isinstance(raw, float) else int(raw)
    except ValueError as exc:
        raise WorkoutParseError(f"{where}: invalid {field_name}") from exc


def _parse_timestamp(raw: object, *, field_name: str) -> datetime:
    try:
        value = datetime.fromisoformat(str(raw))
    except ValueError as exc:
        raise WorkoutParseError(f"Workout field '{field_name}' must be an ISO timestamp") from exc
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value
