"""User-defined workouts stored locally as JSON files."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from pathlib import Path

from yogatimer.workout.model import Workout
from yogatimer.workout.parser import load_workout, workout_to_dict


logger = logging.getLogger(__name__)


def _default_workouts_dir() -> Path:
    return Path.home() / ".yogatimer" / "workouts"


def _slugify(name: str) -> str:
    s = re.sub(r"[^a-zA-Z0-9]+", "-", name.strip().lower()).strip("-")
    return s or "custom-workout"


@dataclass(frozen=True)
class UserWorkout:
    key: str
    name: str
    description: str
    path: Path


def list_user_workouts(base_dir: Path | None = None) -> list[UserWorkout]:
    root = base_dir or _default_workouts_dir()
    if not root.exists():
        return []
    out: list[UserWorkout] = []
    for file in sorted(root.glob("*.json")):
        try:
            payload = json.loads(file.read_text(encoding="utf-8"))
            name = str(payload.get("name", file.stem))
            description = str(payload.get("description") or "")
        except Exception:
            logger.warning("Unreadable workout file %s", file)
            name = file.stem
            description = ""
        out.append(UserWorkout(key=file.stem, name=name, description=description, path=file))
    return out


def user_workout_path(key: str, base_dir: Path | None = None) -> Path:
    root = base_dir or _default_workouts_dir()
    return root / f"{_slugify(key)}.json"


def load_user_workout(path: Path) -> Workout:
    return load_workout(path)


def save_user_workout(
    workout: Workout,
    *,
    base_dir: Path | None = None,
    overwrite_key: str | None = None,
) -> Path:
    if not workout.sections:
        raise ValueError("Workout must include at least one section")
    root = base_dir or _default_workouts_dir()
    root.mkdir(parents=True, exist_ok=True)
    key = _slugify(overwrite_key or workout.name)
    out = root / f"{key}.json"
    stamped = replace(workout, updated_at=datetime.now(tz=timezone.utc))
    out.write_text(
        json.dumps(workout_to_dict(stamped), ensure_ascii=True, indent=2),
        encoding="utf-8",
    )
    return out


def delete_user_workout(key: str, base_dir: Path | None = None) -> bool:
    target = user_workout_path(key, base_dir)
    if not target.exists():
        return False
    target.unlink()
    return True
