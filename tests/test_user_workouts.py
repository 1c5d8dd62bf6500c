from __future__ import annotations

from pathlib import Path

import pytest

from yogatimer.workout.model import Section, Timer, Workout
from yogatimer.workout.user_workouts import (
    delete_user_workout,
    list_user_workouts,
    load_user_workout,
    save_user_workout,
)


def _workout() -> Workout:
    return Workout(
        name="My Flow",
        description="Evening stretch",
        sections=(
            Section(
                name="Hips",
                repeat_count=2,
                timers=(Timer(name="Pigeon", duration_sec=90),),
            ),
        ),
    )


def test_save_list_load_user_workout(tmp_path: Path) -> None:
    saved = save_user_workout(_workout(), base_dir=tmp_path)
    assert saved.exists()
    assert saved.name == "my-flow.json"

    items = list_user_workouts(base_dir=tmp_path)
    assert len(items) == 1
    assert items[0].key == "my-flow"
    assert items[0].name == "My Flow"
    assert items[0].description == "Evening stretch"

    loaded = load_user_workout(Path(items[0].path))
    assert loaded.name == "My Flow"
    assert loaded.sections[0].timers[0].duration_sec == 90
    assert loaded.calculate_total_duration() == 180


def test_save_rejects_empty_workout(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        save_user_workout(Workout(name="Nothing"), base_dir=tmp_path)


def test_overwrite_and_delete(tmp_path: Path) -> None:
    save_user_workout(_workout(), base_dir=tmp_path, overwrite_key="slot-1")
    save_user_workout(_workout(), base_dir=tmp_path, overwrite_key="slot-1")

    assert [item.key for item in list_user_workouts(base_dir=tmp_path)] == ["slot-1"]
    assert delete_user_workout("slot-1", base_dir=tmp_path)
    assert not delete_user_workout("slot-1", base_dir=tmp_path)
    assert list_user_workouts(base_dir=tmp_path) == []


def test_unreadable_file_is_still_listed(tmp_path: Path) -> None:
    (tmp_path / "broken.json").write_text("{oops", encoding="utf-8")

    items = list_user_workouts(base_dir=tmp_path)

    assert [(item.key, item.name) for item in items] == [("broken", "broken")]
