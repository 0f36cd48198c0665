from __future__ import annotations

import json
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from mapty.workout.model import CreateRequest, build_workout
from mapty.workout.store import (
    STORAGE_KEY,
    JsonFileStore,
    MemoryStore,
    WorkoutRepository,
)

NOW = datetime(2026, 10, 19, 9, 30, tzinfo=timezone(timedelta(hours=2)))


def _records() -> list:
    run = build_workout(
        CreateRequest("running", (51.5, -0.12), 7.3, 41, 172),
        now=NOW,
        record_id="run-1",
    )
    ride = build_workout(
        CreateRequest("cycling", (48.85, 2.35), 27, 95, 523.5),
        now=NOW + timedelta(days=1),
        record_id="ride-1",
    )
    return [replace(run, interaction_count=3), ride]


def test_save_and_load_round_trip(tmp_path: Path) -> None:
    repo = WorkoutRepository(JsonFileStore(tmp_path / "storage.json"))
    records = _records()

    repo.save(records)
    loaded = WorkoutRepository(JsonFileStore(tmp_path / "storage.json")).load()

    assert loaded == records
    assert loaded[0].interaction_count == 3
    assert loaded[0].created_at.utcoffset() == timedelta(hours=2)


def test_load_restores_derived_fields_verbatim() -> None:
    store = MemoryStore()
    repo = WorkoutRepository(store)
    repo.save(_records())

    payload = json.loads(store.items[STORAGE_KEY])
    payload[0]["pace"] = 9.99
    payload[1]["description"] = "Cycling on some day"
    store.set_item(STORAGE_KEY, json.dumps(payload))

    loaded = repo.load()
    assert loaded[0].pace == 9.99
    assert loaded[1].description == "Cycling on some day"


def test_payload_layout() -> None:
    store = MemoryStore()
    WorkoutRepository(store).save(_records())

    run, ride = json.loads(store.items[STORAGE_KEY])
    assert run["variant"] == "running"
    assert run["coordinates"] == [51.5, -0.12]
    assert run["cadence"] == 172
    assert "pace" in run and "speed" not in run
    assert ride["elevation_gain_m"] == 523.5
    assert "speed" in ride and "pace" not in ride
    assert ride["created_at"] == "2026-10-20T09:30:00+02:00"


def test_missing_or_corrupt_payload_loads_empty() -> None:
    assert WorkoutRepository(MemoryStore()).load() == []
    assert WorkoutRepository(MemoryStore({STORAGE_KEY: "{not json"})).load() == []
    assert WorkoutRepository(MemoryStore({STORAGE_KEY: '{"a": 1}'})).load() == []


def test_malformed_and_duplicate_entries_are_skipped() -> None:
    store = MemoryStore()
    repo = WorkoutRepository(store)
    repo.save(_records())
    payload = json.loads(store.items[STORAGE_KEY])
    payload.append({"id": "broken", "variant": "running"})
    payload.append(dict(payload[0]))
    payload.append("nonsense")
    payload.append({**payload[0], "id": "negative-distance", "distance_km": -5})
    payload.append({**payload[0], "id": "nan-pace", "pace": float("nan")})
    store.set_item(STORAGE_KEY, json.dumps(payload))

    loaded = repo.load()

    assert [record.id for record in loaded] == ["run-1", "ride-1"]


@pytest.mark.parametrize(
    "index, field, value",
    [
        (0, "duration_min", 0),
        (0, "cadence", -3),
        (0, "interaction_count", -7),
        (0, "pace", float("inf")),
        (0, "coordinates", [500, 900]),
        (0, "coordinates", [10, -181]),
        (1, "elevation_gain_m", -1),
        (1, "speed", 0),
        (1, "distance_km", float("nan")),
    ],
)
def test_entries_breaking_record_rules_are_skipped(index: int, field: str, value: object) -> None:
    store = MemoryStore()
    repo = WorkoutRepository(store)
    records = _records()
    repo.save(records)
    payload = json.loads(store.items[STORAGE_KEY])
    payload[index][field] = value
    store.set_item(STORAGE_KEY, json.dumps(payload))

    loaded = repo.load()

    assert loaded == [record for i, record in enumerate(records) if i != index]


def test_clear_removes_key(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path / "storage.json")
    store.set_item("other", "keep")
    repo = WorkoutRepository(store)
    repo.save(_records())

    repo.clear()

    assert store.get_item(STORAGE_KEY) is None
    assert store.get_item("other") == "keep"
    assert repo.load() == []


def test_corrupt_store_file_reads_empty_and_recovers(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "storage.json"
    path.parent.mkdir()
    path.write_text("garbage", encoding="utf-8")
    repo = WorkoutRepository(JsonFileStore(path))

    assert repo.load() == []

    repo.save(_records())
    assert len(repo.load()) == 2
    assert list(path.parent.iterdir()) == [path]
