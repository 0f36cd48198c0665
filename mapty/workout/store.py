"""Local persistence for the workout collection."""

from __future__ import annotations

import json
import logging
import math
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Protocol

from mapty.workout.model import (
    CyclingDetails,
    RunningDetails,
    WorkoutDetails,
    WorkoutRecord,
)

logger = logging.getLogger(__name__)

STORAGE_KEY = "workouts"


def default_store_path() -> Path:
    return Path.home() / ".mapty" / "storage.json"


class KeyValueStore(Protocol):
    """String-keyed durable store holding string values."""

    def get_item(self, key: str) -> str | None:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...


class MemoryStore:
    def __init__(self, items: dict[str, str] | None = None) -> None:
        self.items: dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


class JsonFileStore:
    """Key-value store kept as a single JSON object on disk.

    A missing or unreadable file reads as an empty store. Writes replace the
    file atomically, so a crash mid-write leaves the previous contents.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or default_store_path()

    def get_item(self, key: str) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        items = self._read()
        items[key] = value
        self._write(items)

    def remove_item(self, key: str) -> None:
        items = self._read()
        if key not in items:
            return
        del items[key]
        self._write(items)

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable store file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring store file %s: top level is not an object", self.path)
            return {}
        return data

    def _write(self, items: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(json.dumps(items, ensure_ascii=True, indent=2))
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class WorkoutRepository:
    def __init__(self, store: KeyValueStore, key: str = STORAGE_KEY) -> None:
        self._store = store
        self._key = key

    def save(self, records: Iterable[WorkoutRecord]) -> None:
        payload = [record_to_payload(record) for record in records]
        self._store.set_item(self._key, json.dumps(payload, ensure_ascii=True))

    def load(self) -> list[WorkoutRecord]:
        raw = self._store.get_item(self._key)
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("Stored workouts are not valid JSON, starting empty: %s", exc)
            return []
        if not isinstance(data, list):
            logger.warning("Stored workouts are not a list, starting empty")
            return []

        out: list[WorkoutRecord] = []
        seen: set[str] = set()
        for index, item in enumerate(data):
            try:
                record = record_from_payload(item)
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping stored workout #%d: %s", index + 1, exc)
                continue
            if record.id in seen:
                logger.warning("Skipping stored workout #%d: duplicate id %s", index + 1, record.id)
                continue
            seen.add(record.id)
            out.append(record)
        return out

    def clear(self) -> None:
        self._store.remove_item(self._key)


def record_to_payload(record: WorkoutRecord) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": record.id,
        "created_at": record.created_at.isoformat(),
        "coordinates": [record.coordinates[0], record.coordinates[1]],
        "distance_km": record.distance_km,
        "duration_min": record.duration_min,
        "variant": record.variant,
        "description": record.description,
        "interaction_count": record.interaction_count,
    }
    if isinstance(record.details, RunningDetails):
        payload["cadence"] = record.details.cadence
        payload["pace"] = record.details.pace
    else:
        payload["elevation_gain_m"] = record.details.elevation_gain_m
        payload["speed"] = record.details.speed
    return payload


def record_from_payload(item: object) -> WorkoutRecord:
    """Rebuild a record from its stored form.

    Derived fields (description, pace, speed) are taken from the payload as
    stored, never recomputed. Entries that break the record invariants raise
    ValueError.
    """
    if not isinstance(item, dict):
        raise TypeError("entry must be an object")

    variant = item["variant"]
    details: WorkoutDetails
    if variant == "running":
        details = RunningDetails(
            cadence=_int_field(item, "cadence", minimum=1),
            pace=_float_field(item, "pace", positive=True),
        )
    elif variant == "cycling":
        details = CyclingDetails(
            elevation_gain_m=_float_field(item, "elevation_gain_m"),
            speed=_float_field(item, "speed", positive=True),
        )
    else:
        raise ValueError(f"unknown variant {variant!r}")

    coords = item["coordinates"]
    if not isinstance(coords, list) or len(coords) != 2:
        raise ValueError("coordinates must be a [lat, lng] pair")
    lat = _as_float(coords[0], "latitude", allow_negative=True)
    lng = _as_float(coords[1], "longitude", allow_negative=True)
    if not -90 <= lat <= 90:
        raise ValueError("latitude must be within [-90, 90]")
    if not -180 <= lng <= 180:
        raise ValueError("longitude must be within [-180, 180]")

    record_id = item["id"]
    description = item["description"]
    created_raw = item["created_at"]
    if not isinstance(record_id, str) or not record_id:
        raise TypeError("id must be a non-empty string")
    if not isinstance(description, str):
        raise TypeError("description must be a string")
    if not isinstance(created_raw, str):
        raise TypeError("created_at must be a string")

    return WorkoutRecord(
        id=record_id,
        created_at=datetime.fromisoformat(created_raw),
        coordinates=(lat, lng),
        distance_km=_float_field(item, "distance_km", positive=True),
        duration_min=_float_field(item, "duration_min", positive=True),
        variant=variant,
        description=description,
        details=details,
        interaction_count=_int_field(item, "interaction_count", minimum=0),
    )


def _as_float(
    raw: object,
    field_name: str,
    *,
    positive: bool = False,
    allow_negative: bool = False,
) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise TypeError(f"{field_name} must be a number")
    value = float(raw)
    if not math.isfinite(value):
        raise ValueError(f"{field_name} must be finite")
    if positive and value <= 0:
        raise ValueError(f"{field_name} must be > 0")
    if not allow_negative and value < 0:
        raise ValueError(f"{field_name} must be >= 0")
    return value


def _float_field(item: dict[str, Any], field_name: str, *, positive: bool = False) -> float:
    return _as_float(item[field_name], field_name, positive=positive)


def _int_field(item: dict[str, Any], field_name: str, *, minimum: int) -> int:
    raw = item[field_name]
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise TypeError(f"{field_name} must be an integer")
    if raw < minimum:
        raise ValueError(f"{field_name} must be >= {minimum}")
    return raw
