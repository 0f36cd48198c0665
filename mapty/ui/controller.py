"""Controller the presentation adapters talk to."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from mapty.core.manager import CollectionListener, CollectionManager, Snapshot
from mapty.workout.model import CreateRequest, ValidationError, WorkoutRecord
from mapty.workout.store import KeyValueStore, WorkoutRepository

RawNumber = float | int | str | None


@dataclass(frozen=True)
class CreateOutcome:
    record: WorkoutRecord | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.record is not None


def parse_number(raw: RawNumber, field_name: str) -> float:
    """Read a numeric form value; blank or garbage input is a validation error."""
    if isinstance(raw, bool) or raw is None:
        raise ValidationError(field_name, f"{field_name} is required")
    if isinstance(raw, (int, float)):
        return float(raw)
    text = str(raw).strip()
    if not text:
        raise ValidationError(field_name, f"{field_name} is required")
    try:
        return float(text)
    except ValueError as exc:
        raise ValidationError(field_name, f"{field_name} must be a number") from exc


class TrackerController:
    def __init__(self, manager: CollectionManager) -> None:
        self._manager = manager

    @property
    def manager(self) -> CollectionManager:
        return self._manager

    @property
    def actions_visible(self) -> bool:
        return self._manager.has_records

    @property
    def sort_label(self) -> str:
        return "Un Sort" if self._manager.sort_mode == "sorted" else "Sort All"

    def on_collection_changed(self, listener: CollectionListener) -> Callable[[], None]:
        return self._manager.subscribe(listener)

    def create_requested(
        self,
        variant: str,
        coordinates: tuple[RawNumber, RawNumber],
        distance_km: RawNumber,
        duration_min: RawNumber,
        variant_extra: RawNumber,
    ) -> CreateOutcome:
        extra_field = "cadence" if variant == "running" else "elevation_gain_m"
        try:
            request = CreateRequest(
                variant=variant,
                coordinates=(
                    parse_number(coordinates[0], "latitude"),
                    parse_number(coordinates[1], "longitude"),
                ),
                distance_km=parse_number(distance_km, "distance_km"),
                duration_min=parse_number(duration_min, "duration_min"),
                variant_extra=parse_number(variant_extra, extra_field),
            )
            record = self._manager.create(request)
        except ValidationError as exc:
            return CreateOutcome(error=str(exc))
        return CreateOutcome(record=record)

    def delete_requested(self, record_id: str) -> None:
        self._manager.remove(record_id)

    def interaction_requested(self, record_id: str) -> tuple[float, float] | None:
        record = self._manager.record_interaction(record_id)
        return record.coordinates if record is not None else None

    def clear_all_requested(self) -> None:
        self._manager.clear_all()

    def sort_toggled(self) -> Snapshot:
        return self._manager.toggle_sort()

    def current_view(self) -> Snapshot:
        return self._manager.view()


def open_session(store: KeyValueStore) -> TrackerController:
    """Wire a manager to the given store and load the saved workouts."""
    manager = CollectionManager(WorkoutRepository(store))
    manager.load()
    return TrackerController(manager)
