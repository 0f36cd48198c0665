"""Workout collection owner: lifecycle, ordering and persistence writes."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Literal
from uuid import uuid4

from mapty.workout.model import CreateRequest, WorkoutRecord, build_workout
from mapty.workout.store import WorkoutRepository

logger = logging.getLogger(__name__)

SortMode = Literal["sorted", "unsorted"]
Snapshot = tuple[WorkoutRecord, ...]
CollectionListener = Callable[[Snapshot], None]
Bounds = tuple[tuple[float, float], tuple[float, float]]


def _local_now() -> datetime:
    return datetime.now().astimezone()


def _new_id() -> str:
    return uuid4().hex


def sort_key(record: WorkoutRecord) -> tuple[str, float]:
    return record.variant, record.distance_km


class CollectionManager:
    """Sole writer of the workout collection and of its persisted copy.

    Storage order is always creation order. Sorting only affects the views
    handed out by ``sorted_view``/``view``; it never reorders what is saved.
    Every mutation is written through the repository and then announced to
    the ``collectionChanged`` listeners with the new snapshot.
    """

    def __init__(
        self,
        repository: WorkoutRepository,
        *,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._repository = repository
        self._clock = clock or _local_now
        self._id_factory = id_factory or _new_id
        self._records: list[WorkoutRecord] = []
        self._sort_mode: SortMode = "unsorted"
        self._listeners: list[CollectionListener] = []

    def __len__(self) -> int:
        return len(self._records)

    @property
    def has_records(self) -> bool:
        return bool(self._records)

    @property
    def sort_mode(self) -> SortMode:
        return self._sort_mode

    def subscribe(self, listener: CollectionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def load(self) -> None:
        self._records = self._repository.load()
        logger.debug("Loaded %d workouts", len(self._records))
        self._notify()

    def snapshot(self) -> Snapshot:
        return tuple(self._records)

    def get(self, record_id: str) -> WorkoutRecord | None:
        index = self._index_of(record_id)
        return self._records[index] if index is not None else None

    def create(self, request: CreateRequest) -> WorkoutRecord:
        record_id = self._unique_id()
        record = build_workout(request, now=self._clock(), record_id=record_id)
        self._commit([*self._records, record])
        logger.debug("Created %s workout %s", record.variant, record.id)
        return record

    def remove(self, record_id: str) -> None:
        index = self._index_of(record_id)
        if index is None:
            return
        self._commit(self._records[:index] + self._records[index + 1 :])
        logger.debug("Removed workout %s", record_id)

    def clear_all(self) -> None:
        self._repository.clear()
        self._records = []
        logger.debug("Cleared all workouts")
        self._notify()

    def record_interaction(self, record_id: str) -> WorkoutRecord | None:
        index = self._index_of(record_id)
        if index is None:
            return None
        updated = self._records[index].with_interaction()
        records = list(self._records)
        records[index] = updated
        self._commit(records)
        return updated

    def sorted_view(self, mode: SortMode) -> Snapshot:
        if mode == "sorted":
            return tuple(sorted(self._records, key=sort_key))
        return tuple(self._records)

    def view(self) -> Snapshot:
        return self.sorted_view(self._sort_mode)

    def toggle_sort(self) -> Snapshot:
        self._sort_mode = "unsorted" if self._sort_mode == "sorted" else "sorted"
        return self.view()

    def bounds(self) -> Bounds | None:
        """South-west and north-east corners enclosing every workout."""
        if not self._records:
            return None
        lats = [record.coordinates[0] for record in self._records]
        lngs = [record.coordinates[1] for record in self._records]
        return (min(lats), min(lngs)), (max(lats), max(lngs))

    def _index_of(self, record_id: str) -> int | None:
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return index
        return None

    def _unique_id(self) -> str:
        record_id = self._id_factory()
        while self._index_of(record_id) is not None:
            record_id = self._id_factory()
        return record_id

    def _commit(self, records: list[WorkoutRecord]) -> None:
        """Persist the new collection, then adopt it; a failed write changes nothing."""
        self._repository.save(records)
        self._records = records
        self._notify()

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)
