"""Workout domain models."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Literal, Union


Variant = Literal["running", "cycling"]
VARIANTS: tuple[Variant, ...] = ("running", "cycling")

MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


class ValidationError(ValueError):
    """Raised when a workout cannot be built from the given input."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


@dataclass(frozen=True)
class RunningDetails:
    cadence: int
    pace: float


@dataclass(frozen=True)
class CyclingDetails:
    elevation_gain_m: float
    speed: float


WorkoutDetails = Union[RunningDetails, CyclingDetails]


@dataclass(frozen=True)
class CreateRequest:
    variant: str
    coordinates: tuple[float, float]
    distance_km: float
    duration_min: float
    variant_extra: float


@dataclass(frozen=True)
class WorkoutRecord:
    id: str
    created_at: datetime
    coordinates: tuple[float, float]
    distance_km: float
    duration_min: float
    variant: Variant
    description: str
    details: WorkoutDetails
    interaction_count: int = 0

    @property
    def variant_name(self) -> str:
        return self.variant.capitalize()

    @property
    def pace(self) -> float | None:
        if isinstance(self.details, RunningDetails):
            return self.details.pace
        return None

    @property
    def speed(self) -> float | None:
        if isinstance(self.details, CyclingDetails):
            return self.details.speed
        return None

    def with_interaction(self) -> WorkoutRecord:
        return replace(self, interaction_count=self.interaction_count + 1)


def describe(variant: Variant, created_at: datetime) -> str:
    return f"{variant.capitalize()} on {MONTHS[created_at.month - 1]} {created_at.day}"


def build_workout(request: CreateRequest, *, now: datetime, record_id: str) -> WorkoutRecord:
    """Validate a create request and compute its derived metric and description.

    Raises ValidationError on the first invalid field; nothing is coerced.
    """
    if request.variant not in VARIANTS:
        raise ValidationError(
            "variant", f"Unknown workout type '{request.variant}'. Use running or cycling"
        )
    variant: Variant = "running" if request.variant == "running" else "cycling"

    coordinates = _validate_coordinates(request.coordinates)
    distance_km = _require_number(request.distance_km, "distance_km")
    duration_min = _require_number(request.duration_min, "duration_min")
    if distance_km <= 0:
        raise ValidationError("distance_km", "distance_km must be > 0")
    if duration_min <= 0:
        raise ValidationError("duration_min", "duration_min must be > 0")

    details: WorkoutDetails
    if variant == "running":
        cadence = _require_number(request.variant_extra, "cadence")
        if cadence <= 0:
            raise ValidationError("cadence", "cadence must be > 0")
        if not cadence.is_integer():
            raise ValidationError("cadence", "cadence must be a whole number of steps/min")
        details = RunningDetails(cadence=int(cadence), pace=duration_min / distance_km)
    else:
        elevation = _require_number(request.variant_extra, "elevation_gain_m")
        if elevation < 0:
            raise ValidationError("elevation_gain_m", "elevation_gain_m must be >= 0")
        details = CyclingDetails(
            elevation_gain_m=elevation,
            speed=distance_km / (duration_min / 60),
        )

    return WorkoutRecord(
        id=record_id,
        created_at=now,
        coordinates=coordinates,
        distance_km=distance_km,
        duration_min=duration_min,
        variant=variant,
        description=describe(variant, now),
        details=details,
    )


def _require_number(raw: object, field_name: str) -> float:
    # bool is an int subclass, but True is never a distance
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ValidationError(field_name, f"{field_name} must be a number")
    if not math.isfinite(raw):
        raise ValidationError(field_name, f"{field_name} must be finite")
    return float(raw)


def _validate_coordinates(raw: object) -> tuple[float, float]:
    if not isinstance(raw, (tuple, list)) or len(raw) != 2:
        raise ValidationError("coordinates", "coordinates must be a (latitude, longitude) pair")
    lat = _require_number(raw[0], "latitude")
    lng = _require_number(raw[1], "longitude")
    if not -90 <= lat <= 90:
        raise ValidationError("latitude", "latitude must be within [-90, 90]")
    if not -180 <= lng <= 180:
        raise ValidationError("longitude", "longitude must be within [-180, 180]")
    return (lat, lng)
