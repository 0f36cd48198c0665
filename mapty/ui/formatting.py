"""Display helpers shared by the web UI and the terminal."""

from __future__ import annotations

from dataclasses import dataclass

from mapty.workout.model import CyclingDetails, RunningDetails, WorkoutRecord

ICONS = {"running": "🏃‍♂️", "cycling": "🚴‍♀️"}


@dataclass(frozen=True)
class DetailRow:
    icon: str
    value: str
    unit: str


def fmt_number(value: float) -> str:
    """Show whole numbers without a trailing .0, like the form echoes them."""
    if float(value).is_integer():
        return f"{int(value):d}"
    return f"{value:g}"


def fmt_metric(value: float) -> str:
    return f"{value:.1f}"


def workout_icon(record: WorkoutRecord) -> str:
    return ICONS[record.variant]


def popup_text(record: WorkoutRecord) -> str:
    return f"{workout_icon(record)} {record.description}"


def detail_rows(record: WorkoutRecord) -> list[DetailRow]:
    rows = [
        DetailRow(workout_icon(record), fmt_number(record.distance_km), "km"),
        DetailRow("⏱", fmt_number(record.duration_min), "min"),
    ]
    details = record.details
    if isinstance(details, RunningDetails):
        rows.append(DetailRow("⚡️", fmt_metric(details.pace), "min/km"))
        rows.append(DetailRow("🦶🏼", f"{details.cadence:d}", "spm"))
    elif isinstance(details, CyclingDetails):
        rows.append(DetailRow("⚡️", fmt_metric(details.speed), "km/h"))
        rows.append(DetailRow("⛰", fmt_number(details.elevation_gain_m), "m"))
    return rows


def summary_line(record: WorkoutRecord) -> str:
    parts = "  ".join(f"{row.value} {row.unit}" for row in detail_rows(record))
    return f"{record.id}  {popup_text(record):<28} {parts}"
