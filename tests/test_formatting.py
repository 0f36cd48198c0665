from __future__ import annotations

from datetime import datetime, timezone

from mapty.ui.formatting import ICONS, detail_rows, fmt_number, popup_text, summary_line
from mapty.workout.model import CreateRequest, build_workout

NOW = datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)


def test_running_detail_rows() -> None:
    record = build_workout(
        CreateRequest("running", (0.0, 0.0), 5.2, 24, 178), now=NOW, record_id="r1"
    )

    rows = detail_rows(record)
    assert [(row.value, row.unit) for row in rows] == [
        ("5.2", "km"),
        ("24", "min"),
        ("4.6", "min/km"),
        ("178", "spm"),
    ]
    assert rows[0].icon == ICONS["running"]
    assert popup_text(record) == f"{ICONS['running']} Running on October 19"


def test_cycling_detail_rows_and_summary() -> None:
    record = build_workout(
        CreateRequest("cycling", (0.0, 0.0), 27, 95, 523), now=NOW, record_id="c1"
    )

    rows = detail_rows(record)
    assert [(row.value, row.unit) for row in rows[2:]] == [("17.1", "km/h"), ("523", "m")]

    line = summary_line(record)
    assert line.startswith(f"c1  {ICONS['cycling']} Cycling on October 19")
    assert "27 km" in line and "17.1 km/h" in line


def test_fmt_number() -> None:
    assert fmt_number(10.0) == "10"
    assert fmt_number(7.25) == "7.25"
