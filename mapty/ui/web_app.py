"""NiceGUI web UI for the workout tracker."""

from __future__ import annotations

from pathlib import Path

from nicegui import ui

from mapty.core.manager import Snapshot
from mapty.ui.controller import TrackerController, open_session
from mapty.ui.formatting import detail_rows, fmt_number, popup_text
from mapty.workout.model import WorkoutRecord
from mapty.workout.store import JsonFileStore

DEFAULT_LATITUDE = 51.5072
DEFAULT_LONGITUDE = -0.1276


def run_web_ui(
    *,
    store_path: Path | None = None,
    host: str = "127.0.0.1",
    port: int = 8089,
) -> int:
    controller = open_session(JsonFileStore(store_path))
    ui.add_head_html(
        """
        <style>
          body { background: #2d3439; color: #ececec; font-family: Manrope, Arial, sans-serif; }
          .mt-card { background: #42484d; border-radius: 6px; }
          .mt-running { border-left: 5px solid #00c46a; }
          .mt-cycling { border-left: 5px solid #ffb545; }
          .mt-value { font-size: 1.1rem; font-weight: 700; }
          .mt-unit { font-size: 0.8rem; color: #aaa; text-transform: uppercase; }
        </style>
        """
    )

    with ui.column().classes("w-full max-w-xl gap-3"):
        ui.label("MAPTY").classes("text-xl font-semibold tracking-wide")

        with ui.card().classes("w-full mt-card"):
            with ui.row().classes("w-full items-end gap-2"):
                type_select = ui.select(
                    {"running": "Running", "cycling": "Cycling"},
                    value="running",
                    label="Type",
                )
                lat_input = ui.number("Latitude", value=DEFAULT_LATITUDE, format="%.4f")
                lng_input = ui.number("Longitude", value=DEFAULT_LONGITUDE, format="%.4f")
            with ui.row().classes("w-full items-end gap-2"):
                distance_input = ui.number("Distance (km)", min=0)
                duration_input = ui.number("Duration (min)", min=0)
                cadence_input = ui.number("Cadence (step/min)", min=0)
                elevation_input = ui.number("Elev Gain (m)", min=0)
                elevation_input.set_visibility(False)
            submit_btn = ui.button("OK")

        with ui.row().classes("w-full items-center gap-2"):
            remove_all_btn = ui.button("Remove all")
            sort_btn = ui.button("Sort All")
            show_all_btn = ui.button("All workouts")
        bounds_label = ui.label("").classes("text-sm")
        workouts_list = ui.column().classes("w-full gap-2")

    def render_item(record: WorkoutRecord) -> None:
        with ui.card().classes(f"w-full mt-card mt-{record.variant}") as card:
            with ui.row().classes("w-full items-center justify-between"):
                ui.label(record.description).classes("text-base font-semibold")
                ui.button(icon="delete").props("flat dense").on(
                    "click.stop", lambda _, rid=record.id: controller.delete_requested(rid)
                )
            with ui.row().classes("gap-4"):
                for row in detail_rows(record):
                    ui.label(row.icon)
                    ui.label(row.value).classes("mt-value")
                    ui.label(row.unit).classes("mt-unit")
        card.on("click", lambda _, rid=record.id: on_item_click(rid))

    def refresh_list(view: Snapshot | None = None) -> None:
        workouts_list.clear()
        with workouts_list:
            for record in view if view is not None else controller.current_view():
                render_item(record)
        visible = controller.actions_visible
        remove_all_btn.set_visibility(visible)
        sort_btn.set_visibility(visible)
        show_all_btn.set_visibility(visible)
        sort_btn.set_text(controller.sort_label)

    def on_type_change() -> None:
        running = type_select.value == "running"
        cadence_input.set_visibility(running)
        elevation_input.set_visibility(not running)

    def clear_form() -> None:
        for field in (distance_input, duration_input, cadence_input, elevation_input):
            field.value = None

    def on_submit() -> None:
        variant = str(type_select.value)
        extra = cadence_input.value if variant == "running" else elevation_input.value
        outcome = controller.create_requested(
            variant,
            (lat_input.value, lng_input.value),
            distance_input.value,
            duration_input.value,
            extra,
        )
        if outcome.record is None:
            ui.notify(f"Inputs have to be positive numbers: {outcome.error}", color="negative")
            return
        clear_form()
        ui.notify(f"Saved: {popup_text(outcome.record)}", color="positive")

    def on_item_click(record_id: str) -> None:
        coords = controller.interaction_requested(record_id)
        if coords is not None:
            ui.notify(f"Workout at {fmt_number(coords[0])}, {fmt_number(coords[1])}")

    def on_sort() -> None:
        refresh_list(controller.sort_toggled())

    def on_show_all() -> None:
        bounds = controller.manager.bounds()
        if bounds is None:
            bounds_label.set_text("")
            return
        (south, west), (north, east) = bounds
        bounds_label.set_text(
            f"All workouts within lat {fmt_number(south)}..{fmt_number(north)}, "
            f"lng {fmt_number(west)}..{fmt_number(east)}"
        )

    controller.on_collection_changed(lambda _: refresh_list())
    type_select.on_value_change(lambda _: on_type_change())
    submit_btn.on_click(on_submit)
    remove_all_btn.on_click(controller.clear_all_requested)
    sort_btn.on_click(on_sort)
    show_all_btn.on_click(on_show_all)

    refresh_list()
    ui.run(host=host, port=port, reload=False, title="Mapty")
    return 0
