"""Terminal CLI entrypoint for the Mapty workout tracker."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from mapty.core.manager import Snapshot
from mapty.ui.controller import TrackerController, open_session
from mapty.ui.formatting import summary_line
from mapty.workout.store import JsonFileStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Mapty workout tracker")
    parser.add_argument(
        "--store",
        type=Path,
        default=None,
        help="Storage file (default: ~/.mapty/storage.json)",
    )
    parser.add_argument("--list", action="store_true", help="List saved workouts")
    parser.add_argument(
        "--sorted",
        action="store_true",
        help="With --list, order by type then distance",
    )
    parser.add_argument(
        "--add",
        choices=("running", "cycling"),
        default=None,
        help="Record a new workout of the given type",
    )
    parser.add_argument(
        "--coords",
        nargs=2,
        metavar=("LAT", "LNG"),
        default=None,
        help="Workout location for --add",
    )
    parser.add_argument("--distance", default=None, help="Distance in km for --add")
    parser.add_argument("--duration", default=None, help="Duration in minutes for --add")
    parser.add_argument("--cadence", default=None, help="Running cadence in steps/min")
    parser.add_argument("--elevation", default=None, help="Cycling elevation gain in m")
    parser.add_argument("--remove", metavar="ID", default=None, help="Delete a workout")
    parser.add_argument(
        "--click",
        metavar="ID",
        default=None,
        help="Record an interaction with a workout and print its location",
    )
    parser.add_argument("--clear", action="store_true", help="Delete every workout")
    parser.add_argument(
        "--ui-web",
        action="store_true",
        help="Launch web UI (NiceGUI)",
    )
    parser.add_argument(
        "--web-host",
        default="127.0.0.1",
        help="Host bind for --ui-web",
    )
    parser.add_argument(
        "--web-port",
        type=int,
        default=8089,
        help="Port for --ui-web",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def print_workouts(view: Snapshot) -> None:
    if not view:
        print("No workouts yet")
        return
    for record in view:
        print(summary_line(record))


def run_add(controller: TrackerController, args: argparse.Namespace) -> int:
    coords = args.coords or (None, None)
    extra = args.cadence if args.add == "running" else args.elevation
    outcome = controller.create_requested(
        args.add,
        (coords[0], coords[1]),
        args.distance,
        args.duration,
        extra,
    )
    if outcome.record is None:
        print(f"Invalid workout: {outcome.error}", file=sys.stderr)
        return 2
    print(f"Saved {summary_line(outcome.record)}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.ui_web:
        from mapty.ui.web_app import run_web_ui

        return run_web_ui(store_path=args.store, host=args.web_host, port=args.web_port)

    if not (args.add or args.list or args.remove or args.click or args.clear):
        parser.print_help()
        return 1

    controller = open_session(JsonFileStore(args.store))

    if args.clear:
        controller.clear_all_requested()
        print("Removed all workouts")
    if args.remove:
        if controller.manager.get(args.remove) is None:
            print(f"No workout with id {args.remove}")
        else:
            controller.delete_requested(args.remove)
            print(f"Removed {args.remove}")
    if args.click:
        coords = controller.interaction_requested(args.click)
        if coords is None:
            print(f"No workout with id {args.click}")
        else:
            print(f"{args.click} at {coords[0]}, {coords[1]}")
    if args.add:
        code = run_add(controller, args)
        if code:
            return code
    if args.list:
        mode = "sorted" if args.sorted else "unsorted"
        print_workouts(controller.manager.sorted_view(mode))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
