# run.py

import argparse
import json
import logging
import os
import sys
from dotenv import load_dotenv
from rich import print
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.markup import escape
from core.ics_export import CalendarRangeError, export_ics, ics_filename
from core.schema import ItineraryParseError, parse_itinerary
from services import planner

load_dotenv()   # Loads variables from .env


def _write_ics(itin, start, out_path):
    try:
        ics = export_ics(itin, start)
    except CalendarRangeError as e:
        print(f"[bold red]{escape(str(e))}[/]")
        return 1
    if ics is None:
        print("[bold red]A valid start date (YYYY-MM-DD) is required for .ics export.[/]")
        return 1
    out_path = out_path or ics_filename()
    with open(out_path, "w", encoding="utf-8", newline="") as f:
        f.write(ics)
    print(f"[bold green]Calendar written to[/] {escape(str(out_path))}")
    return 0


def cmd_plan(args) -> int:
    try:
        prefs = planner.validate_preferences(
            {
                "destination": args.destination,
                "duration": args.duration,
                "budget": args.budget,
                "interests": args.interests,
                "language": args.language,
                "startDate": args.start,
                "pace": args.pace,
                "travelMode": args.travel_mode,
                "dietary": args.dietary,
            }
        )
    except planner.PreferencesError as e:
        print(f"[bold red]{escape(str(e))}[/]")
        return 2

    print("[bold cyan]→ Generating itinerary with Gemini…[/]")
    try:
        itin = planner.plan_trip(prefs)
    except (ItineraryParseError, RuntimeError) as e:
        print(f"[bold red]{escape(str(e))}[/]")
        return 1

    print(Markdown(planner.render_markdown(itin)))

    if args.json:
        with open(args.json, "w", encoding="utf-8") as f:
            json.dump(itin.to_dict(), f, indent=2, ensure_ascii=False)
        print(f"[bold green]Itinerary saved to[/] {escape(args.json)}")

    if args.ics or args.start:
        return _write_ics(itin, args.start, args.ics)
    return 0


def cmd_ics(args) -> int:
    try:
        with open(args.itinerary, encoding="utf-8") as f:
            data = json.load(f)
        itin = parse_itinerary(data)
    except (OSError, ValueError) as e:
        print(f"[bold red]Cannot read itinerary {escape(args.itinerary)}: {escape(str(e))}[/]")
        return 1
    return _write_ics(itin, args.start, args.out)


def main(argv=None) -> int:
    p = argparse.ArgumentParser(description="AI Trip Planner")
    p.add_argument("-v", "--verbose", action="store_true")
    sub = p.add_subparsers(dest="command", required=True)

    pp = sub.add_parser("plan", help="generate an itinerary with Gemini")
    pp.add_argument("--destination", "--dest", required=True)
    pp.add_argument("--duration", type=int, required=True)
    pp.add_argument("--budget", type=int, required=True)      # INR
    pp.add_argument("--interests", required=True)             # comma-separated
    pp.add_argument("--language", default="English")
    pp.add_argument("--start")                                # YYYY-MM-DD
    pp.add_argument("--pace", choices=planner.PACES, default="balanced")
    pp.add_argument("--travel-mode", choices=planner.TRAVEL_MODES, default="mixed")
    pp.add_argument("--dietary", default="")
    pp.add_argument("--json", help="save the itinerary JSON to this path")
    pp.add_argument("--ics", help="write the .ics here (needs --start)")
    pp.set_defaults(func=cmd_plan)

    pi = sub.add_parser("ics", help="convert a saved itinerary JSON to .ics")
    pi.add_argument("itinerary")
    pi.add_argument("--start", required=True)                 # YYYY-MM-DD
    pi.add_argument("--out")
    pi.set_defaults(func=cmd_ics)

    args = p.parse_args(argv)

    level = "DEBUG" if args.verbose else os.getenv("LOG_LEVEL", "WARNING")
    logging.basicConfig(level=level, format="%(message)s", handlers=[RichHandler()])

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
