# services/planner.py

import datetime
import logging
import re
from typing import Any, Iterable, List, Mapping

from core.models import Itinerary, TripPreferences
from core.timeparse import parse_trip_date
from ai import gemini

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ["destination", "duration", "budget", "interests"]
PACES = ("relaxed", "balanced", "packed")
TRAVEL_MODES = ("walk", "public", "car", "mixed")
LANGUAGES = ["English", "Hindi", "Bengali", "Tamil", "Telugu", "Marathi"]
INTEREST_TAGS = [
    "heritage",
    "nightlife",
    "adventure",
    "food",
    "beaches",
    "shopping",
    "temples",
    "wildlife",
    "trekking",
]

# name → interests; applying one also sets budget 45000 and 5 days
QUICK_STARTS = {
    "Goa": ["beaches", "nightlife", "food"],
    "Jaipur": ["heritage", "shopping", "food"],
    "Kerala": ["beaches", "wildlife", "food"],
    "Manali": ["adventure", "trekking", "temples"],
    "Rishikesh": ["adventure", "temples", "trekking"],
}
QUICK_START_BUDGET = 45000
QUICK_START_DURATION = 5

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class PreferencesError(ValueError):
    """Form input rejected before anything is sent to the model."""


def merge_interests(selected: Iterable[str], manual: str = "") -> str:
    """
    Chips first, then the comma-separated free text; blanks dropped,
    duplicates removed keeping the first occurrence.
    """
    typed = [s.strip() for s in (manual or "").split(",")]
    merged: List[str] = []
    for tag in list(selected) + typed:
        if tag and tag not in merged:
            merged.append(tag)
    return ", ".join(merged)


def quick_start(name: str) -> dict:
    """Form values for one of the popular-destination shortcuts."""
    return {
        "destination": f"{name}, India",
        "interests": list(QUICK_STARTS[name]),
        "budget": QUICK_START_BUDGET,
        "duration": QUICK_START_DURATION,
    }


def _to_int(value: Any):
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    m = _LEADING_INT.match(str(value))
    return int(m.group(1)) if m else None


def validate_preferences(raw: Mapping[str, Any]) -> TripPreferences:
    """Check a submitted form / request body and freeze it into TripPreferences."""
    missing = [f for f in REQUIRED_FIELDS if not raw.get(f)]
    if missing:
        raise PreferencesError(f"Missing required fields: {', '.join(missing)}")

    duration = _to_int(raw["duration"])
    if duration is None or duration < 1 or duration > 30:
        raise PreferencesError("Duration must be between 1 and 30 days")

    budget = _to_int(raw["budget"])
    if budget is None or budget < 1000:
        raise PreferencesError("Budget must be at least ₹1000")

    pace = raw.get("pace") or "balanced"
    if pace not in PACES:
        raise PreferencesError(f"Pace must be one of: {', '.join(PACES)}")

    travel_mode = raw.get("travelMode") or raw.get("travel_mode") or "mixed"
    if travel_mode not in TRAVEL_MODES:
        raise PreferencesError(f"Travel mode must be one of: {', '.join(TRAVEL_MODES)}")

    start = raw.get("startDate") or raw.get("start_date") or None
    if start and not isinstance(start, datetime.date):
        try:
            start = parse_trip_date(str(start))
        except ValueError:
            raise PreferencesError("Start date must be in YYYY-MM-DD format")

    interests = raw["interests"]
    if not isinstance(interests, str):
        interests = merge_interests(interests)

    return TripPreferences(
        destination=str(raw["destination"]).strip(),
        duration=duration,
        budget=budget,
        interests=interests,
        language=raw.get("language") or "English",
        start_date=start,
        pace=pace,
        travel_mode=travel_mode,
        dietary=(raw.get("dietary") or "").strip(),
    )


def plan_trip(prefs: TripPreferences) -> Itinerary:
    logger.info(
        "Planning %d days in %s (budget ₹%d)",
        prefs.duration, prefs.destination, prefs.budget,
    )
    return gemini.generate_itinerary(gemini.build_prompt(prefs))


def _money(amount: float) -> str:
    return f"₹{amount:,.0f}"


def render_markdown(itin: Itinerary) -> str:
    """Printable view of an itinerary."""
    s = itin.summary
    out = [
        f"# Your Trip to {s.destination}",
        "",
        f"**Duration:** {s.duration} days · **Estimated Cost:** {_money(s.total_estimated_cost)}",
    ]
    for day in itin.days:
        out += ["", f"## Day {day.day}: {day.theme}", ""]
        for act in day.activities:
            line = f"- **{act.time or '--:--'}** {act.description}"
            if act.location:
                line += f"  \n  📍 {act.location}"
            if act.cost:
                line += f"  \n  💰 {_money(act.cost)}"
            out.append(line)
    return "\n".join(out) + "\n"
