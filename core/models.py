# core/models.py

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import List, NamedTuple, Optional


@dataclass(frozen=True)
class TripPreferences:
    """Snapshot of the planning form, built once per submission."""
    destination: str
    duration: int
    budget: int
    interests: str
    language: str = "English"
    start_date: Optional[date] = None
    pace: str = "balanced"
    travel_mode: str = "mixed"
    dietary: str = ""


@dataclass(frozen=True)
class TripSummary:
    destination: str
    duration: int
    total_estimated_cost: float


@dataclass(frozen=True)
class Activity:
    description: str
    time: Optional[str] = None
    location: Optional[str] = None
    cost: Optional[float] = None


@dataclass(frozen=True)
class ItineraryDay:
    day: int
    theme: str
    activities: List[Activity] = field(default_factory=list)


@dataclass(frozen=True)
class Itinerary:
    summary: TripSummary
    days: List[ItineraryDay] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Wire shape, as the model is asked to produce it."""
        return {
            "tripSummary": {
                "destination": self.summary.destination,
                "duration": self.summary.duration,
                "totalEstimatedCost": self.summary.total_estimated_cost,
            },
            "days": [
                {
                    "day": d.day,
                    "theme": d.theme,
                    "activities": [
                        {
                            "time": a.time,
                            "description": a.description,
                            "location": a.location,
                            "cost": a.cost,
                        }
                        for a in d.activities
                    ],
                }
                for d in self.days
            ],
        }


class ParsedTime(NamedTuple):
    hour: int
    minute: int


@dataclass(frozen=True)
class CalendarOptions:
    prodid: str = "-//AI Trip Planner//EN"
    line_ending: str = "\n"
    event_duration: timedelta = timedelta(hours=1)
