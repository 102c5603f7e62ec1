# core/schema.py
"""
Validation of the raw itinerary JSON returned by the model.

Anything that does not match the expected shape is rejected with
ItineraryParseError instead of being passed on as-is.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.models import Activity, Itinerary, ItineraryDay, TripSummary

INVALID_RESPONSE_MESSAGE = "The AI model returned an invalid response. Please try again."


class ItineraryParseError(ValueError):
    def __init__(self, message: str = INVALID_RESPONSE_MESSAGE, details: Any = None):
        super().__init__(message)
        self.details = details


class ActivityIn(BaseModel):
    time: Optional[str] = None
    description: str
    location: Optional[str] = None
    cost: Optional[float] = None

    @field_validator("time", mode="before")
    @classmethod
    def _time_as_text(cls, v):
        # the model sometimes sends 9 or 14.5 instead of "9"
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class DayIn(BaseModel):
    day: int
    theme: str = ""
    activities: List[ActivityIn] = Field(default_factory=list)


class TripSummaryIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    destination: str
    duration: int
    total_estimated_cost: float = Field(alias="totalEstimatedCost")


class ItineraryIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    trip_summary: TripSummaryIn = Field(alias="tripSummary")
    days: List[DayIn]

    def to_domain(self) -> Itinerary:
        s = self.trip_summary
        return Itinerary(
            summary=TripSummary(
                destination=s.destination,
                duration=s.duration,
                total_estimated_cost=s.total_estimated_cost,
            ),
            days=[
                ItineraryDay(
                    day=d.day,
                    theme=d.theme,
                    activities=[
                        Activity(
                            description=a.description,
                            time=a.time,
                            location=a.location,
                            cost=a.cost,
                        )
                        for a in d.activities
                    ],
                )
                for d in self.days
            ],
        )


def parse_itinerary(data: Any) -> Itinerary:
    """Validate a decoded JSON value and map it onto the domain dataclasses."""
    try:
        return ItineraryIn.model_validate(data).to_domain()
    except ValidationError as e:
        raise ItineraryParseError(
            details=e.errors(include_url=False, include_context=False)
        ) from e
