# core/ics_export.py
"""
Itinerary → iCalendar (.ics) export.

Times are naive wall-clock values. They are stamped with a trailing "Z"
as a formatting convention only; no timezone conversion happens.
"""

import datetime as dt
import logging
import re
import time
from typing import List, Optional, Union

from core.models import CalendarOptions, Itinerary
from core.timeparse import parse_time_label, parse_trip_date

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_DEFAULT_OPTIONS = CalendarOptions()


class CalendarRangeError(ValueError):
    """An activity lands outside the dates a calendar can hold (years 1-9999)."""

    def __init__(self, day: int):
        super().__init__(f"Day {day} falls outside the supported calendar range")
        self.day = day


def _sanitize(value: Optional[str]) -> str:
    if not value:
        return ""
    return _LINE_BREAK.sub(" ", value)


def _fmt(stamp: dt.datetime) -> str:
    return stamp.strftime("%Y%m%dT%H%M%S") + "Z"


def encode_itinerary(
    itinerary: Itinerary,
    trip_start: dt.date,
    options: CalendarOptions = _DEFAULT_OPTIONS,
) -> str:
    """
    Build the calendar document: one VEVENT per activity, in input order.

    Day N is anchored on trip_start + (N - 1) days. Parsed hours/minutes are
    added as a duration, so "25:00" lands on the following day at 01:00.
    """
    lines: List[str] = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{options.prodid}",
    ]

    for day in itinerary.days:
        try:
            midnight = dt.datetime.combine(
                trip_start + dt.timedelta(days=day.day - 1), dt.time()
            )
        except OverflowError as e:
            raise CalendarRangeError(day.day) from e
        for i, act in enumerate(day.activities):
            t = parse_time_label(act.time, i)
            try:
                start = midnight + dt.timedelta(hours=t.hour, minutes=t.minute)
                end = start + options.event_duration
            except OverflowError as e:
                raise CalendarRangeError(day.day) from e
            lines += [
                "BEGIN:VEVENT",
                f"SUMMARY:{_sanitize(act.description)}",
                f"DTSTART:{_fmt(start)}",
                f"DTEND:{_fmt(end)}",
                f"LOCATION:{_sanitize(act.location)}",
                "END:VEVENT",
            ]

    lines.append("END:VCALENDAR")
    eol = options.line_ending
    return eol.join(lines) + eol


def export_ics(
    itinerary: Itinerary,
    start_date: Union[str, dt.date, None],
    options: CalendarOptions = _DEFAULT_OPTIONS,
) -> Optional[str]:
    """
    Entry point used by the UI, the API and the CLI.

    Returns None without encoding anything when the trip start date is
    missing or not a valid YYYY-MM-DD string. Raises CalendarRangeError when
    a day index pushes an activity past the representable dates.
    """
    if not start_date:
        logger.warning("ICS export skipped: no trip start date")
        return None

    if isinstance(start_date, dt.datetime):
        start_date = start_date.date()
    elif not isinstance(start_date, dt.date):
        try:
            start_date = parse_trip_date(start_date)
        except ValueError:
            logger.warning("ICS export skipped: invalid start date %r", start_date)
            return None

    try:
        ics = encode_itinerary(itinerary, start_date, options)
    except CalendarRangeError as e:
        logger.warning("ICS export failed: %s", e)
        raise
    logger.info(
        "Exported %d events starting %s",
        sum(len(d.activities) for d in itinerary.days),
        start_date.isoformat(),
    )
    return ics


def ics_filename(now: Optional[float] = None) -> str:
    """Download name, e.g. itinerary-1718000000000.ics"""
    if now is None:
        now = time.time()
    return f"itinerary-{int(now * 1000)}.ics"
