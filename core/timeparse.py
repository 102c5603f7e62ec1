# core/timeparse.py

import datetime
import re
from typing import Optional

from core.models import ParsedTime

# "9:00 AM", "9am", "12:30 pm"
_TWELVE_HOUR = re.compile(r"([0-9]{1,2})(?::([0-9]{2}))?\s*(AM|PM)", re.IGNORECASE)
# "14:30", "9"
_BARE = re.compile(r"([0-9]{1,2})(?::([0-9]{2}))?")


def _fallback(fallback_index: int) -> ParsedTime:
    return ParsedTime(10 + fallback_index * 2, 0)


def parse_time_label(label: Optional[str], fallback_index: int = 0) -> ParsedTime:
    """
    Turn a free-text time label into (hour, minute).

    Unrecognised or empty labels fall back to a slot derived from the
    activity's position in its day: 10:00, 12:00, 14:00, ...
    Values are not range-checked, "25:99" comes back as (25, 99).
    """
    if not label:
        return _fallback(fallback_index)

    text = label.strip()

    m = _TWELVE_HOUR.fullmatch(text)
    if m:
        hour = int(m.group(1)) % 12
        minute = int(m.group(2) or 0)
        if m.group(3).upper() == "PM":
            hour += 12
        return ParsedTime(hour, minute)

    m = _BARE.fullmatch(text)
    if m:
        return ParsedTime(int(m.group(1)), int(m.group(2) or 0))

    return _fallback(fallback_index)


_ISO_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def parse_trip_date(value: str) -> datetime.date:
    """Strict YYYY-MM-DD; raises ValueError for any other shape."""
    text = value.strip()
    if not _ISO_DATE.fullmatch(text):
        raise ValueError(f"expected YYYY-MM-DD, got {value!r}")
    return datetime.datetime.strptime(text, "%Y-%m-%d").date()
