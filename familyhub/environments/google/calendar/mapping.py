"""
Event mapping - conversions between Google's event shape and FamilyHub's.

Dates and times coming from the front-end are wall-clock values ("2025-03-15",
"3:30 PM"); they are combined into naive datetimes and sent to Google along
with CALENDAR_TIMEZONE, so Google does the zone interpretation.
"""

import re
from datetime import datetime, timedelta
from typing import Optional

from familyhub.core.config import settings
from familyhub.environments.google.calendar.schemas import (
    CalendarEvent,
    EventInput,
    NormalizedEvent,
)

EVENT_ID_PREFIX = "gcal_"
DEFAULT_TITLE = "(No title)"
DEFAULT_DURATION_MINUTES = 60

# FamilyHub palette → closest Google colorId (1-11)
GCAL_COLOR_IDS = {
    "#4285F4": "9",   # Blue (imported Google events)
    "#E9854C": "6",   # Tangerine
    "#40916C": "2",   # Sage
    "#C75B5B": "11",  # Tomato
    "#E9A84C": "5",   # Banana
    "#4C89C8": "9",   # Blueberry
}
DEFAULT_COLOR_ID = "9"

_TIME_RE = re.compile(r"(?<!\d)(\d{1,2}):(\d{2})\s*(AM|PM)", re.IGNORECASE)


def gcal_color_id(hex_color: Optional[str]) -> str:
    """Google colorId for an app color, DEFAULT_COLOR_ID when unknown."""
    return GCAL_COLOR_IDS.get(hex_color or "", DEFAULT_COLOR_ID)


def to_datetime(date_str: str, time_str: Optional[str] = None, duration_minutes: int = 0) -> datetime:
    """
    Combine "YYYY-MM-DD" and "h:MM AM|PM" into a naive local datetime.

    12 AM is hour 0 and 12 PM stays 12. A missing or unreadable time means
    midnight. duration_minutes is added afterwards, rolling over days and
    months as needed.

    >>> to_datetime("2025-03-15", "12:30 PM", 60)
    datetime.datetime(2025, 3, 15, 13, 30)
    """
    year, month, day = (int(part) for part in date_str.split("-"))
    hour, minute = 0, 0

    if time_str:
        match = _TIME_RE.search(time_str)
        if match:
            hour = int(match.group(1))
            minute = int(match.group(2))
            marker = match.group(3).upper()
            if marker == "PM" and hour != 12:
                hour += 12
            if marker == "AM" and hour == 12:
                hour = 0

    # timedelta absorbs out-of-range minutes the same way it absorbs the duration
    start = datetime(year, month, day) + timedelta(hours=hour, minutes=minute)
    return start + timedelta(minutes=duration_minutes)


def format_time(value: datetime) -> str:
    """12-hour clock string in the value's own offset, e.g. "2:30 PM"."""
    hour = value.hour % 12 or 12
    marker = "PM" if value.hour >= 12 else "AM"
    return f"{hour}:{value.minute:02d} {marker}"


def normalize_event(event: CalendarEvent) -> NormalizedEvent:
    """
    Project a Google event onto the FamilyHub event shape.

    Date and time are read as Google wrote them, in the calendar's own zone.
    """
    start_dt = event.start.get_datetime()
    time = format_time(start_dt) if start_dt is not None else ""

    return NormalizedEvent(
        id=EVENT_ID_PREFIX + event.id,
        gcal_id=event.id,
        date=event.start.get_date(),
        title=event.summary or DEFAULT_TITLE,
        time=time,
    )


def build_event_body(event: EventInput, tz_name: Optional[str] = None) -> dict:
    """
    Google event body for a FamilyHub event.

    No time → all-day event (end date exclusive, so the next day).
    With a time → timed event lasting DEFAULT_DURATION_MINUTES.
    """
    tz_name = tz_name or settings.CALENDAR_TIMEZONE

    if event.time:
        start = {
            "dateTime": to_datetime(event.date, event.time).isoformat(),
            "timeZone": tz_name,
        }
        end = {
            "dateTime": to_datetime(event.date, event.time, DEFAULT_DURATION_MINUTES).isoformat(),
            "timeZone": tz_name,
        }
    else:
        start_date = to_datetime(event.date).date()
        start = {"date": start_date.isoformat()}
        end = {"date": (start_date + timedelta(days=1)).isoformat()}

    body = {
        "start": start,
        "end": end,
        "colorId": gcal_color_id(event.col_hex),
    }
    if event.title:
        body["summary"] = event.title
    if event.who:
        body["description"] = f"Who: {event.who}"

    return body
