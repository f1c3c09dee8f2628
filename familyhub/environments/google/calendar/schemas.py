"""
Google Calendar Schemas - provider event shape and the app's event shape.

CalendarEvent/EventTime mirror the parts of the Google Calendar API event
resource we read. NormalizedEvent is what the FamilyHub front-end renders;
EventInput is what it sends when creating an event.

Reference: https://developers.google.com/calendar/api/v3/reference/events
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class EventTime(BaseModel):
    """
    Event start or end time.

    Google returns one of:
    - dateTime: timed events (e.g. "2025-03-15T14:30:00-05:00")
    - date: all-day events (e.g. "2025-03-15")
    """
    date_time: Optional[str] = Field(None, alias="dateTime")
    date: Optional[str] = Field(None)
    time_zone: Optional[str] = Field(None, alias="timeZone")

    class Config:
        populate_by_name = True

    def is_all_day(self) -> bool:
        return self.date_time is None

    def get_datetime(self) -> Optional[datetime]:
        """Parsed dateTime; None for all-day events."""
        if not self.date_time:
            return None
        return datetime.fromisoformat(self.date_time.replace("Z", "+00:00"))

    def get_date(self) -> str:
        """YYYY-MM-DD part of whichever field is present."""
        return (self.date_time or self.date or "")[:10]


class CalendarEvent(BaseModel):
    """A Google Calendar event, reduced to the fields we map."""
    id: str = Field(..., description="Unique event identifier")
    summary: Optional[str] = Field(None, description="Event title")
    description: Optional[str] = Field(None)
    start: EventTime = Field(default_factory=EventTime)
    end: Optional[EventTime] = Field(None)
    color_id: Optional[str] = Field(None, alias="colorId")

    class Config:
        populate_by_name = True


class CalendarEventsResponse(BaseModel):
    """Response from events.list."""
    items: List[CalendarEvent] = Field(default_factory=list)
    next_page_token: Optional[str] = Field(None, alias="nextPageToken")
    time_zone: Optional[str] = Field(None, alias="timeZone")

    class Config:
        populate_by_name = True


class CalendarInfo(BaseModel):
    """Entry of the user's calendar list."""
    id: str
    summary: Optional[str] = None
    primary: Optional[bool] = False
    time_zone: Optional[str] = Field(None, alias="timeZone")

    class Config:
        populate_by_name = True


class CalendarListResponse(BaseModel):
    """Response from calendarList.list."""
    items: List[CalendarInfo] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# APPLICATION SHAPES
# ---------------------------------------------------------------------------


class NormalizedEvent(BaseModel):
    """
    An event as the FamilyHub front-end stores it.

    Presentation fields are fixed placeholders for imported events and
    recurrence is not modeled; gcal_id is what delete round-trips on.
    """
    id: str
    gcal_id: str = Field(..., alias="gcalId")
    date: str
    title: str
    time: str = ""
    who: str = ""
    col: str = "dot-bl"
    col_hex: str = Field("#4285F4", alias="colHex")
    from_gcal: bool = Field(True, alias="fromGCal")
    repeat: str = "none"
    repeat_id: Optional[str] = Field(None, alias="repeatId")

    class Config:
        populate_by_name = True


class EventInput(BaseModel):
    """Event sent by the front-end for creation."""
    title: Optional[str] = None
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$")
    time: Optional[str] = None
    who: Optional[str] = None
    col_hex: Optional[str] = Field(None, alias="colHex")

    class Config:
        populate_by_name = True
