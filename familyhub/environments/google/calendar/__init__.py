"""
Google Calendar Module - events on the connected family calendar.
"""

from familyhub.environments.google.calendar.client import GoogleCalendarClient
from familyhub.environments.google.calendar.schemas import (
    CalendarEvent,
    CalendarInfo,
    EventInput,
    EventTime,
    NormalizedEvent,
)

__all__ = [
    "GoogleCalendarClient",
    "CalendarEvent",
    "CalendarInfo",
    "EventInput",
    "EventTime",
    "NormalizedEvent",
]
