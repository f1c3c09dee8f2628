"""
Google Environment Module - OAuth and Calendar.

    from familyhub.environments.google import GoogleAuthClient, GoogleCalendarClient

    auth_client = GoogleAuthClient()
    tokens = await auth_client.exchange_code_for_tokens(code)

    calendar = GoogleCalendarClient(access_token=tokens.access_token)
    events = await calendar.list_upcoming_events("primary")
"""

from familyhub.environments.google.auth import GoogleAuthClient, CALENDAR_SCOPES
from familyhub.environments.google.calendar import GoogleCalendarClient, CalendarEvent

__all__ = [
    "GoogleAuthClient",
    "GoogleCalendarClient",
    "CalendarEvent",
    "CALENDAR_SCOPES",
]
