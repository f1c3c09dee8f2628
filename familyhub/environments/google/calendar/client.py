"""
Google Calendar API Client - list, create and delete events on one calendar.

Google reports failures as {"error": {...}} in the body; those become
APIError with the provider's status code and the error object in .response.
Network and JSON failures become APIError without a status code.

API Reference:
- Events API: https://developers.google.com/calendar/api/v3/reference/events
- CalendarList API: https://developers.google.com/calendar/api/v3/reference/calendarList

Usage Example:
    client = GoogleCalendarClient(access_token="ya29.xxx")
    events = await client.list_upcoming_events("primary", days=60)
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from urllib.parse import quote

import httpx

from familyhub.environments.base import APIError
from familyhub.environments.google.calendar.schemas import (
    CalendarEvent,
    CalendarEventsResponse,
    CalendarInfo,
    CalendarListResponse,
)


logger = logging.getLogger("familyhub.environments.google.calendar")

MAX_RESULTS = 250


class GoogleCalendarClient:
    """
    Google Calendar API client bound to one access token.

    Attributes:
        access_token: Google OAuth access token with calendar scope
    """

    BASE_URL = "https://www.googleapis.com/calendar/v3"

    def __init__(self, access_token: str, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.access_token = access_token
        self._transport = transport

    # -------------------------------------------------------------------------
    # HTTP CLIENT MANAGEMENT
    # -------------------------------------------------------------------------

    def _get_headers(self) -> dict:
        """Get authorization headers for API requests."""
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Accept": "application/json",
        }

    @staticmethod
    def _events_path(calendar_id: str) -> str:
        return f"/calendars/{quote(calendar_id, safe='')}/events"

    async def _send(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict] = None,
        json_body: Optional[dict] = None,
    ) -> httpx.Response:
        url = f"{self.BASE_URL}{endpoint}"

        async with httpx.AsyncClient(transport=self._transport) as client:
            try:
                return await client.request(
                    method=method,
                    url=url,
                    headers=self._get_headers(),
                    params=params,
                    json=json_body,
                    timeout=30.0,
                )
            except httpx.RequestError as e:
                logger.error(f"Network error in Calendar API: {e}")
                raise APIError(f"Network error: {e}")

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict] = None,
        json_body: Optional[dict] = None,
    ) -> dict:
        """
        Make an authenticated request and return the decoded JSON body.

        Raises:
            APIError: provider error payload, or transport/parse failure
        """
        response = await self._send(method, endpoint, params=params, json_body=json_body)

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Calendar API returned invalid JSON ({response.status_code})")
            raise APIError(f"Invalid response from Calendar API: {e}")

        if data.get("error") or response.status_code >= 400:
            error_detail = data.get("error") or data
            logger.error(f"Calendar API error: {response.status_code} - {error_detail}")
            raise APIError(
                f"API request failed with status {response.status_code}",
                status_code=response.status_code,
                response=error_detail,
            )

        return data

    # -------------------------------------------------------------------------
    # CALENDARS
    # -------------------------------------------------------------------------

    async def list_calendars(self) -> List[CalendarInfo]:
        """List calendars in the user's calendar list."""
        response_data = await self._make_request("GET", "/users/me/calendarList")
        calendars = CalendarListResponse(**response_data).items
        logger.info(f"Found {len(calendars)} calendars")
        return calendars

    async def find_calendar_by_name(self, name: str) -> Optional[CalendarInfo]:
        """First calendar whose display name equals name, or None."""
        for calendar in await self.list_calendars():
            if calendar.summary == name:
                return calendar
        return None

    # -------------------------------------------------------------------------
    # CALENDAR EVENTS
    # -------------------------------------------------------------------------

    async def list_upcoming_events(
        self,
        calendar_id: str,
        days: int = 60,
        now: Optional[datetime] = None,
        max_results: int = MAX_RESULTS,
    ) -> List[CalendarEvent]:
        """
        Events starting between now and now + days.

        Recurring events are expanded into instances and the result is
        ordered by start time.
        """
        time_min = now or datetime.now(timezone.utc)
        time_max = time_min + timedelta(days=days)

        params = {
            "timeMin": time_min.isoformat(),
            "timeMax": time_max.isoformat(),
            "singleEvents": "true",
            "orderBy": "startTime",
            "maxResults": max_results,
        }

        logger.info(
            "Fetching calendar events",
            extra={"calendar_id": calendar_id, "days": days},
        )

        response_data = await self._make_request("GET", self._events_path(calendar_id), params=params)
        events = CalendarEventsResponse(**response_data).items

        logger.info(f"Fetched {len(events)} calendar events")

        return events

    async def create_event(self, calendar_id: str, event_body: dict) -> CalendarEvent:
        """
        Insert an event built by mapping.build_event_body.

        Returns:
            The created event as Google returned it
        """
        logger.info(
            "Creating calendar event",
            extra={"calendar_id": calendar_id, "is_all_day": "date" in event_body.get("start", {})},
        )

        response_data = await self._make_request(
            "POST", self._events_path(calendar_id), json_body=event_body,
        )
        created = CalendarEvent(**response_data)

        logger.info(f"Created event: {created.id}")

        return created

    async def delete_event(self, calendar_id: str, event_id: str) -> bool:
        """
        Delete an event, best effort.

        The provider's answer is logged but not raised; only transport
        failures raise. Returns True when Google confirmed the deletion.
        """
        endpoint = f"{self._events_path(calendar_id)}/{quote(event_id, safe='')}"
        response = await self._send("DELETE", endpoint)

        if response.status_code in (200, 204):
            logger.info(f"Deleted event: {event_id}")
            return True

        logger.warning(f"Delete of event {event_id} returned status {response.status_code}")
        return False
