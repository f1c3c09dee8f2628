"""
Calendar Router - the FamilyHub front-end's window onto Google Calendar.

Endpoints (all on /calendar):
=============================
- GET    ?action=list&days=60 → upcoming events, normalized
- GET    ?action=status       → connection status
- POST   {"event": {...}}     → create an event
- DELETE ?gcalId=...          → delete an event
- OPTIONS                     → CORS preflight
- PUT / PATCH / HEAD          → "Unknown action"

The browser calls this cross-origin, so every response, errors included,
carries the CORS headers; that is why handlers build JSONResponse objects
instead of raising HTTPException.
"""

import logging
from typing import Any, Awaitable, Callable, Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from familyhub.core.config import settings
from familyhub.db.token_store import TokenStore
from familyhub.deps import get_google_auth_client, get_token_store
from familyhub.environments.base import (
    APIError,
    ConfigurationError,
    TokenError,
    TokenErrorKind,
)
from familyhub.environments.google.auth import GoogleAuthClient
from familyhub.environments.google.calendar import EventInput, GoogleCalendarClient
from familyhub.environments.google.calendar.mapping import build_event_body, normalize_event
from familyhub.models.token_set import TokenSet
from familyhub.services.token_service import get_valid_token_set


logger = logging.getLogger("familyhub.routers.calendar")

DEFAULT_DAYS = 60

router = APIRouter(prefix="/calendar", tags=["calendar"])


def cors_headers() -> dict:
    return {
        "Access-Control-Allow-Origin": settings.APP_ORIGIN,
        "Access-Control-Allow-Methods": "GET, POST, DELETE, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
    }


def _respond(content: Any, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(content=content, status_code=status_code, headers=cors_headers())


def _parse_days(days: Optional[str]) -> int:
    """Window size in days; DEFAULT_DAYS when missing, non-numeric or not positive."""
    try:
        value = int(days)
    except (TypeError, ValueError):
        return DEFAULT_DAYS
    return value if value > 0 else DEFAULT_DAYS


_TOKEN_ERROR_STATUS = {
    TokenErrorKind.NOT_CONNECTED: status.HTTP_401_UNAUTHORIZED,
    TokenErrorKind.NO_REFRESH_TOKEN: status.HTTP_500_INTERNAL_SERVER_ERROR,
    TokenErrorKind.REFRESH_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


async def _with_token(
    store: TokenStore,
    auth_client: GoogleAuthClient,
    operation: Callable[[TokenSet], Awaitable[JSONResponse]],
    on_not_connected: Optional[Callable[[], JSONResponse]] = None,
) -> JSONResponse:
    """
    Resolve a valid token, run operation, and turn failures into responses.

    Provider rejections become 400 with Google's error object; everything
    else that goes wrong becomes a logged 500.
    """
    try:
        token_set = await get_valid_token_set(store, auth_client)
        return await operation(token_set)

    except TokenError as e:
        if e.kind is TokenErrorKind.NOT_CONNECTED and on_not_connected is not None:
            return on_not_connected()
        logger.warning(f"Calendar token unavailable: {e.kind.value}")
        return _respond({"error": str(e), "kind": e.kind.value}, _TOKEN_ERROR_STATUS[e.kind])

    except APIError as e:
        if e.status_code is not None:
            return _respond({"error": e.response}, status.HTTP_400_BAD_REQUEST)
        logger.error(f"Calendar API transport error: {e}")
        return _respond({"error": str(e)}, status.HTTP_500_INTERNAL_SERVER_ERROR)

    except ConfigurationError as e:
        logger.error(f"Calendar API misconfigured: {e}")
        return _respond({"error": str(e)}, status.HTTP_500_INTERNAL_SERVER_ERROR)

    except Exception as e:
        logger.exception("Calendar API error")
        return _respond({"error": str(e)}, status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.options("")
async def calendar_preflight():
    """CORS preflight; answered before any token or store access."""
    return Response(status_code=status.HTTP_200_OK, headers=cors_headers())


@router.get("")
async def calendar_get(
    action: Optional[str] = Query(None, description="list or status"),
    days: Optional[str] = Query(None, description="Days ahead to list (default 60)"),
    store: TokenStore = Depends(get_token_store),
    auth_client: GoogleAuthClient = Depends(get_google_auth_client),
):
    """List upcoming events or report the connection status."""

    async def list_events(token_set: TokenSet) -> JSONResponse:
        calendar_client = GoogleCalendarClient(access_token=token_set.access_token)
        items = await calendar_client.list_upcoming_events(
            token_set.calendar_id, days=_parse_days(days),
        )
        events = [normalize_event(item).model_dump(by_alias=True) for item in items]
        return _respond({"events": events, "calendarName": token_set.calendar_name})

    async def connection_status(token_set: TokenSet) -> JSONResponse:
        return _respond({
            "connected": True,
            "calendarName": token_set.calendar_name,
            "connectedAt": token_set.connected_at,
        })

    async def unknown_action(token_set: TokenSet) -> JSONResponse:
        return _respond({"error": "Unknown action"}, status.HTTP_400_BAD_REQUEST)

    if action == "list":
        return await _with_token(store, auth_client, list_events)
    if action == "status":
        return await _with_token(
            store, auth_client, connection_status,
            on_not_connected=lambda: _respond({"connected": False}),
        )
    return await _with_token(store, auth_client, unknown_action)


@router.post("")
async def calendar_create(
    request: Request,
    store: TokenStore = Depends(get_token_store),
    auth_client: GoogleAuthClient = Depends(get_google_auth_client),
):
    """Create an event from {"event": {title, date, time?, who?, colHex?}}."""
    try:
        payload = await request.json()
    except ValueError:
        payload = None

    async def create_event(token_set: TokenSet) -> JSONResponse:
        raw_event = payload.get("event") if isinstance(payload, dict) else None
        if not raw_event:
            return _respond({"error": "Missing event"}, status.HTTP_400_BAD_REQUEST)

        try:
            event = EventInput.model_validate(raw_event)
            event_body = build_event_body(event)
        except (ValidationError, ValueError, OverflowError) as e:
            logger.warning(f"Rejected invalid event: {e}")
            return _respond({"error": "Invalid event"}, status.HTTP_400_BAD_REQUEST)

        calendar_client = GoogleCalendarClient(access_token=token_set.access_token)
        created = await calendar_client.create_event(token_set.calendar_id, event_body)
        return _respond({"gcalId": created.id})

    return await _with_token(store, auth_client, create_event)


@router.delete("")
async def calendar_delete(
    gcal_id: Optional[str] = Query(None, alias="gcalId"),
    store: TokenStore = Depends(get_token_store),
    auth_client: GoogleAuthClient = Depends(get_google_auth_client),
):
    """Delete an event by its Google id; always acknowledges."""

    async def delete_event(token_set: TokenSet) -> JSONResponse:
        if not gcal_id:
            return _respond({"error": "Missing gcalId"}, status.HTTP_400_BAD_REQUEST)

        calendar_client = GoogleCalendarClient(access_token=token_set.access_token)
        await calendar_client.delete_event(token_set.calendar_id, gcal_id)
        return _respond({"ok": True})

    return await _with_token(store, auth_client, delete_event)


@router.api_route("", methods=["PUT", "PATCH", "HEAD"])
async def calendar_unknown(
    store: TokenStore = Depends(get_token_store),
    auth_client: GoogleAuthClient = Depends(get_google_auth_client),
):
    async def unknown_action(token_set: TokenSet) -> JSONResponse:
        return _respond({"error": "Unknown action"}, status.HTTP_400_BAD_REQUEST)

    return await _with_token(store, auth_client, unknown_action)
