"""
Google Auth Router - connects the family Google Calendar.

Endpoints:
==========
- GET /auth/google   → Redirect to Google's consent screen
- GET /auth/callback → Exchange the code, pick the calendar, store tokens

The callback is hit by a browser mid-navigation, so every outcome ends in a
redirect back to the app with ?gcal=connected|denied|error; the only
exception is a request without a code, which gets a plain 400.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse

from familyhub.core.config import settings
from familyhub.db.token_store import TokenStore
from familyhub.deps import get_google_auth_client, get_token_store
from familyhub.environments.base import AuthenticationError
from familyhub.environments.google.auth import CALENDAR_SCOPES, GoogleAuthClient
from familyhub.environments.google.calendar import GoogleCalendarClient
from familyhub.models.token_set import TokenSet, now_ms


logger = logging.getLogger("familyhub.routers.google_auth")

PRIMARY_CALENDAR = "primary"

router = APIRouter(prefix="/auth", tags=["google-auth"])


def _redirect_to_app(gcal_status: str) -> RedirectResponse:
    return RedirectResponse(
        url=f"{settings.APP_ORIGIN}/?gcal={gcal_status}",
        status_code=status.HTTP_302_FOUND,
    )


@router.get("/google")
async def google_login(auth_client: GoogleAuthClient = Depends(get_google_auth_client)):
    """
    Redirect the browser to Google's OAuth consent screen.

    Requests calendar read/write with offline access and a forced consent
    prompt, so Google returns a refresh token every time.
    """
    if not auth_client.client_id or not auth_client.redirect_uri:
        logger.error("Google OAuth not configured - missing GOOGLE_CLIENT_ID or GOOGLE_REDIRECT_URI")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "GOOGLE_CLIENT_ID or GOOGLE_REDIRECT_URI env vars not set"},
        )

    auth_url = auth_client.get_authorization_url(scopes=CALENDAR_SCOPES)
    return RedirectResponse(url=auth_url, status_code=status.HTTP_302_FOUND)


@router.get("/callback")
async def google_callback(
    code: Optional[str] = Query(None, description="Authorization code from Google"),
    error: Optional[str] = Query(None, description="Error from Google"),
    store: TokenStore = Depends(get_token_store),
    auth_client: GoogleAuthClient = Depends(get_google_auth_client),
):
    """
    Handle Google's redirect after the consent screen.

    Flow:
        1. error present → user declined, redirect with gcal=denied
        2. Exchange code for tokens
        3. Resolve the target calendar by name, falling back to primary
        4. Overwrite the stored TokenSet
        5. Redirect with gcal=connected
    """
    if error:
        logger.warning(f"Google OAuth declined: {error}")
        return _redirect_to_app("denied")

    if not code:
        logger.warning("OAuth callback called without a code")
        return PlainTextResponse("Missing code parameter", status_code=status.HTTP_400_BAD_REQUEST)

    try:
        tokens = await auth_client.exchange_code_for_tokens(code=code)

        calendar_client = GoogleCalendarClient(access_token=tokens.access_token)
        target = await calendar_client.find_calendar_by_name(settings.TARGET_CALENDAR_NAME)
        if target is None:
            logger.info(f"Calendar '{settings.TARGET_CALENDAR_NAME}' not found; using primary")

        connected_at = now_ms()
        token_set = TokenSet(
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            expires_at=tokens.expires_at,
            calendar_id=target.id if target else PRIMARY_CALENDAR,
            calendar_name=(target.summary if target else None) or PRIMARY_CALENDAR,
            connected_at=connected_at,
        )
        await store.put_token_set(token_set)

    except AuthenticationError as e:
        logger.error(f"Token exchange error: {e.error}")
        return _redirect_to_app("error")
    except Exception:
        logger.exception("OAuth callback error")
        return _redirect_to_app("error")

    logger.info(f"Connected Google Calendar '{token_set.calendar_name}'")
    return _redirect_to_app("connected")
