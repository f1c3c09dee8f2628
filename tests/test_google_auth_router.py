"""
Tests for the Google OAuth redirect and callback endpoints.
"""

from unittest.mock import AsyncMock, patch
from urllib.parse import parse_qs, urlparse

import pytest

from familyhub.core.config import settings
from familyhub.deps import get_google_auth_client
from familyhub.environments.base import APIError, AuthenticationError, OAuthTokens
from familyhub.environments.google.auth import GoogleAuthClient
from familyhub.environments.google.calendar import CalendarInfo, GoogleCalendarClient
from familyhub.main import app
from familyhub.models.token_set import now_ms


APP_ROOT = settings.APP_ORIGIN


@pytest.fixture
def exchanged_tokens(auth_client):
    auth_client.exchange_code_for_tokens.return_value = OAuthTokens(
        access_token="ya29.new",
        refresh_token="1//refresh",
        expires_at=now_ms() + 3_599_000,
    )
    return auth_client


class TestGoogleLogin:

    def test_redirects_to_consent_screen(self, client):
        app.dependency_overrides[get_google_auth_client] = lambda: GoogleAuthClient(
            client_id="client-id", redirect_uri="https://api.familyhub.test/auth/callback",
        )

        response = client.get("/auth/google", follow_redirects=False)

        assert response.status_code == 302
        location = urlparse(response.headers["location"])
        params = parse_qs(location.query)
        assert location.netloc == "accounts.google.com"
        assert params["access_type"] == ["offline"]
        assert params["prompt"] == ["consent"]
        assert params["scope"] == [
            "https://www.googleapis.com/auth/calendar https://www.googleapis.com/auth/calendar.readonly"
        ]

    def test_missing_configuration(self, client, monkeypatch):
        monkeypatch.setattr(settings, "GOOGLE_CLIENT_ID", "")
        monkeypatch.setattr(settings, "GOOGLE_REDIRECT_URI", "")
        app.dependency_overrides[get_google_auth_client] = lambda: GoogleAuthClient()

        response = client.get("/auth/google", follow_redirects=False)

        assert response.status_code == 500
        assert "GOOGLE_CLIENT_ID" in response.json()["error"]
        assert "location" not in response.headers


class TestGoogleCallback:

    def test_denied(self, client, token_store, auth_client):
        response = client.get("/auth/callback?error=access_denied", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == f"{APP_ROOT}/?gcal=denied"
        assert token_store.writes == 0
        auth_client.exchange_code_for_tokens.assert_not_called()

    def test_missing_code(self, client, token_store):
        response = client.get("/auth/callback", follow_redirects=False)

        assert response.status_code == 400
        assert response.text == "Missing code parameter"
        assert token_store.writes == 0

    def test_connects_target_calendar(self, client, token_store, exchanged_tokens):
        calendars = [
            CalendarInfo(id="me@gmail.com", summary="me@gmail.com", primary=True),
            CalendarInfo(id="family@group.calendar.google.com", summary="Our Lovely Life"),
        ]
        with patch.object(GoogleCalendarClient, "list_calendars", new_callable=AsyncMock) as mock_list:
            mock_list.return_value = calendars
            response = client.get("/auth/callback?code=auth-code", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == f"{APP_ROOT}/?gcal=connected"
        exchanged_tokens.exchange_code_for_tokens.assert_awaited_once_with(code="auth-code")

        stored = token_store.token_set
        assert stored.access_token == "ya29.new"
        assert stored.refresh_token == "1//refresh"
        assert stored.calendar_id == "family@group.calendar.google.com"
        assert stored.calendar_name == "Our Lovely Life"
        assert stored.connected_at is not None
        assert token_store.writes == 1

    def test_falls_back_to_primary(self, client, token_store, exchanged_tokens):
        with patch.object(GoogleCalendarClient, "list_calendars", new_callable=AsyncMock) as mock_list:
            mock_list.return_value = [CalendarInfo(id="me@gmail.com", summary="me@gmail.com")]
            response = client.get("/auth/callback?code=auth-code", follow_redirects=False)

        assert response.headers["location"] == f"{APP_ROOT}/?gcal=connected"
        stored = token_store.token_set
        assert stored.calendar_id == "primary"
        assert stored.calendar_name == "primary"

    def test_exchange_error(self, client, token_store, auth_client):
        auth_client.exchange_code_for_tokens.side_effect = AuthenticationError(
            "Token request failed", error="invalid_grant",
        )

        response = client.get("/auth/callback?code=used-code", follow_redirects=False)

        assert response.headers["location"] == f"{APP_ROOT}/?gcal=error"
        assert token_store.writes == 0

    def test_unexpected_failure_redirects_with_error(self, client, token_store, exchanged_tokens):
        with patch.object(GoogleCalendarClient, "list_calendars", new_callable=AsyncMock) as mock_list:
            mock_list.side_effect = APIError("Network error: timed out")
            response = client.get("/auth/callback?code=auth-code", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == f"{APP_ROOT}/?gcal=error"
        assert token_store.writes == 0
