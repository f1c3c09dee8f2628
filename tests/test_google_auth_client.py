"""
Tests for GoogleAuthClient against a mocked token endpoint.
"""

from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from familyhub.environments.base import APIError, AuthenticationError, ConfigurationError
from familyhub.environments.google.auth import CALENDAR_SCOPES, GoogleAuthClient
from familyhub.models.token_set import now_ms


def make_client(handler=None, **overrides) -> GoogleAuthClient:
    kwargs = {
        "client_id": "client-id",
        "client_secret": "client-secret",
        "redirect_uri": "https://api.familyhub.test/auth/callback",
    }
    kwargs.update(overrides)
    transport = httpx.MockTransport(handler) if handler else None
    return GoogleAuthClient(transport=transport, **kwargs)


class TestAuthorizationUrl:

    def test_consent_url_parameters(self):
        url = make_client().get_authorization_url()
        parsed = urlparse(url)
        params = {key: values[0] for key, values in parse_qs(parsed.query).items()}

        assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == GoogleAuthClient.AUTHORIZATION_URL
        assert params == {
            "client_id": "client-id",
            "redirect_uri": "https://api.familyhub.test/auth/callback",
            "response_type": "code",
            "scope": " ".join(CALENDAR_SCOPES),
            "access_type": "offline",
            "prompt": "consent",
        }


class TestExchangeCode:

    @pytest.mark.asyncio
    async def test_success(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["form"] = {k: v[0] for k, v in parse_qs(request.content.decode()).items()}
            return httpx.Response(200, json={
                "access_token": "ya29.new",
                "refresh_token": "1//refresh",
                "expires_in": 3599,
                "token_type": "Bearer",
            })

        before = now_ms()
        tokens = await make_client(handler).exchange_code_for_tokens("auth-code")

        assert captured["url"] == GoogleAuthClient.TOKEN_URL
        assert captured["form"] == {
            "code": "auth-code",
            "client_id": "client-id",
            "client_secret": "client-secret",
            "redirect_uri": "https://api.familyhub.test/auth/callback",
            "grant_type": "authorization_code",
        }
        assert tokens.access_token == "ya29.new"
        assert tokens.refresh_token == "1//refresh"
        assert before + 3_599_000 <= tokens.expires_at <= now_ms() + 3_599_000

    @pytest.mark.asyncio
    async def test_error_payload(self):
        def handler(request):
            return httpx.Response(400, json={"error": "invalid_grant", "error_description": "Bad Request"})

        with pytest.raises(AuthenticationError) as exc_info:
            await make_client(handler).exchange_code_for_tokens("used-code")

        assert exc_info.value.error == "invalid_grant"

    @pytest.mark.asyncio
    async def test_missing_secret_makes_no_request(self):
        def handler(request):
            raise AssertionError("token endpoint must not be called")

        client = make_client(handler)
        client.client_secret = ""

        with pytest.raises(ConfigurationError) as exc_info:
            await client.exchange_code_for_tokens("auth-code")

        assert exc_info.value.missing == ["GOOGLE_CLIENT_SECRET"]

    @pytest.mark.asyncio
    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(APIError) as exc_info:
            await make_client(handler).exchange_code_for_tokens("auth-code")

        assert exc_info.value.status_code is None


class TestRefresh:

    @pytest.mark.asyncio
    async def test_keeps_refresh_token_when_not_rotated(self):
        captured = {}

        def handler(request):
            captured["form"] = {k: v[0] for k, v in parse_qs(request.content.decode()).items()}
            return httpx.Response(200, json={"access_token": "ya29.fresh", "expires_in": 3600})

        tokens = await make_client(handler).refresh_access_token("1//refresh")

        assert captured["form"]["grant_type"] == "refresh_token"
        assert captured["form"]["refresh_token"] == "1//refresh"
        assert tokens.access_token == "ya29.fresh"
        assert tokens.refresh_token == "1//refresh"

    @pytest.mark.asyncio
    async def test_revoked_refresh_token(self):
        def handler(request):
            return httpx.Response(400, json={"error": "invalid_grant"})

        with pytest.raises(AuthenticationError) as exc_info:
            await make_client(handler).refresh_access_token("1//revoked")

        assert exc_info.value.error == "invalid_grant"
