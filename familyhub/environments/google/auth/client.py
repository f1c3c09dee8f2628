"""
Google OAuth Client - Authorization code flow for the Calendar connection.

1. get_authorization_url()    → browser is redirected to Google
2. exchange_code_for_tokens() → called by the callback route
3. refresh_access_token()     → called by the token refresher

Google reports failures in the JSON body ({"error": "invalid_grant", ...});
those become AuthenticationError. Network and JSON failures become APIError
with no status code.

References:
- OAuth 2.0: https://developers.google.com/identity/protocols/oauth2
- Token endpoint: https://oauth2.googleapis.com/token
"""

import logging
from typing import List, Optional
from urllib.parse import urlencode

import httpx

from familyhub.core.config import settings
from familyhub.environments.base import (
    APIError,
    AuthenticationError,
    ConfigurationError,
    OAuthTokens,
)
from familyhub.environments.google.auth.schemas import CALENDAR_SCOPES, GoogleTokenResponse
from familyhub.models.token_set import now_ms


logger = logging.getLogger("familyhub.environments.google.auth")


class GoogleAuthClient:
    """
    Google OAuth 2.0 client.

    Credentials default to settings; pass a transport to route requests
    somewhere other than the network (tests use httpx.MockTransport).
    """

    AUTHORIZATION_URL = "https://accounts.google.com/o/oauth2/v2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        redirect_uri: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client_id = client_id or settings.GOOGLE_CLIENT_ID
        self.client_secret = client_secret or settings.GOOGLE_CLIENT_SECRET
        self.redirect_uri = redirect_uri or settings.GOOGLE_REDIRECT_URI
        self._transport = transport

    def require_configured(self, *fields: str) -> None:
        """
        Raise ConfigurationError unless the named fields are set.

        Defaults to every field the token endpoint needs.
        """
        fields = fields or ("client_id", "client_secret", "redirect_uri")
        missing = [f"GOOGLE_{name.upper()}" for name in fields if not getattr(self, name)]
        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}",
                missing=missing,
            )

    # -------------------------------------------------------------------------
    # AUTHORIZATION URL
    # -------------------------------------------------------------------------

    def get_authorization_url(
        self,
        scopes: List[str] = CALENDAR_SCOPES,
        access_type: str = "offline",
        prompt: str = "consent",
    ) -> str:
        """
        Build the consent screen URL.

        access_type=offline together with prompt=consent makes Google issue
        a refresh token on every authorization, including re-authorization.
        """
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(scopes),
            "access_type": access_type,
            "prompt": prompt,
        }

        logger.info(f"Generated Google auth URL with {len(scopes)} scopes")

        return f"{self.AUTHORIZATION_URL}?{urlencode(params)}"

    # -------------------------------------------------------------------------
    # TOKEN ENDPOINT
    # -------------------------------------------------------------------------

    async def exchange_code_for_tokens(self, code: str) -> OAuthTokens:
        """
        Exchange an authorization code for access and refresh tokens.

        Raises:
            AuthenticationError: Google rejected the code
            APIError: network or parse failure
            ConfigurationError: client id, secret or redirect URI missing
        """
        self.require_configured()
        logger.info("Exchanging authorization code for tokens")

        data = await self._post_token_request({
            "code": code,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "redirect_uri": self.redirect_uri,
            "grant_type": "authorization_code",
        })
        token_response = GoogleTokenResponse(**data)

        logger.info(
            "Successfully obtained Google tokens",
            extra={
                "has_refresh_token": token_response.refresh_token is not None,
                "expires_in": token_response.expires_in,
            },
        )

        return OAuthTokens(
            access_token=token_response.access_token,
            token_type=token_response.token_type,
            refresh_token=token_response.refresh_token,
            expires_at=token_response.get_expires_at(now_ms()),
            scopes=token_response.get_scopes_list(),
        )

    async def refresh_access_token(self, refresh_token: str) -> OAuthTokens:
        """
        Mint a new access token from a refresh token.

        Google usually does not return a new refresh token; the old one is
        carried over in that case.

        Raises:
            AuthenticationError: Google rejected the refresh token
            APIError: network or parse failure
            ConfigurationError: client id or secret missing
        """
        self.require_configured("client_id", "client_secret")
        logger.info("Refreshing access token")

        data = await self._post_token_request({
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "refresh_token": refresh_token,
            "grant_type": "refresh_token",
        })
        token_response = GoogleTokenResponse(**data)

        logger.info(
            "Successfully refreshed access token",
            extra={"expires_in": token_response.expires_in},
        )

        return OAuthTokens(
            access_token=token_response.access_token,
            token_type=token_response.token_type,
            refresh_token=token_response.refresh_token or refresh_token,
            expires_at=token_response.get_expires_at(now_ms()),
            scopes=token_response.get_scopes_list(),
        )

    async def _post_token_request(self, form: dict) -> dict:
        """POST a form to the token endpoint and return the decoded body."""
        async with httpx.AsyncClient(transport=self._transport) as client:
            try:
                response = await client.post(self.TOKEN_URL, data=form, timeout=30.0)
                data = response.json()
            except httpx.RequestError as e:
                logger.error(f"Network error calling token endpoint: {e}")
                raise APIError(f"Network error: {e}")
            except ValueError as e:
                logger.error(f"Token endpoint returned invalid JSON ({response.status_code})")
                raise APIError(f"Invalid response from token endpoint: {e}")

        if data.get("error"):
            logger.error(f"Token endpoint error: {data['error']} - {data.get('error_description')}")
            raise AuthenticationError(
                f"Token request failed: {data.get('error_description') or data['error']}",
                error=data["error"],
                response=data,
            )

        if response.status_code != 200:
            logger.error(f"Token endpoint returned {response.status_code}")
            raise AuthenticationError(
                f"Token request failed with status {response.status_code}",
                error=f"http_{response.status_code}",
                response=data,
            )

        return data
