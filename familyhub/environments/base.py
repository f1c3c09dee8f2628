"""
Base types for external integrations (Google OAuth, Google Calendar).

Every failure that crosses an integration boundary is one of the exceptions
below. Token problems carry an explicit TokenErrorKind so routers branch on
the kind, never on message text.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional


# ---------------------------------------------------------------------------
# CUSTOM EXCEPTIONS
# ---------------------------------------------------------------------------


class IntegrationError(Exception):
    """Base exception for all integration errors."""
    pass


class ConfigurationError(IntegrationError):
    """Raised when a required setting is missing."""

    def __init__(self, message: str, missing: Optional[List[str]] = None):
        super().__init__(message)
        self.missing = missing or []


class AuthenticationError(IntegrationError):
    """Raised when the OAuth token endpoint reports an error."""

    def __init__(self, message: str, error: Any = None, response: Any = None):
        super().__init__(message)
        self.error = error
        self.response = response


class APIError(IntegrationError):
    """
    Raised when an API call to the provider fails.

    status_code is None for transport failures (network, bad JSON);
    otherwise it is the provider's HTTP status and response holds the
    provider's error payload.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, response: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class TokenErrorKind(str, Enum):
    """Why a usable access token could not be produced."""
    NOT_CONNECTED = "not_connected"
    NO_REFRESH_TOKEN = "no_refresh_token"
    REFRESH_FAILED = "refresh_failed"


_TOKEN_ERROR_MESSAGES = {
    TokenErrorKind.NOT_CONNECTED: "Google Calendar is not connected",
    TokenErrorKind.NO_REFRESH_TOKEN: "No refresh token stored; reconnect Google Calendar",
    TokenErrorKind.REFRESH_FAILED: "Token refresh failed",
}


class TokenError(IntegrationError):
    """Raised by the token refresher; inspect .kind."""

    def __init__(self, kind: TokenErrorKind, detail: Any = None):
        message = _TOKEN_ERROR_MESSAGES[kind]
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.kind = kind
        self.detail = detail


# ---------------------------------------------------------------------------
# DATA STRUCTURES
# ---------------------------------------------------------------------------


@dataclass
class OAuthTokens:
    """
    Token data returned by the OAuth token endpoint.

    expires_at is epoch milliseconds, the unit the token store keeps.
    """
    access_token: str
    expires_at: int
    token_type: str = "Bearer"
    refresh_token: Optional[str] = None
    scopes: Optional[List[str]] = None
