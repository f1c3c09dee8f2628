"""
Google OAuth Schemas - Scopes and token endpoint responses.
"""

from typing import List, Optional
from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# OAUTH SCOPE CONSTANTS
# ---------------------------------------------------------------------------
# Reference: https://developers.google.com/identity/protocols/oauth2/scopes

CALENDAR_SCOPES = [
    "https://www.googleapis.com/auth/calendar",           # Read + write events
    "https://www.googleapis.com/auth/calendar.readonly",  # Read calendars
]

# Google omits expires_in on some refresh responses
DEFAULT_EXPIRES_IN = 3600


class GoogleTokenResponse(BaseModel):
    """
    Successful response from Google's token endpoint.

    Example:
    {
        "access_token": "ya29.a0AfB_byC...",
        "expires_in": 3599,
        "refresh_token": "1//0eXyz...",
        "scope": "https://www.googleapis.com/auth/calendar",
        "token_type": "Bearer"
    }
    """
    access_token: str = Field(..., description="OAuth access token")
    token_type: str = Field(default="Bearer", description="Token type (usually Bearer)")
    expires_in: Optional[int] = Field(None, description="Seconds until expiration")
    refresh_token: Optional[str] = Field(None, description="Refresh token for renewal")
    scope: Optional[str] = Field(None, description="Space-separated scopes granted")

    def get_scopes_list(self) -> List[str]:
        """Convert space-separated scope string to list."""
        if self.scope:
            return self.scope.split()
        return []

    def get_expires_at(self, now_ms: int) -> int:
        """Absolute expiry in epoch milliseconds."""
        return now_ms + (self.expires_in or DEFAULT_EXPIRES_IN) * 1000
