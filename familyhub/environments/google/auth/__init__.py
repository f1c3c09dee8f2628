"""
Google Auth Module - OAuth 2.0 for the single connected Google account.
"""

from familyhub.environments.google.auth.client import GoogleAuthClient
from familyhub.environments.google.auth.schemas import (
    GoogleTokenResponse,
    CALENDAR_SCOPES,
)

__all__ = [
    "GoogleAuthClient",
    "GoogleTokenResponse",
    "CALENDAR_SCOPES",
]
