"""
Environments Module - External service integrations.

environments/
├── base.py               # Exceptions and shared data structures
└── google/
    ├── auth/             # OAuth consent URL, code exchange, token refresh
    └── calendar/         # Calendar API client and event mapping
"""

from familyhub.environments.base import (
    IntegrationError,
    ConfigurationError,
    AuthenticationError,
    APIError,
    TokenError,
    TokenErrorKind,
    OAuthTokens,
)

__all__ = [
    "IntegrationError",
    "ConfigurationError",
    "AuthenticationError",
    "APIError",
    "TokenError",
    "TokenErrorKind",
    "OAuthTokens",
]
