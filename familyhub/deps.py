"""
Dependencies module - reusable FastAPI dependencies for route handlers.

Each external collaborator is handed to routes through Depends() so tests
can swap it with app.dependency_overrides.
"""

from familyhub.ai.providers import AnthropicProvider
from familyhub.db.session import get_token_store
from familyhub.environments.google.auth import GoogleAuthClient

__all__ = ["get_token_store", "get_google_auth_client", "get_anthropic_provider"]


def get_google_auth_client() -> GoogleAuthClient:
    """OAuth client built from current settings."""
    return GoogleAuthClient()


def get_anthropic_provider() -> AnthropicProvider:
    """Chat provider built from current settings."""
    return AnthropicProvider()
