"""
Test configuration and fixtures for pytest.

- In-memory token store instead of Firestore
- Mock Google OAuth client (no network)
- FastAPI TestClient with both injected through dependency overrides
"""

from typing import Generator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from familyhub.db.session import get_token_store
from familyhub.db.token_store import InMemoryTokenStore
from familyhub.deps import get_google_auth_client
from familyhub.environments.base import OAuthTokens
from familyhub.environments.google.auth import GoogleAuthClient
from familyhub.main import app
from familyhub.models.token_set import TokenSet, now_ms


FAMILY_CALENDAR_ID = "family123@group.calendar.google.com"
CONNECTED_AT = 1_741_000_000_000


# ---------------------------------------------------------------------------
# TOKEN FIXTURES
# ---------------------------------------------------------------------------

@pytest.fixture
def fresh_token_set() -> TokenSet:
    """A token set that is valid for another hour."""
    return TokenSet(
        access_token="access-fresh",
        refresh_token="refresh-1",
        expires_at=now_ms() + 3_600_000,
        calendar_id=FAMILY_CALENDAR_ID,
        calendar_name="Our Lovely Life",
        connected_at=CONNECTED_AT,
    )


@pytest.fixture
def expired_token_set(fresh_token_set: TokenSet) -> TokenSet:
    """Same account, access token expired a minute ago."""
    return fresh_token_set.model_copy(update={
        "access_token": "access-stale",
        "expires_at": now_ms() - 60_000,
    })


@pytest.fixture
def token_store() -> InMemoryTokenStore:
    """Empty store: nothing connected yet."""
    return InMemoryTokenStore()


@pytest.fixture
def connected_store(fresh_token_set: TokenSet) -> InMemoryTokenStore:
    """Store holding a fresh token set."""
    return InMemoryTokenStore(fresh_token_set)


# ---------------------------------------------------------------------------
# OAUTH CLIENT FIXTURE
# ---------------------------------------------------------------------------

@pytest.fixture
def auth_client() -> MagicMock:
    """
    Mock GoogleAuthClient.

    refresh_access_token returns a new token valid for an hour; tests
    override return values or side effects as needed.
    """
    client = MagicMock(spec=GoogleAuthClient)
    client.client_id = "client-id"
    client.client_secret = "client-secret"
    client.redirect_uri = "https://api.familyhub.test/auth/callback"
    client.exchange_code_for_tokens = AsyncMock()
    client.refresh_access_token = AsyncMock(return_value=OAuthTokens(
        access_token="access-refreshed",
        refresh_token="refresh-1",
        expires_at=now_ms() + 3_600_000,
    ))
    return client


# ---------------------------------------------------------------------------
# APP FIXTURES
# ---------------------------------------------------------------------------

def _make_client(store, auth_client) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_token_store] = lambda: store
    app.dependency_overrides[get_google_auth_client] = lambda: auth_client

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def client(token_store, auth_client) -> Generator[TestClient, None, None]:
    """Test client with nothing connected."""
    yield from _make_client(token_store, auth_client)


@pytest.fixture
def connected_client(connected_store, auth_client) -> Generator[TestClient, None, None]:
    """Test client whose store holds a fresh token set."""
    yield from _make_client(connected_store, auth_client)
