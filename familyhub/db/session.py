"""
Store session management - one Firestore client per process.

get_token_store() is the FastAPI dependency handlers receive the store
through; tests replace it via app.dependency_overrides.
"""

import logging
from functools import lru_cache

import firebase_admin
from firebase_admin import credentials, firestore_async

from familyhub.core.config import settings
from familyhub.environments.base import ConfigurationError
from familyhub.db.token_store import FirestoreTokenStore, InMemoryTokenStore, TokenStore


logger = logging.getLogger("familyhub.db.session")

FIREBASE_TOKEN_URI = "https://oauth2.googleapis.com/token"


def _get_firebase_app() -> firebase_admin.App:
    """Return the default Firebase app, initializing it on first use."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    settings.require("FIREBASE_PROJECT_ID", "FIREBASE_CLIENT_EMAIL", "FIREBASE_PRIVATE_KEY")

    cred = credentials.Certificate({
        "type": "service_account",
        "project_id": settings.FIREBASE_PROJECT_ID,
        "client_email": settings.FIREBASE_CLIENT_EMAIL,
        "private_key": settings.firebase_private_key,
        "token_uri": FIREBASE_TOKEN_URI,
    })
    logger.info(f"Initializing Firebase app for project {settings.FIREBASE_PROJECT_ID}")
    return firebase_admin.initialize_app(cred)


def _create_firestore_client():
    return firestore_async.client(_get_firebase_app())


@lru_cache(maxsize=1)
def _create_token_store() -> TokenStore:
    backend = settings.TOKEN_STORE_BACKEND.lower()

    if backend == "memory":
        logger.warning("Using in-memory token store; tokens are lost on restart")
        return InMemoryTokenStore()

    if backend != "firestore":
        raise ConfigurationError(f"Unknown TOKEN_STORE_BACKEND: {settings.TOKEN_STORE_BACKEND}")

    return FirestoreTokenStore(
        _create_firestore_client,
        collection=settings.TOKEN_COLLECTION,
        document=settings.TOKEN_DOCUMENT,
    )


def get_token_store() -> TokenStore:
    """
    FastAPI dependency that provides the token store.

    Usage in a route:
        @router.get("/thing")
        async def thing(store: TokenStore = Depends(get_token_store)):
            token_set = await store.get_token_set()
    """
    return _create_token_store()
