"""
Token store - narrow get/put interface around the single TokenSet document.

Handlers only ever see TokenStore, so swapping the fixed document key for a
per-user key later touches this module alone.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional

from google.cloud import firestore

from familyhub.models.token_set import TokenSet


logger = logging.getLogger("familyhub.db.token_store")


class TokenStore(ABC):
    """Persistence for the connected account's TokenSet."""

    @abstractmethod
    async def get_token_set(self) -> Optional[TokenSet]:
        """Return the stored TokenSet, or None if never connected."""
        pass

    @abstractmethod
    async def put_token_set(self, token_set: TokenSet) -> None:
        """Overwrite the stored TokenSet."""
        pass

    @abstractmethod
    async def replace_token_set(self, token_set: TokenSet, expected_access_token: str) -> bool:
        """
        Compare-and-swap write.

        Writes token_set only if the stored access token still equals
        expected_access_token. Returns False (and writes nothing) when
        another request replaced it first.
        """
        pass


class FirestoreTokenStore(TokenStore):
    """
    TokenSet kept in one Firestore document.

    Args:
        client_factory: callable returning a google.cloud.firestore.AsyncClient
        collection: collection name (default "kv")
        document: document id (default "gcal__tokens")
    """

    def __init__(self, client_factory, collection: str = "kv", document: str = "gcal__tokens"):
        self._client_factory = client_factory
        self._client = None
        self._collection = collection
        self._document = document

    @property
    def client(self):
        """The AsyncClient, created on first use so missing credentials surface inside a request."""
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    def _doc_ref(self):
        return self.client.collection(self._collection).document(self._document)

    async def get_token_set(self) -> Optional[TokenSet]:
        snapshot = await self._doc_ref().get()
        if not snapshot.exists:
            return None
        return TokenSet.from_document(snapshot.to_dict())

    async def put_token_set(self, token_set: TokenSet) -> None:
        await self._doc_ref().set(token_set.to_document())
        logger.info(f"Stored token set for calendar {token_set.calendar_name}")

    async def replace_token_set(self, token_set: TokenSet, expected_access_token: str) -> bool:
        doc_ref = self._doc_ref()
        transaction = self.client.transaction()

        @firestore.async_transactional
        async def swap(transaction) -> bool:
            snapshot = await doc_ref.get(transaction=transaction)
            current = TokenSet.from_document(snapshot.to_dict()) if snapshot.exists else None
            if current is None or current.access_token != expected_access_token:
                return False
            transaction.set(doc_ref, token_set.to_document())
            return True

        swapped = await swap(transaction)
        if swapped:
            logger.info("Stored refreshed access token")
        else:
            logger.info("Stored access token changed during refresh; skipped write")
        return swapped


class InMemoryTokenStore(TokenStore):
    """Process-local store for development and tests."""

    def __init__(self, token_set: Optional[TokenSet] = None):
        self.token_set = token_set
        self._lock = asyncio.Lock()
        self.writes = 0

    async def get_token_set(self) -> Optional[TokenSet]:
        return self.token_set

    async def put_token_set(self, token_set: TokenSet) -> None:
        async with self._lock:
            self.token_set = token_set
            self.writes += 1

    async def replace_token_set(self, token_set: TokenSet, expected_access_token: str) -> bool:
        async with self._lock:
            if self.token_set is None or self.token_set.access_token != expected_access_token:
                return False
            self.token_set = token_set
            self.writes += 1
            return True
