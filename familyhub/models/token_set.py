"""
TokenSet model - the OAuth credentials of the one connected Google account.

Stored as a single document {"val": {...}} with camelCase keys, so the shape
stays readable by the front-end tooling that already knows it. Timestamps are
epoch milliseconds.
"""

import time
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

# Refresh this long before Google's stated expiry
EXPIRY_BUFFER_MS = 60_000


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


class TokenSet(BaseModel):
    """
    Persisted OAuth credential bundle.

    Created (or fully overwritten) by the OAuth callback; only access_token
    and expires_at change afterwards, when the refresher renews the token.
    """
    access_token: str = Field(..., alias="accessToken")
    refresh_token: Optional[str] = Field(None, alias="refreshToken")
    expires_at: int = Field(..., alias="expiresAt")
    calendar_id: str = Field("primary", alias="calendarId")
    calendar_name: str = Field("primary", alias="calendarName")
    connected_at: Optional[int] = Field(None, alias="connectedAt")

    class Config:
        populate_by_name = True

    def is_expired(self, now: Optional[int] = None) -> bool:
        """True once we are inside the buffer before expires_at."""
        if now is None:
            now = now_ms()
        return now > self.expires_at - EXPIRY_BUFFER_MS

    def to_document(self) -> Dict[str, Any]:
        """Document body as written to the store."""
        return {"val": self.model_dump(by_alias=True)}

    @classmethod
    def from_document(cls, document: Optional[Dict[str, Any]]) -> Optional["TokenSet"]:
        """Parse a stored document; None when there is nothing stored."""
        if not document or not document.get("val"):
            return None
        return cls.model_validate(document["val"])
