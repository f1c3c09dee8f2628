"""
Token service - hands out an access token that is valid for this request.

Flow:
    1. Load the TokenSet; none stored → TokenError(NOT_CONNECTED)
    2. Still outside the 60 s expiry buffer → return it, no write
    3. No refresh token → TokenError(NO_REFRESH_TOKEN)
    4. Refresh with Google; rejected → TokenError(REFRESH_FAILED)
    5. Merge the new access token/expiry and write it with a
       compare-and-swap on the old access token

Two requests can refresh at the same moment. The compare-and-swap lets the
first writer win; the loser adopts the stored token if it is fresh and only
falls back to overwriting when the stored one is unusable.
"""

import logging
from typing import Optional

from familyhub.db.token_store import TokenStore
from familyhub.environments.base import AuthenticationError, TokenError, TokenErrorKind
from familyhub.environments.google.auth import GoogleAuthClient
from familyhub.models.token_set import TokenSet, now_ms


logger = logging.getLogger("familyhub.services.token")


async def get_valid_token_set(
    store: TokenStore,
    auth_client: GoogleAuthClient,
    now: Optional[int] = None,
) -> TokenSet:
    """
    Return the stored TokenSet with a usable access token.

    Raises:
        TokenError: see TokenErrorKind for the cases
        APIError: transport failure talking to Google
    """
    token_set = await store.get_token_set()
    if token_set is None:
        raise TokenError(TokenErrorKind.NOT_CONNECTED)

    if now is None:
        now = now_ms()

    if not token_set.is_expired(now):
        return token_set

    if not token_set.refresh_token:
        logger.warning("Access token expired and no refresh token is stored")
        raise TokenError(TokenErrorKind.NO_REFRESH_TOKEN)

    try:
        refreshed = await auth_client.refresh_access_token(token_set.refresh_token)
    except AuthenticationError as e:
        logger.error(f"Google rejected the refresh token: {e.error}")
        raise TokenError(TokenErrorKind.REFRESH_FAILED, detail=e.error)

    updated = token_set.model_copy(update={
        "access_token": refreshed.access_token,
        "expires_at": refreshed.expires_at,
    })

    if await store.replace_token_set(updated, expected_access_token=token_set.access_token):
        return updated

    current = await store.get_token_set()
    if current is not None and not current.is_expired(now):
        logger.info("Another request refreshed the token first; using the stored token")
        return current

    await store.put_token_set(updated)
    return updated
