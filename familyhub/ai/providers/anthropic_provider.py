"""
Anthropic Provider - forwards Messages API requests with the server's key.

The browser builds the whole Messages request (model, system prompt,
messages); this provider only attaches the secret and protocol headers and
hands the upstream status and JSON back untouched, so the key never reaches
the client.

API Documentation: https://docs.anthropic.com/en/api/messages
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from familyhub.core.config import settings
from familyhub.environments.base import APIError, ConfigurationError

logger = logging.getLogger("familyhub.ai.anthropic")


@dataclass
class ProxyResponse:
    """Upstream status code and decoded JSON body."""
    status_code: int
    body: Any


class AnthropicProvider:
    """
    Anthropic Messages API pass-through.

    Usage:
        provider = AnthropicProvider()
        upstream = await provider.forward_messages(raw_body)
        return JSONResponse(upstream.body, status_code=upstream.status_code)
    """

    MESSAGES_URL = "https://api.anthropic.com/v1/messages"

    def __init__(
        self,
        api_key: Optional[str] = None,
        version: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key or settings.ANTHROPIC_API_KEY
        self.version = version or settings.ANTHROPIC_VERSION
        self.timeout = timeout or settings.AI_REQUEST_TIMEOUT
        self._transport = transport

    def _get_headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            "x-api-key": self.api_key,
            "anthropic-version": self.version,
        }

    async def forward_messages(self, body: bytes) -> ProxyResponse:
        """
        POST body verbatim to the Messages endpoint.

        Raises:
            ConfigurationError: ANTHROPIC_API_KEY is not set (nothing is sent)
            APIError: network failure or non-JSON upstream response
        """
        if not self.api_key:
            raise ConfigurationError(
                "ANTHROPIC_API_KEY environment variable is not set.",
                missing=["ANTHROPIC_API_KEY"],
            )

        start_time = time.time()

        async with httpx.AsyncClient(transport=self._transport) as client:
            try:
                response = await client.post(
                    self.MESSAGES_URL,
                    content=body,
                    headers=self._get_headers(),
                    timeout=self.timeout,
                )
                data = response.json()
            except httpx.RequestError as e:
                logger.error(f"Anthropic request failed: {e}")
                raise APIError(f"Network error: {e}")
            except ValueError as e:
                logger.error(f"Anthropic returned invalid JSON ({response.status_code})")
                raise APIError(f"Invalid response from Anthropic: {e}")

        latency_ms = (time.time() - start_time) * 1000
        logger.info(f"Anthropic request completed in {latency_ms:.0f}ms with status {response.status_code}")

        return ProxyResponse(status_code=response.status_code, body=data)
