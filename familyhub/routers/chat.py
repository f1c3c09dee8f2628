"""
Chat Router - Anthropic pass-through for the FamilyHub assistant.

POST /chat forwards the request body as-is and relays the upstream status
and JSON. Errors use Anthropic's own envelope, {"error": {"message": ...}},
so the front-end parses one shape either way.
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from familyhub.ai.providers import AnthropicProvider
from familyhub.deps import get_anthropic_provider
from familyhub.environments.base import APIError, ConfigurationError


logger = logging.getLogger("familyhub.routers.chat")

router = APIRouter(prefix="/chat", tags=["chat"])


def _error(message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": {"message": message}})


@router.post("")
async def chat(
    request: Request,
    provider: AnthropicProvider = Depends(get_anthropic_provider),
):
    """Forward a Messages API request with the server-held key."""
    body = await request.body()

    try:
        upstream = await provider.forward_messages(body)
    except ConfigurationError as e:
        logger.error(f"Chat proxy misconfigured: {e}")
        return _error(str(e))
    except APIError as e:
        logger.error(f"Proxy error: {e}")
        return _error(str(e))

    return JSONResponse(status_code=upstream.status_code, content=upstream.body)


@router.api_route("", methods=["GET", "PUT", "PATCH", "DELETE"])
async def chat_method_not_allowed():
    return JSONResponse(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        content={"error": "Method not allowed"},
    )
