"""
Main application entry point - FastAPI app instance and configuration.
Run with: uvicorn familyhub.main:app --reload
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from familyhub.core.config import settings
from familyhub.core.logging import setup_logging
from familyhub.environments.base import ConfigurationError
from familyhub.routers import calendar, chat, google_auth

setup_logging()

logger = logging.getLogger("familyhub.main")

app = FastAPI(
    title=settings.APP_NAME,
    docs_url="/docs",
    redoc_url="/redoc",
)

# /auth/google, /auth/callback: connect the Google account
# /calendar: list/create/delete/status, with its own CORS headers
# /chat: Anthropic pass-through
app.include_router(google_auth.router)
app.include_router(calendar.router)
app.include_router(chat.router)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    """Missing settings that surface outside a router's own handling."""
    logger.error(f"Configuration error on {request.url.path}: {exc}")
    headers = None
    if request.url.path.startswith(calendar.router.prefix):
        headers = calendar.cors_headers()
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": str(exc)},
        headers=headers,
    )


@app.get("/health", tags=["health"])
def health_check():
    """
    Liveness probe for the hosting platform.

    Does not touch Firestore or Google.
    """
    return {"status": "ok"}
