"""
Configuration module - centralized settings for the entire application.
Uses pydantic-settings to load values from environment variables and .env file.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from familyhub.environments.base import ConfigurationError


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every secret defaults to an empty string so the app can start without
    them; handlers call require() before they need a value, which turns a
    missing secret into an immediate ConfigurationError instead of a
    confusing failure further downstream.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ---------------------------------------------------------------------------
    # APPLICATION SETTINGS
    # ---------------------------------------------------------------------------
    APP_NAME: str = "FamilyHub Integration API"
    DEBUG: bool = False

    # APP_ORIGIN: The front-end. OAuth redirects land here and it is the
    # only origin allowed to call /calendar from the browser.
    APP_ORIGIN: str = "https://familyhub-ashy.vercel.app"

    # ---------------------------------------------------------------------------
    # TOKEN STORE (Firestore)
    # ---------------------------------------------------------------------------
    # Service account credentials. FIREBASE_PRIVATE_KEY is usually pasted
    # with literal "\n" sequences; see firebase_private_key.
    FIREBASE_PROJECT_ID: str = ""
    FIREBASE_CLIENT_EMAIL: str = ""
    FIREBASE_PRIVATE_KEY: str = ""

    # "firestore" in production, "memory" for local development
    TOKEN_STORE_BACKEND: str = "firestore"
    TOKEN_COLLECTION: str = "kv"
    TOKEN_DOCUMENT: str = "gcal__tokens"

    # ---------------------------------------------------------------------------
    # GOOGLE OAUTH SETTINGS
    # ---------------------------------------------------------------------------
    # Google Cloud Console: https://console.cloud.google.com/apis/credentials
    # The redirect URI must match the one registered for the client exactly.
    GOOGLE_CLIENT_ID: str = ""
    GOOGLE_CLIENT_SECRET: str = ""
    GOOGLE_REDIRECT_URI: str = ""

    # Calendar picked at connect time; falls back to "primary"
    TARGET_CALENDAR_NAME: str = "Our Lovely Life"

    # Time zone for created events and for displaying event times
    CALENDAR_TIMEZONE: str = "America/Chicago"

    # ---------------------------------------------------------------------------
    # CHAT PROVIDER SETTINGS
    # ---------------------------------------------------------------------------
    ANTHROPIC_API_KEY: str = ""
    ANTHROPIC_VERSION: str = "2023-06-01"

    # Chat forward timeout in seconds
    AI_REQUEST_TIMEOUT: int = 60

    @property
    def firebase_private_key(self) -> str:
        """The private key with escaped newlines expanded."""
        return self.FIREBASE_PRIVATE_KEY.replace("\\n", "\n")

    def require(self, *names: str) -> None:
        """
        Ensure the named settings are set.

        Raises:
            ConfigurationError: listing every missing setting
        """
        missing = [name for name in names if not getattr(self, name)]
        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}",
                missing=missing,
            )


# ---------------------------------------------------------------------------
# GLOBAL SETTINGS INSTANCE
# ---------------------------------------------------------------------------
# Usage: from familyhub.core.config import settings
settings = Settings()
