"""
Tests for settings and the app shell.
"""

import logging
from unittest.mock import patch

import pytest

from familyhub.core.config import Settings, settings
from familyhub.core.logging import setup_logging
from familyhub.environments.base import ConfigurationError


class TestSettings:

    def test_require_lists_every_missing_value(self):
        config = Settings(_env_file=None, GOOGLE_CLIENT_ID="id", GOOGLE_CLIENT_SECRET="", ANTHROPIC_API_KEY="")

        with pytest.raises(ConfigurationError) as exc_info:
            config.require("GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_SECRET", "ANTHROPIC_API_KEY")

        assert exc_info.value.missing == ["GOOGLE_CLIENT_SECRET", "ANTHROPIC_API_KEY"]
        assert "GOOGLE_CLIENT_SECRET" in str(exc_info.value)

    def test_require_passes_when_set(self):
        Settings(_env_file=None, ANTHROPIC_API_KEY="sk-test").require("ANTHROPIC_API_KEY")

    def test_private_key_newlines_expanded(self):
        config = Settings(_env_file=None, FIREBASE_PRIVATE_KEY="-----BEGIN-----\\nabc\\n-----END-----")

        assert config.firebase_private_key == "-----BEGIN-----\nabc\n-----END-----"


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


class TestSetupLogging:

    @pytest.mark.parametrize("debug, level", [(True, logging.DEBUG), (False, logging.INFO)])
    def test_explicit_level(self, debug, level):
        assert setup_logging(debug=debug).level == level

    def test_defaults_to_settings(self):
        with patch.object(settings, "DEBUG", True):
            assert setup_logging().level == logging.DEBUG
        setup_logging()

    def test_single_handler(self):
        setup_logging()
        setup_logging()

        assert len(logging.getLogger("familyhub").handlers) == 1
