"""
Unit tests for environment configuration.
"""

from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import pytest

from skipgenie.utils.config import Config, SecureString


ENV_VARS = [
    "PORTAL_URL",
    "PORTAL_TOKEN",
    "PORTAL_TOKEN_ISSUED_AT",
    "REQUEST_TIMEOUT",
    "PROJECTION_HORIZON_DAYS",
    "OUTPUT_DIR",
    "LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Remove configuration variables and skip .env loading."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    with patch("skipgenie.utils.config.load_dotenv"):
        yield monkeypatch


class TestSecureString:
    """Test cases for SecureString."""

    def test_masked_representations(self):
        """Test str and repr never reveal the value."""
        token = SecureString("eyJhbGciOi")

        assert str(token) == "********"
        assert "eyJ" not in repr(token)
        assert token.get_value() == "eyJhbGciOi"

    def test_equality(self):
        """Test comparison by value."""
        assert SecureString("a") == SecureString("a")
        assert SecureString("a") != SecureString("b")
        assert SecureString("a") != "a"


class TestConfig:
    """Test cases for Config."""

    def test_defaults(self, clean_env):
        """Test default values."""
        config = Config()

        assert config.portal_url == "https://kiet.cybervidya.net/api"
        assert config.portal_token is None
        assert config.portal_token_issued_at is None
        assert config.request_timeout == 30
        assert config.projection_horizon_days == 30
        assert config.output_dir == Path("output")
        assert config.log_level == "INFO"
        assert config.validate()

    def test_values_from_environment(self, clean_env):
        """Test environment overrides."""
        clean_env.setenv("PORTAL_URL", "http://localhost:8080/api/")
        clean_env.setenv("PORTAL_TOKEN", "secret")
        clean_env.setenv("PORTAL_TOKEN_ISSUED_AT", "2025-10-01T09:00:00")
        clean_env.setenv("REQUEST_TIMEOUT", "10")
        clean_env.setenv("LOG_LEVEL", "debug")

        config = Config()

        assert config.portal_url == "http://localhost:8080/api"
        assert isinstance(config.portal_token, SecureString)
        assert config.portal_token.get_value() == "secret"
        assert config.portal_token_issued_at == datetime(2025, 10, 1, 9, 0)
        assert config.request_timeout == 10
        assert config.log_level == "DEBUG"

    @pytest.mark.parametrize("url", ["kiet.cybervidya.net/api", "ftp://example.com", "https://"])
    def test_invalid_url(self, clean_env, url):
        """Test malformed portal URLs are rejected."""
        clean_env.setenv("PORTAL_URL", url)

        with pytest.raises(ValueError, match="PORTAL_URL"):
            Config()

    def test_non_integer_timeout(self, clean_env):
        """Test integer settings must parse."""
        clean_env.setenv("REQUEST_TIMEOUT", "soon")

        with pytest.raises(ValueError, match="REQUEST_TIMEOUT"):
            Config()

    def test_validate_collects_errors(self, clean_env):
        """Test validate reports every invalid value."""
        clean_env.setenv("REQUEST_TIMEOUT", "0")
        clean_env.setenv("PROJECTION_HORIZON_DAYS", "-1")
        clean_env.setenv("LOG_LEVEL", "LOUD")
        clean_env.setenv("PORTAL_TOKEN_ISSUED_AT", "yesterday")

        config = Config()

        with pytest.raises(ValueError) as exc_info:
            config.validate()

        message = str(exc_info.value)
        assert "REQUEST_TIMEOUT" in message
        assert "PROJECTION_HORIZON_DAYS" in message
        assert "LOG_LEVEL" in message
        assert "PORTAL_TOKEN_ISSUED_AT" in message

    def test_create_output_directories(self, clean_env, tmp_path):
        """Test logs and reports directories are created."""
        clean_env.setenv("OUTPUT_DIR", str(tmp_path / "out"))

        Config().create_output_directories()

        assert (tmp_path / "out" / "logs").is_dir()
        assert (tmp_path / "out" / "reports").is_dir()
