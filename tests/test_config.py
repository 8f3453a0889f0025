"""Tests for credential configuration."""

import os
from unittest.mock import patch

from ticktick_auth import config


class TestEnvFile:
    """Test .env loading."""

    def test_loads_values(self, tmp_path):
        """Should load key/value pairs and strip quotes."""
        env_file = tmp_path / ".env"
        env_file.write_text(
            "# comment\n"
            "TICKTICK_CLIENT_ID=abc123\n"
            "TICKTICK_CLIENT_SECRET=\"quoted secret\"\n"
            "not a pair\n"
        )
        with patch.dict(os.environ, {}, clear=True):
            loaded = config._load_env_file(env_file)
            assert os.environ["TICKTICK_CLIENT_ID"] == "abc123"
            assert os.environ["TICKTICK_CLIENT_SECRET"] == "quoted secret"
        assert loaded == {"TICKTICK_CLIENT_ID": "abc123", "TICKTICK_CLIENT_SECRET": "quoted secret"}

    def test_environment_takes_precedence(self, tmp_path):
        """Should not override variables already set."""
        env_file = tmp_path / ".env"
        env_file.write_text("TICKTICK_CLIENT_ID=from-file\n")
        with patch.dict(os.environ, {"TICKTICK_CLIENT_ID": "from-env"}, clear=True):
            loaded = config._load_env_file(env_file)
            assert os.environ["TICKTICK_CLIENT_ID"] == "from-env"
        assert loaded == {}

    def test_missing_file(self, tmp_path):
        """Should load nothing when the file does not exist."""
        assert config._load_env_file(tmp_path / "missing.env") == {}


class TestCredentialStatus:
    """Test credential status reporting."""

    def test_status_without_values(self):
        """Should report presence only, never the values."""
        env = {"TICKTICK_CLIENT_ID": "abc123", "TICKTICK_CLIENT_SECRET": "s3cret"}
        with patch.dict(os.environ, env, clear=True):
            status = config.get_credential_status()

        assert status["ticktick"] == {
            "client_id": True,
            "client_secret": True,
            "redirect_uri": False,
        }
        assert "s3cret" not in str(status)

    def test_redirect_uri_default(self):
        """Should fall back to the local redirect URI."""
        with patch.dict(os.environ, {}, clear=True):
            assert config.get_redirect_uri() == "http://localhost:8080"
        with patch.dict(os.environ, {"TICKTICK_REDIRECT_URI": "http://127.0.0.1:9000/cb"}):
            assert config.get_redirect_uri() == "http://127.0.0.1:9000/cb"
