"""Unit tests for config.py: ClientConfig and load_config()."""

import os
from dataclasses import FrozenInstanceError
from unittest.mock import patch

import pytest

from dropbox_files.config import (
    DEFAULT_API_BASE_URL,
    DEFAULT_CONTENT_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
    ClientConfig,
    load_config,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_REQUIRED_ENV = {
    "DBX_ACCESS_TOKEN": "sl.test-token",
}


# ---------------------------------------------------------------------------
# ClientConfig tests
# ---------------------------------------------------------------------------


class TestClientConfig:
    def test_defaults(self) -> None:
        config = ClientConfig(access_token="tok")
        assert config.api_base_url == "https://api.dropboxapi.com/2"
        assert config.content_base_url == "https://content.dropboxapi.com/2"
        assert config.timeout_seconds == 30.0

    def test_is_frozen(self) -> None:
        config = ClientConfig(access_token="tok")
        with pytest.raises(FrozenInstanceError):
            config.access_token = "other"  # type: ignore[misc]


# ---------------------------------------------------------------------------
# load_config tests
# ---------------------------------------------------------------------------


class TestLoadConfig:
    def test_reads_access_token_and_defaults(self) -> None:
        with patch.dict(os.environ, _REQUIRED_ENV, clear=True):
            config = load_config()
        assert config.access_token == "sl.test-token"
        assert config.api_base_url == DEFAULT_API_BASE_URL
        assert config.content_base_url == DEFAULT_CONTENT_BASE_URL
        assert config.timeout_seconds == DEFAULT_TIMEOUT_SECONDS

    def test_reads_overrides_from_env(self) -> None:
        env = {
            **_REQUIRED_ENV,
            "DBX_API_BASE_URL": "http://localhost:9000/2",
            "DBX_CONTENT_BASE_URL": "http://localhost:9001/2",
            "DBX_TIMEOUT_SECONDS": "4.5",
        }
        with patch.dict(os.environ, env, clear=True):
            config = load_config()
        assert config.api_base_url == "http://localhost:9000/2"
        assert config.content_base_url == "http://localhost:9001/2"
        assert config.timeout_seconds == 4.5

    def test_raises_key_error_when_access_token_missing(self) -> None:
        with patch.dict(os.environ, {}, clear=True), pytest.raises(KeyError):
            load_config()
