"""Smoke tests: the public package surface imports and wires together."""

import os
from unittest.mock import patch

import dropbox_files
from dropbox_files import FileService, file_service_from_config, load_config


def test_version_is_exposed() -> None:
    assert dropbox_files.__version__ == "0.1.0"


def test_public_errors_are_exported() -> None:
    assert issubclass(dropbox_files.DropboxAuthError, dropbox_files.DropboxApiError)
    assert issubclass(dropbox_files.DropboxDecodeError, ValueError)


def test_service_builds_from_environment() -> None:
    """Config loading and factory wiring run end-to-end without network access."""
    with patch.dict(os.environ, {"DBX_ACCESS_TOKEN": "tok"}, clear=True):
        service = file_service_from_config(load_config())

    assert isinstance(service, FileService)
