"""Client for the Dropbox API v2 files endpoints."""

from dropbox_files.api.client import (
    DropboxApiError,
    DropboxAuthError,
    DropboxClient,
    DropboxDecodeError,
)
from dropbox_files.config import ClientConfig, load_config
from dropbox_files.files.service import FileService, file_service_from_config

__version__ = "0.1.0"

__all__ = [
    "ClientConfig",
    "DropboxApiError",
    "DropboxAuthError",
    "DropboxClient",
    "DropboxDecodeError",
    "FileService",
    "__version__",
    "file_service_from_config",
    "load_config",
]
