"""Client configuration loaded from environment variables."""

import os
from dataclasses import dataclass

DEFAULT_API_BASE_URL = "https://api.dropboxapi.com/2"
DEFAULT_CONTENT_BASE_URL = "https://content.dropboxapi.com/2"
DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class ClientConfig:
    """Centralized client configuration.

    The access token has no default and causes a KeyError at startup if
    the corresponding environment variable is missing. Endpoint hosts and
    the socket timeout have defaults but can be overridden via environment
    variables (e.g. to point tests at a local stub server).
    """

    # Required, no default: fail at startup if missing
    access_token: str

    api_base_url: str = DEFAULT_API_BASE_URL
    content_base_url: str = DEFAULT_CONTENT_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS


def load_config() -> ClientConfig:
    """Construct a ClientConfig from environment variables.

    Required environment variables:
        DBX_ACCESS_TOKEN: OAuth2 bearer access token for the Dropbox account.

    Optional environment variables (with defaults):
        DBX_API_BASE_URL: Base URL for RPC endpoints (default: https://api.dropboxapi.com/2).
        DBX_CONTENT_BASE_URL: Base URL for upload/download endpoints
            (default: https://content.dropboxapi.com/2).
        DBX_TIMEOUT_SECONDS: Socket timeout applied to every request (default: 30).

    Returns:
        Configured ClientConfig instance.
    """
    return ClientConfig(
        access_token=os.environ["DBX_ACCESS_TOKEN"],
        api_base_url=os.environ.get("DBX_API_BASE_URL", DEFAULT_API_BASE_URL),
        content_base_url=os.environ.get("DBX_CONTENT_BASE_URL", DEFAULT_CONTENT_BASE_URL),
        timeout_seconds=float(
            os.environ.get("DBX_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS))
        ),
    )
