"""Dropbox API v2 transport: RPC calls and content upload/download."""

from __future__ import annotations

import json
import logging
from typing import IO, TYPE_CHECKING, Any
from urllib import request as urllib_request
from urllib.error import HTTPError

from dropbox_files.config import (
    DEFAULT_API_BASE_URL,
    DEFAULT_CONTENT_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
)

if TYPE_CHECKING:
    from http.client import HTTPResponse

    from dropbox_files.config import ClientConfig

logger = logging.getLogger(__name__)

# Content endpoints carry their JSON arguments in this header instead of the body.
API_ARG_HEADER = "Dropbox-API-Arg"
API_RESULT_HEADER = "Dropbox-API-Result"

CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_OCTET_STREAM = "application/octet-stream"

HTTP_UNAUTHORIZED = 401


class DropboxApiError(Exception):
    """Raised when the Dropbox API returns a non-2xx response."""

    def __init__(self, status_code: int, message: str, error_summary: str | None = None) -> None:
        super().__init__(f"Dropbox API error {status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.error_summary = error_summary


class DropboxAuthError(DropboxApiError):
    """Raised when the access token is missing, invalid or expired (HTTP 401)."""


class DropboxDecodeError(ValueError):
    """Raised when a response body does not have the expected JSON shape."""


def read_json(body: IO[bytes]) -> dict[str, Any]:
    """Decode a response stream as a JSON object.

    The stream is read to the end but not closed.

    Args:
        body: Readable response stream.

    Returns:
        Parsed JSON object.

    Raises:
        DropboxDecodeError: If the body is not valid JSON or not a JSON object.
    """
    return parse_json(body.read())


def parse_json(raw: bytes | str) -> dict[str, Any]:
    """Parse raw bytes or text as a JSON object, raising DropboxDecodeError otherwise."""
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise DropboxDecodeError(f"Response is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise DropboxDecodeError(f"Unexpected JSON type: {type(data).__name__}")
    return data


def _api_error(exc: HTTPError) -> DropboxApiError:
    """Map an HTTPError to DropboxApiError, preferring the JSON error_summary."""
    raw = exc.read() or b""
    summary: str | None = None
    try:
        summary = json.loads(raw).get("error_summary")
    except (ValueError, AttributeError):
        summary = None
    text = raw.decode("utf-8", errors="replace").strip()
    message = summary or text or str(exc.reason)
    error_cls = DropboxAuthError if exc.code == HTTP_UNAUTHORIZED else DropboxApiError
    return error_cls(exc.code, message, summary)


class DropboxClient:
    """Authenticated transport for the Dropbox API v2."""

    def __init__(
        self,
        access_token: str,
        api_base_url: str = DEFAULT_API_BASE_URL,
        content_base_url: str = DEFAULT_CONTENT_BASE_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialise the transport.

        Args:
            access_token: OAuth2 bearer token sent with every request.
            api_base_url: Base URL for RPC endpoints.
            content_base_url: Base URL for upload/download endpoints.
            timeout_seconds: Socket timeout for each request.
        """
        self._access_token = access_token
        self._api_base_url = api_base_url.rstrip("/")
        self._content_base_url = content_base_url.rstrip("/")
        self._timeout = timeout_seconds

    def call(self, endpoint: str, payload: dict[str, Any]) -> HTTPResponse:
        """POST a JSON payload to an RPC endpoint.

        Args:
            endpoint: Endpoint path (e.g. "/files/get_metadata").
            payload: JSON-serialisable request arguments.

        Returns:
            The open response stream. The caller must close it.

        Raises:
            DropboxAuthError: If the API rejects the access token.
            DropboxApiError: If the API returns any other non-2xx status code.
        """
        req = urllib_request.Request(
            f"{self._api_base_url}{endpoint}",
            data=json.dumps(payload).encode("utf-8"),
            headers={
                "Authorization": f"Bearer {self._access_token}",
                "Content-Type": CONTENT_TYPE_JSON,
            },
            method="POST",
        )
        return self._open(req, endpoint)

    def download(
        self,
        endpoint: str,
        payload: dict[str, Any],
        body: bytes | IO[bytes] | None = None,
    ) -> HTTPResponse:
        """POST to a content endpoint with arguments in the Dropbox-API-Arg header.

        With a body, the bytes or stream are sent as the request content
        without buffering (chunked when the stream length is unknown).
        Without a body, the response content is returned unread.

        Args:
            endpoint: Endpoint path (e.g. "/files/download").
            payload: JSON-serialisable request arguments.
            body: Optional request content.

        Returns:
            The open response stream. The caller must close it.

        Raises:
            DropboxAuthError: If the API rejects the access token.
            DropboxApiError: If the API returns any other non-2xx status code.
        """
        headers = {
            "Authorization": f"Bearer {self._access_token}",
            # ensure_ascii keeps non-ASCII paths legal in an HTTP header.
            API_ARG_HEADER: json.dumps(payload, ensure_ascii=True),
        }
        if body is not None:
            headers["Content-Type"] = CONTENT_TYPE_OCTET_STREAM
        req = urllib_request.Request(
            f"{self._content_base_url}{endpoint}",
            data=body,
            headers=headers,
            method="POST",
        )
        return self._open(req, endpoint)

    def _open(self, req: urllib_request.Request, endpoint: str) -> HTTPResponse:
        logger.debug("[%s] sending request; url:%s", endpoint, req.full_url)
        try:
            return urllib_request.urlopen(req, timeout=self._timeout)  # type: ignore[no-any-return]
        except HTTPError as exc:
            error = _api_error(exc)
            exc.close()
            logger.error(
                "[%s] request failed; status:%d;summary:%s",
                endpoint,
                error.status_code,
                error.error_summary,
            )
            raise error from exc


def dropbox_client_from_config(config: ClientConfig) -> DropboxClient:
    """Construct a DropboxClient from client configuration.

    Args:
        config: Client configuration instance.

    Returns:
        Configured DropboxClient instance.
    """
    return DropboxClient(
        access_token=config.access_token,
        api_base_url=config.api_base_url,
        content_base_url=config.content_base_url,
        timeout_seconds=config.timeout_seconds,
    )
