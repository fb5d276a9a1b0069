"""Data models for Dropbox file and folder metadata and per-operation inputs/outputs."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import IO, Any, TypeVar

from dropbox_files.api.client import DropboxDecodeError

# Dropbox API JSON field names
FIELD_TAG = ".tag"
FIELD_NAME = "name"
FIELD_PATH_LOWER = "path_lower"
FIELD_PATH_DISPLAY = "path_display"
FIELD_CLIENT_MODIFIED = "client_modified"
FIELD_SERVER_MODIFIED = "server_modified"
FIELD_REV = "rev"
FIELD_SIZE = "size"
FIELD_ID = "id"
FIELD_CURSOR = "cursor"
FIELD_HAS_MORE = "has_more"
FIELD_ENTRIES = "entries"
FIELD_MATCHES = "matches"
FIELD_MATCH_TYPE = "match_type"
FIELD_METADATA = "metadata"
FIELD_MORE = "more"
FIELD_START = "start"

# Metadata tags
TAG_FILE = "file"
TAG_FOLDER = "folder"
TAG_DELETED = "deleted"

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

_E = TypeVar("_E", bound=Enum)


class WriteMode(str, Enum):
    """What to do if the upload path already exists."""

    ADD = "add"
    OVERWRITE = "overwrite"


class SearchMode(str, Enum):
    """How a search is performed."""

    FILENAME = "filename"
    FILENAME_AND_CONTENT = "filename_and_content"
    DELETED_FILENAME = "deleted_filename"


class SearchMatchType(str, Enum):
    """Why a search result matched."""

    FILENAME = "filename"
    CONTENT = "content"
    BOTH = "both"


# ---------------------------------------------------------------------------
# Wire helpers
# ---------------------------------------------------------------------------


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a Dropbox timestamp ("2015-05-12T15:50:38Z") into an aware UTC datetime."""
    if value is None:
        return None
    try:
        return datetime.strptime(value, TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError as exc:
        raise DropboxDecodeError(f"Invalid timestamp: {value!r}") from exc


def format_timestamp(value: datetime) -> str:
    """Format a datetime in the Dropbox wire form. Naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def _require(raw: dict[str, Any], key: str) -> Any:
    try:
        return raw[key]
    except (KeyError, TypeError) as exc:
        raise DropboxDecodeError(f"Response is missing required field {key!r}") from exc


def _optional_int(value: Any, key: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise DropboxDecodeError(f"Field {key!r} is not an integer: {value!r}")
    return value


def _enum(enum_cls: type[_E], value: Any) -> _E:
    try:
        return enum_cls(value)
    except ValueError as exc:
        raise DropboxDecodeError(f"Unknown {enum_cls.__name__} value: {value!r}") from exc


# ---------------------------------------------------------------------------
# Shared records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Metadata:
    """Metadata for a file, folder or deleted entry.

    ``tag`` decides which fields are meaningful: folders carry no ``rev``,
    ``size`` or modification times, and deleted entries carry only names
    and paths. Fields absent from the response are None.
    """

    tag: str
    name: str
    path_lower: str | None = None
    path_display: str | None = None
    client_modified: datetime | None = None
    server_modified: datetime | None = None
    rev: str | None = None
    size: int | None = None
    id: str | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any], default_tag: str | None = None) -> Metadata:
        """Map a raw metadata object to a Metadata record.

        Endpoints typed as a single struct (upload, restore, the download
        result header) return file metadata without a ``.tag``; pass
        ``default_tag=TAG_FILE`` for those. Union-typed responses must
        carry the tag.
        """
        tag = raw.get(FIELD_TAG, default_tag) if isinstance(raw, dict) else None
        if tag is None:
            raise DropboxDecodeError(f"Response is missing required field {FIELD_TAG!r}")
        return cls(
            tag=tag,
            name=_require(raw, FIELD_NAME),
            path_lower=raw.get(FIELD_PATH_LOWER),
            path_display=raw.get(FIELD_PATH_DISPLAY),
            client_modified=parse_timestamp(raw.get(FIELD_CLIENT_MODIFIED)),
            server_modified=parse_timestamp(raw.get(FIELD_SERVER_MODIFIED)),
            rev=raw.get(FIELD_REV),
            size=_optional_int(raw.get(FIELD_SIZE), FIELD_SIZE),
            id=raw.get(FIELD_ID),
        )


@dataclass(frozen=True)
class SearchMatch:
    """A matched file or folder and the reason it matched."""

    match_type: SearchMatchType
    metadata: Metadata

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> SearchMatch:
        match_type = _require(raw, FIELD_MATCH_TYPE)
        return cls(
            match_type=_enum(SearchMatchType, _require(match_type, FIELD_TAG)),
            metadata=Metadata.from_dict(_require(raw, FIELD_METADATA)),
        )


# ---------------------------------------------------------------------------
# Operation inputs
# ---------------------------------------------------------------------------


@dataclass
class GetMetadataInput:
    path: str
    include_media_info: bool = False

    def to_payload(self) -> dict[str, Any]:
        return {"path": self.path, "include_media_info": self.include_media_info}


@dataclass
class CreateFolderInput:
    path: str

    def to_payload(self) -> dict[str, Any]:
        return {"path": self.path}


@dataclass
class DeleteInput:
    path: str

    def to_payload(self) -> dict[str, Any]:
        return {"path": self.path}


@dataclass
class CopyInput:
    from_path: str
    to_path: str

    def to_payload(self) -> dict[str, Any]:
        return {"from_path": self.from_path, "to_path": self.to_path}


@dataclass
class MoveInput:
    from_path: str
    to_path: str

    def to_payload(self) -> dict[str, Any]:
        return {"from_path": self.from_path, "to_path": self.to_path}


@dataclass
class RestoreInput:
    path: str
    rev: str

    def to_payload(self) -> dict[str, Any]:
        return {"path": self.path, "rev": self.rev}


@dataclass
class ListFolderInput:
    """Arguments for listing a folder. An empty path lists the root."""

    path: str = ""
    recursive: bool = False
    include_media_info: bool = False
    include_deleted: bool = False

    def to_payload(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "recursive": self.recursive,
            "include_media_info": self.include_media_info,
            "include_deleted": self.include_deleted,
        }


@dataclass
class ListFolderContinueInput:
    cursor: str

    def to_payload(self) -> dict[str, Any]:
        return {FIELD_CURSOR: self.cursor}


@dataclass
class SearchInput:
    """Arguments for a search.

    Attributes:
        path: Folder to search within ("" for the whole account).
        query: Search string.
        start: Offset of the first result, or None to start at the beginning.
        max_results: Page size, or None for the server default.
        mode: Search mode. None is replaced with SearchMode.FILENAME by
            FileService.search before the request is sent.
    """

    path: str
    query: str
    start: int | None = None
    max_results: int | None = None
    mode: SearchMode | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"path": self.path, "query": self.query}
        if self.start is not None:
            payload["start"] = self.start
        if self.max_results is not None:
            payload["max_results"] = self.max_results
        if self.mode is not None:
            payload["mode"] = SearchMode(self.mode).value
        return payload


@dataclass
class UploadInput:
    """Arguments and content for a single-request upload.

    Attributes:
        path: Destination path.
        body: File content, as bytes or a readable binary stream. The
            stream is read by the transport and never closed by it.
        mode: Conflict behaviour when the path already exists.
        autorename: Let the server rename the file on conflict.
        mute: Suppress desktop client notifications for this change.
        client_modified: Modification time to record, or None to use
            the server time.
    """

    path: str
    body: bytes | IO[bytes]
    mode: WriteMode = WriteMode.ADD
    autorename: bool = False
    mute: bool = False
    client_modified: datetime | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "path": self.path,
            "mode": WriteMode(self.mode).value,
            "autorename": self.autorename,
            "mute": self.mute,
        }
        if self.client_modified is not None:
            payload["client_modified"] = format_timestamp(self.client_modified)
        return payload


@dataclass
class DownloadInput:
    path: str

    def to_payload(self) -> dict[str, Any]:
        return {"path": self.path}


# ---------------------------------------------------------------------------
# Operation outputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GetMetadataOutput:
    metadata: Metadata


@dataclass(frozen=True)
class CreateFolderOutput:
    name: str
    path_lower: str | None = None
    id: str | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> CreateFolderOutput:
        return cls(
            name=_require(raw, FIELD_NAME),
            path_lower=raw.get(FIELD_PATH_LOWER),
            id=raw.get(FIELD_ID),
        )


@dataclass(frozen=True)
class DeleteOutput:
    metadata: Metadata


@dataclass(frozen=True)
class CopyOutput:
    metadata: Metadata


@dataclass(frozen=True)
class MoveOutput:
    metadata: Metadata


@dataclass(frozen=True)
class RestoreOutput:
    metadata: Metadata


@dataclass(frozen=True)
class UploadOutput:
    metadata: Metadata


@dataclass(frozen=True)
class ListFolderOutput:
    """One page of a folder listing.

    Attributes:
        cursor: Opaque token for /files/list_folder/continue.
        has_more: True if more entries are available via the cursor.
        entries: Entries on this page, in server order.
    """

    cursor: str
    has_more: bool
    entries: list[Metadata] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> ListFolderOutput:
        return cls(
            cursor=_require(raw, FIELD_CURSOR),
            has_more=bool(_require(raw, FIELD_HAS_MORE)),
            entries=[Metadata.from_dict(entry) for entry in raw.get(FIELD_ENTRIES, [])],
        )


@dataclass(frozen=True)
class SearchOutput:
    """One page of search results.

    Attributes:
        matches: Matches on this page, in server order.
        more: True if another page is available.
        start: Offset to pass as SearchInput.start for the next page.
    """

    matches: list[SearchMatch]
    more: bool
    start: int

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> SearchOutput:
        return cls(
            matches=[SearchMatch.from_dict(match) for match in _require(raw, FIELD_MATCHES)],
            more=bool(_require(raw, FIELD_MORE)),
            start=int(_require(raw, FIELD_START)),
        )


@dataclass(frozen=True)
class DownloadOutput:
    """An open download stream and the metadata of the downloaded file.

    The caller owns ``body`` and must close it, either directly or by using
    the output as a context manager::

        with service.download(DownloadInput(path="/a.txt")) as out:
            data = out.body.read()
    """

    body: IO[bytes]
    metadata: Metadata | None = None

    def close(self) -> None:
        self.body.close()

    def __enter__(self) -> DownloadOutput:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
