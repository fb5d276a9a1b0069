"""Typed facade with one method per Dropbox /files endpoint."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from dropbox_files.api.client import (
    API_RESULT_HEADER,
    DropboxClient,
    DropboxDecodeError,
    dropbox_client_from_config,
    parse_json,
    read_json,
)
from dropbox_files.files.models import (
    TAG_FILE,
    CopyInput,
    CopyOutput,
    CreateFolderInput,
    CreateFolderOutput,
    DeleteInput,
    DeleteOutput,
    DownloadInput,
    DownloadOutput,
    GetMetadataInput,
    GetMetadataOutput,
    ListFolderContinueInput,
    ListFolderInput,
    ListFolderOutput,
    Metadata,
    MoveInput,
    MoveOutput,
    RestoreInput,
    RestoreOutput,
    SearchInput,
    SearchMode,
    SearchOutput,
    UploadInput,
    UploadOutput,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from dropbox_files.config import ClientConfig

logger = logging.getLogger(__name__)


class FileService:
    """Typed facade over the Dropbox files API.

    Holds no per-call state, so a single instance may be shared between
    threads.
    """

    def __init__(self, client: DropboxClient) -> None:
        """Initialise the service.

        Args:
            client: Transport used for every request.
        """
        self._client = client

    def _call(self, endpoint: str, payload: dict[str, Any]) -> dict[str, Any]:
        """POST to an RPC endpoint and decode the JSON response, closing the stream."""
        with self._client.call(endpoint, payload) as body:
            return read_json(body)

    def get_metadata(self, args: GetMetadataInput) -> GetMetadataOutput:
        """Return the metadata for a file or folder."""
        raw = self._call("/files/get_metadata", args.to_payload())
        return GetMetadataOutput(metadata=Metadata.from_dict(raw))

    def create_folder(self, args: CreateFolderInput) -> CreateFolderOutput:
        """Create a folder. Fails if the path already exists."""
        raw = self._call("/files/create_folder", args.to_payload())
        logger.info("[create_folder] created folder; path:%s", args.path)
        return CreateFolderOutput.from_dict(raw)

    def delete(self, args: DeleteInput) -> DeleteOutput:
        """Delete a file or folder and its contents."""
        raw = self._call("/files/delete", args.to_payload())
        logger.info("[delete] deleted entry; path:%s", args.path)
        return DeleteOutput(metadata=Metadata.from_dict(raw))

    def copy(self, args: CopyInput) -> CopyOutput:
        """Copy a file or folder to a different location."""
        raw = self._call("/files/copy", args.to_payload())
        logger.info("[copy] copied entry; from_path:%s;to_path:%s", args.from_path, args.to_path)
        return CopyOutput(metadata=Metadata.from_dict(raw))

    def move(self, args: MoveInput) -> MoveOutput:
        """Move a file or folder to a different location."""
        raw = self._call("/files/move", args.to_payload())
        logger.info("[move] moved entry; from_path:%s;to_path:%s", args.from_path, args.to_path)
        return MoveOutput(metadata=Metadata.from_dict(raw))

    def restore(self, args: RestoreInput) -> RestoreOutput:
        """Restore a file to a specific revision."""
        raw = self._call("/files/restore", args.to_payload())
        logger.info("[restore] restored file; path:%s;rev:%s", args.path, args.rev)
        return RestoreOutput(metadata=Metadata.from_dict(raw, default_tag=TAG_FILE))

    def list_folder(self, args: ListFolderInput) -> ListFolderOutput:
        """Return the first page of a folder's contents.

        While ``has_more`` is true, pass the returned cursor to
        list_folder_continue for the following pages, or use iter_folder.
        """
        raw = self._call("/files/list_folder", args.to_payload())
        return ListFolderOutput.from_dict(raw)

    def list_folder_continue(self, args: ListFolderContinueInput) -> ListFolderOutput:
        """Return the next page of a folder listing from a cursor."""
        raw = self._call("/files/list_folder/continue", args.to_payload())
        return ListFolderOutput.from_dict(raw)

    def iter_folder(self, args: ListFolderInput) -> Iterator[Metadata]:
        """Yield every entry of a folder listing, following cursors until exhausted.

        Args:
            args: Listing arguments for the first page.

        Yields:
            Metadata entries in server order across all pages.

        Raises:
            DropboxDecodeError: If a page reports more entries without a cursor.
        """
        page = self.list_folder(args)
        page_number = 1
        while True:
            yield from page.entries
            if not page.has_more:
                break
            if not page.cursor:
                raise DropboxDecodeError("Listing reports has_more without a cursor")
            page = self.list_folder_continue(ListFolderContinueInput(cursor=page.cursor))
            page_number += 1
            logger.debug("[iter_folder] fetched page; path:%s;page:%d", args.path, page_number)

    def search(self, args: SearchInput) -> SearchOutput:
        """Search for files and folders.

        A missing ``mode`` is set to SearchMode.FILENAME on the caller's
        input before the request is sent.
        """
        if args.mode is None:
            args.mode = SearchMode.FILENAME

        raw = self._call("/files/search", args.to_payload())
        return SearchOutput.from_dict(raw)

    def upload(self, args: UploadInput) -> UploadOutput:
        """Upload a file of at most 150 MB in a single request.

        The body is streamed from ``args.body``; errors reading it propagate
        unchanged. The caller keeps ownership of the stream.
        """
        with self._client.download("/files/upload", args.to_payload(), args.body) as body:
            raw = read_json(body)
        metadata = Metadata.from_dict(raw, default_tag=TAG_FILE)
        logger.info("[upload] uploaded file; path:%s;size:%s", metadata.path_lower, metadata.size)
        return UploadOutput(metadata=metadata)

    def download(self, args: DownloadInput) -> DownloadOutput:
        """Download a file.

        Returns:
            DownloadOutput holding the open response stream, positioned at
            the start of the file content. The caller must close it.
        """
        body = self._client.download("/files/download", args.to_payload())
        result = body.headers.get(API_RESULT_HEADER)
        if result is None:
            return DownloadOutput(body=body)

        try:
            metadata = Metadata.from_dict(parse_json(result), default_tag=TAG_FILE)
        except DropboxDecodeError:
            body.close()
            raise
        return DownloadOutput(body=body, metadata=metadata)


def file_service_from_config(config: ClientConfig) -> FileService:
    """Construct a FileService from client configuration.

    Args:
        config: Client configuration instance.

    Returns:
        Configured FileService instance.
    """
    return FileService(client=dropbox_client_from_config(config))
