from __future__ import annotations
"""Folder-style operations over a flat bucket namespace."""

import io
import logging
import os
from typing import BinaryIO

from . import paths
from .clipboard import ClipboardStore, InMemoryClipboardStore
from .models import (
    ClipboardAction,
    ClipboardEntry,
    DirectoryListing,
    FileEntry,
    FolderEntry,
)
from .services import PAGE_SIZE, PRESIGN_EXPIRES, S3ObjectStore

LOGGER = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class NotConfiguredError(RuntimeError):
    """Raised when an operation is attempted before a bucket is configured."""


class InvalidDestination(ValueError):
    """Raised when a folder would be copied or moved into its own subtree."""


class InvalidPaste(InvalidDestination):
    """Raised when a folder would be pasted into itself."""


class InvalidRename(InvalidDestination):
    """Raised when a folder would be renamed to a path below itself."""


class FileManagerController:
    """Runs file manager operations as sequences of object store calls.

    Multi-object operations (folder rename, folder paste) copy and delete one
    object at a time and stop at the first failure; objects already moved stay
    moved.
    """

    def __init__(
        self,
        store: S3ObjectStore,
        bucket_name: str,
        clipboard: ClipboardStore | None = None,
        *,
        page_size: int = PAGE_SIZE,
    ):
        self._store = store
        self._bucket_name = bucket_name
        self._clipboard = clipboard if clipboard is not None else InMemoryClipboardStore()
        self._page_size = page_size

    @property
    def bucket_name(self) -> str:
        return self._bucket_name

    def list_directory(self, prefix: str = "") -> DirectoryListing:
        bucket = self._require_bucket()
        folders: list[FolderEntry] = []
        files: list[FileEntry] = []
        for page in self._store.iter_pages(
            bucket_name=bucket,
            prefix=prefix,
            delimiter=paths.DELIMITER,
            max_keys=self._page_size,
        ):
            folders.extend(FolderEntry(prefix=common) for common in page.prefixes)
            files.extend(
                entry
                for entry in page.files
                if entry.key != prefix and not paths.is_folder(entry.key)
            )
        folders.sort(key=lambda entry: entry.prefix)
        files.sort(key=lambda entry: entry.key)
        LOGGER.debug(
            "Listing of '%s': %d folder(s), %d file(s)", prefix, len(folders), len(files)
        )
        return DirectoryListing(prefix=prefix, folders=folders, files=files)

    def upload(
        self,
        prefix: str,
        filename: str,
        stream: BinaryIO | None,
        content_type: str | None = None,
    ) -> str | None:
        """Stream an uploaded file to ``prefix`` under its base name."""

        name = os.path.basename((filename or "").replace("\\", "/"))
        if not name.strip():
            return None
        key = paths.child_key(prefix, name)
        self._store.upload_fileobj(
            bucket_name=self._require_bucket(),
            key=key,
            fileobj=stream if stream is not None else io.BytesIO(),
            content_type=content_type or DEFAULT_CONTENT_TYPE,
        )
        LOGGER.info("Uploaded '%s'", key)
        return key

    def create_folder(self, prefix: str, name: str) -> str | None:
        name = (name or "").strip()
        if not name.rstrip(paths.DELIMITER):
            return None
        key = paths.folder_key(prefix, name)
        self._store.put_object(bucket_name=self._require_bucket(), key=key, body=b"")
        LOGGER.info("Created folder marker '%s'", key)
        return key

    def delete_object(self, key: str) -> bool:
        """Delete one object.

        For a folder key only the marker object goes away; anything stored
        below it is left in place.
        """

        if not key:
            return False
        self._store.delete_object(bucket_name=self._require_bucket(), key=key)
        LOGGER.info("Deleted '%s'", key)
        return True

    def rename_file(self, old_key: str, new_name: str) -> str | None:
        new_name = (new_name or "").strip()
        if not old_key or not new_name:
            return None
        new_key = paths.key_directory(old_key) + new_name
        self._move(old_key, new_key)
        LOGGER.info("Renamed '%s' to '%s'", old_key, new_key)
        return new_key

    def rename_folder(self, old_prefix: str, new_name: str) -> str | None:
        new_name = (new_name or "").strip()
        if not old_prefix or not new_name.rstrip(paths.DELIMITER):
            return None
        new_prefix = paths.folder_key(paths.parent_prefix(old_prefix), new_name)
        if new_prefix == old_prefix:
            return new_prefix
        if paths.is_within(new_prefix, old_prefix):
            raise InvalidRename(f"Cannot rename folder '{old_prefix}' to its own subfolder '{new_prefix}'")
        moved = self._transfer_prefix(old_prefix, new_prefix, delete_source=True)
        LOGGER.info("Renamed folder '%s' to '%s' (%d object(s))", old_prefix, new_prefix, moved)
        return new_prefix

    def get_clipboard(self, session_id: str) -> ClipboardEntry | None:
        return self._clipboard.get(session_id)

    def set_clipboard(self, session_id: str, action: ClipboardAction, key: str) -> ClipboardEntry | None:
        if not key:
            return None
        entry = ClipboardEntry(key=key, action=ClipboardAction(action), is_folder=paths.is_folder(key))
        self._clipboard.set(session_id, entry)
        LOGGER.debug("Clipboard for session set to %s '%s'", entry.action.value, key)
        return entry

    def clear_clipboard(self, session_id: str) -> None:
        self._clipboard.clear(session_id)

    def paste(self, session_id: str, target_prefix: str) -> ClipboardEntry | None:
        """Copy or move the clipboard entry under ``target_prefix``.

        Returns the consumed entry, or ``None`` when the clipboard was empty.
        The entry is only cleared once every object has been handled.
        """

        entry = self._clipboard.get(session_id)
        if entry is None:
            return None
        delete_source = entry.is_cut
        if entry.is_folder:
            destination = paths.folder_key(target_prefix, paths.base_name(entry.key))
            if destination != entry.key and paths.is_within(destination, entry.key):
                raise InvalidPaste(
                    f"Cannot paste folder '{entry.key}' into its own subfolder '{target_prefix}'"
                )
            count = self._transfer_prefix(entry.key, destination, delete_source=delete_source)
        else:
            destination = paths.child_key(target_prefix, paths.base_name(entry.key))
            if delete_source:
                self._move(entry.key, destination)
            else:
                self._copy(entry.key, destination)
            count = 1
        self._clipboard.clear(session_id)
        LOGGER.info(
            "Pasted (%s) '%s' to '%s' (%d object(s))",
            entry.action.value,
            entry.key,
            destination,
            count,
        )
        return entry

    def download_url(self, key: str, expires_in: int = PRESIGN_EXPIRES) -> str:
        return self._store.generate_presigned_url(
            bucket_name=self._require_bucket(),
            key=key,
            expires_in=expires_in,
        )

    def _transfer_prefix(self, source_prefix: str, destination_prefix: str, *, delete_source: bool) -> int:
        bucket = self._require_bucket()
        count = 0
        for page in self._store.iter_pages(
            bucket_name=bucket,
            prefix=source_prefix,
            delimiter=None,
            max_keys=self._page_size,
        ):
            for entry in page.files:
                new_key = destination_prefix + paths.relative_name(entry.key, source_prefix)
                if delete_source:
                    self._move(entry.key, new_key)
                else:
                    self._copy(entry.key, new_key)
                count += 1
        return count

    def _copy(self, source_key: str, destination_key: str) -> None:
        if source_key == destination_key:
            return
        self._store.copy_object(
            bucket_name=self._require_bucket(),
            source_key=source_key,
            destination_key=destination_key,
        )

    def _move(self, source_key: str, destination_key: str) -> None:
        # Source must never be deleted when it is also the destination.
        if source_key == destination_key:
            return
        bucket = self._require_bucket()
        self._store.copy_object(bucket_name=bucket, source_key=source_key, destination_key=destination_key)
        self._store.delete_object(bucket_name=bucket, key=source_key)

    def _require_bucket(self) -> str:
        if not self._bucket_name:
            raise NotConfiguredError("No bucket configured")
        return self._bucket_name
