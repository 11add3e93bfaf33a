from __future__ import annotations
"""View-agnostic presenter that turns actions into rendered results."""
import logging
from typing import Callable

from . import paths
from .actions import (
    Action,
    ActionResult,
    CreateFolderAction,
    DeleteAction,
    DownloadAction,
    ListAction,
    PasteAction,
    RenameAction,
    RenameFolderAction,
    SetClipboardAction,
    UploadAction,
)
from .controller import FileManagerController, InvalidDestination, NotConfiguredError
from .models import DirectoryListing
from .services import PRESIGN_EXPIRES, StoreUnavailable

LOGGER = logging.getLogger(__name__)


def _format_error(label: str, exc: Exception) -> str:
    return f"{label} failed: {exc}"


class FileManagerPresenter:
    """Runs one action for a session, then lists the current prefix."""

    def __init__(
        self,
        controller: FileManagerController,
        *,
        presign_expires: int = PRESIGN_EXPIRES,
    ) -> None:
        self._controller = controller
        self._presign_expires = presign_expires
        self._handlers: dict[type, Callable[[str, str, object], str | None]] = {
            ListAction: self._handle_list,
            UploadAction: self._handle_upload,
            CreateFolderAction: self._handle_create_folder,
            DeleteAction: self._handle_delete,
            RenameAction: self._handle_rename,
            RenameFolderAction: self._handle_rename_folder,
            PasteAction: self._handle_paste,
            SetClipboardAction: self._handle_set_clipboard,
        }

    @property
    def controller(self) -> FileManagerController:
        return self._controller

    def handle(self, session_id: str, prefix: str, action: Action | None = None) -> ActionResult:
        prefix = paths.normalize_prefix(prefix)
        action = action if action is not None else ListAction()

        if isinstance(action, DownloadAction):
            return self._handle_download(session_id, prefix, action)

        handler = self._handlers.get(type(action))
        if handler is None:
            raise TypeError(f"Unsupported action: {type(action).__name__}")

        result = ActionResult()
        LOGGER.debug("Handling %s at '%s'", type(action).__name__, prefix)
        try:
            result.message = handler(session_id, prefix, action)
        except (StoreUnavailable, InvalidDestination, NotConfiguredError) as exc:
            LOGGER.warning("%s at '%s' failed: %s", type(action).__name__, prefix, exc)
            result.error = _format_error(self._label(action), exc)
        except Exception as exc:
            LOGGER.exception("Unexpected error handling %s at '%s'", type(action).__name__, prefix)
            result.error = _format_error(self._label(action), exc)

        result.listing = self._list(prefix, result)
        result.clipboard = self._controller.get_clipboard(session_id)
        return result

    def _list(self, prefix: str, result: ActionResult) -> DirectoryListing:
        try:
            return self._controller.list_directory(prefix)
        except (StoreUnavailable, NotConfiguredError) as exc:
            LOGGER.warning("Listing '%s' failed: %s", prefix, exc)
            if result.error is None:
                result.error = _format_error("Listing", exc)
            return DirectoryListing(prefix=prefix)

    def _handle_download(self, session_id: str, prefix: str, action: DownloadAction) -> ActionResult:
        try:
            url = self._controller.download_url(action.key, expires_in=self._presign_expires)
        except (StoreUnavailable, NotConfiguredError, ValueError) as exc:
            LOGGER.warning("Download link for '%s' failed: %s", action.key, exc)
            result = ActionResult(error=f"Failed to generate download URL: {exc}")
            result.listing = self._list(prefix, result)
            result.clipboard = self._controller.get_clipboard(session_id)
            return result
        LOGGER.info("Issued download link for '%s'", action.key)
        return ActionResult(redirect_url=url)

    def _handle_list(self, session_id: str, prefix: str, action: ListAction) -> str | None:
        return None

    def _handle_upload(self, session_id: str, prefix: str, action: UploadAction) -> str | None:
        key = self._controller.upload(prefix, action.filename, action.stream, action.content_type)
        if key is None:
            return None
        return f"Uploaded {paths.base_name(key)} successfully."

    def _handle_create_folder(self, session_id: str, prefix: str, action: CreateFolderAction) -> str | None:
        if self._controller.create_folder(prefix, action.name) is None:
            return None
        return f"Folder '{action.name.strip()}' created successfully."

    def _handle_delete(self, session_id: str, prefix: str, action: DeleteAction) -> str | None:
        if not self._controller.delete_object(action.key):
            return None
        return "Deleted successfully."

    def _handle_rename(self, session_id: str, prefix: str, action: RenameAction) -> str | None:
        if self._controller.rename_file(action.old_key, action.new_name) is None:
            return None
        return "Renamed successfully."

    def _handle_rename_folder(self, session_id: str, prefix: str, action: RenameFolderAction) -> str | None:
        if self._controller.rename_folder(action.old_prefix, action.new_name) is None:
            return None
        return "Folder renamed successfully."

    def _handle_paste(self, session_id: str, prefix: str, action: PasteAction) -> str | None:
        entry = self._controller.paste(session_id, prefix)
        if entry is None:
            return None
        return "Moved successfully." if entry.is_cut else "Copied successfully."

    def _handle_set_clipboard(self, session_id: str, prefix: str, action: SetClipboardAction) -> str | None:
        entry = self._controller.set_clipboard(session_id, action.action, action.key)
        if entry is None:
            return None
        return f"{entry.action.value.capitalize()} ready. Navigate to the target folder and click Paste."

    @staticmethod
    def _label(action: object) -> str:
        return {
            ListAction: "Listing",
            UploadAction: "Upload",
            CreateFolderAction: "Create folder",
            DeleteAction: "Delete",
            RenameAction: "Rename",
            RenameFolderAction: "Folder rename",
            PasteAction: "Paste",
            SetClipboardAction: "Clipboard",
        }.get(type(action), "Operation")
