from __future__ import annotations
"""Actions accepted by the presenter and the result handed back to the view."""
from dataclasses import dataclass, field
from typing import BinaryIO, Optional, Union

from .models import ClipboardAction, ClipboardEntry, DirectoryListing


@dataclass(frozen=True)
class ListAction:
    pass


@dataclass(frozen=True)
class UploadAction:
    filename: str
    stream: Optional[BinaryIO] = field(default=None, compare=False)
    content_type: Optional[str] = None


@dataclass(frozen=True)
class CreateFolderAction:
    name: str


@dataclass(frozen=True)
class DeleteAction:
    key: str


@dataclass(frozen=True)
class RenameAction:
    old_key: str
    new_name: str


@dataclass(frozen=True)
class RenameFolderAction:
    old_prefix: str
    new_name: str


@dataclass(frozen=True)
class PasteAction:
    pass


@dataclass(frozen=True)
class SetClipboardAction:
    action: ClipboardAction
    key: str


@dataclass(frozen=True)
class DownloadAction:
    key: str


Action = Union[
    ListAction,
    UploadAction,
    CreateFolderAction,
    DeleteAction,
    RenameAction,
    RenameFolderAction,
    PasteAction,
    SetClipboardAction,
    DownloadAction,
]


@dataclass
class ActionResult:
    """What the view needs to render the response to one action."""

    listing: DirectoryListing = field(default_factory=DirectoryListing)
    message: Optional[str] = None
    error: Optional[str] = None
    clipboard: Optional[ClipboardEntry] = None
    redirect_url: Optional[str] = None

    @property
    def is_redirect(self) -> bool:
        return self.redirect_url is not None
