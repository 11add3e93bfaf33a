from __future__ import annotations
"""Data models representing bucket listings and the clipboard."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class FileEntry:
    """A single object shown as a file in a directory listing."""

    key: str
    size: int = 0
    last_modified: Optional[datetime] = None


@dataclass(frozen=True)
class FolderEntry:
    """A virtual directory one level below the listed prefix."""

    prefix: str


@dataclass
class ObjectPage:
    """Represents a single page returned by the object store."""

    files: list[FileEntry] = field(default_factory=list)
    prefixes: list[str] = field(default_factory=list)
    continuation_token: Optional[str] = None


@dataclass
class DirectoryListing:
    """Everything directly under one prefix."""

    prefix: str = ""
    folders: list[FolderEntry] = field(default_factory=list)
    files: list[FileEntry] = field(default_factory=list)

    @property
    def total_size(self) -> int:
        return sum(entry.size for entry in self.files)

    @property
    def is_empty(self) -> bool:
        return not self.folders and not self.files


class ClipboardAction(str, Enum):
    COPY = "copy"
    CUT = "cut"


@dataclass(frozen=True)
class ClipboardEntry:
    """A pending copy or cut waiting for the next paste."""

    key: str
    action: ClipboardAction
    is_folder: bool = False

    @property
    def is_cut(self) -> bool:
        return self.action is ClipboardAction.CUT
