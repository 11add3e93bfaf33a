from __future__ import annotations
"""Session-scoped clipboard storage for pending copy/cut operations."""
from collections import OrderedDict
import threading
import time
from typing import Callable, Protocol

from .models import ClipboardEntry

CLIPBOARD_TTL = 12 * 60 * 60
MAX_SESSIONS = 1024


class ClipboardStore(Protocol):
    """Holds at most one pending entry per session."""

    def get(self, session_id: str) -> ClipboardEntry | None:
        ...

    def set(self, session_id: str, entry: ClipboardEntry) -> None:
        ...

    def clear(self, session_id: str) -> None:
        ...


class InMemoryClipboardStore:
    """Process-local :class:`ClipboardStore` keyed by session id.

    Entries older than ``ttl`` seconds read as empty, and once more than
    ``max_entries`` sessions hold an entry the least recently set one is
    dropped.
    """

    def __init__(
        self,
        *,
        ttl: float = CLIPBOARD_TTL,
        max_entries: int = MAX_SESSIONS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl
        self._max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, tuple[float, ClipboardEntry]] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, session_id: str) -> ClipboardEntry | None:
        with self._lock:
            item = self._entries.get(session_id)
            if item is None:
                return None
            stored_at, entry = item
            if self._clock() - stored_at > self._ttl:
                del self._entries[session_id]
                return None
            return entry

    def set(self, session_id: str, entry: ClipboardEntry) -> None:
        with self._lock:
            now = self._clock()
            self._entries[session_id] = (now, entry)
            self._entries.move_to_end(session_id)
            self._prune(now)

    def clear(self, session_id: str) -> None:
        with self._lock:
            self._entries.pop(session_id, None)

    def __len__(self) -> int:
        with self._lock:
            self._prune(self._clock())
            return len(self._entries)

    def _prune(self, now: float) -> None:
        # Insertion order is also age order, so expired entries sit at the front.
        while self._entries:
            session_id, (stored_at, _) = next(iter(self._entries.items()))
            if now - stored_at <= self._ttl and len(self._entries) <= self._max_entries:
                break
            del self._entries[session_id]
