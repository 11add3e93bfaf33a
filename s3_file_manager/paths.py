"""Key and prefix arithmetic for the virtual folder view of a bucket.

Folders only exist as key prefixes ending in ``/``. Every helper here is a
pure string function; callers are responsible for passing keys that belong to
the prefix they are paired with.
"""

from __future__ import annotations

DELIMITER = "/"


def is_folder(key: str) -> bool:
    return key.endswith(DELIMITER)


def normalize_prefix(value: str | None) -> str:
    """Return ``value`` as a prefix: empty for the root, else ending in ``/``."""

    if not value:
        return ""
    return value if value.endswith(DELIMITER) else value + DELIMITER


def parent_prefix(prefix: str) -> str:
    """Return the prefix one level up, ``""`` once the root is reached."""

    trimmed = prefix[:-1] if prefix.endswith(DELIMITER) else prefix
    position = trimmed.rfind(DELIMITER)
    if position < 0:
        return ""
    return trimmed[: position + 1]


def relative_name(key: str, prefix: str) -> str:
    return key[len(prefix):]


def child_key(prefix: str, name: str) -> str:
    return prefix + name


def folder_key(prefix: str, name: str) -> str:
    return prefix + name.rstrip(DELIMITER) + DELIMITER


def key_directory(key: str) -> str:
    """Everything up to and including the last ``/`` of ``key``."""

    return key[: key.rfind(DELIMITER) + 1]


def base_name(key: str) -> str:
    """Last segment of ``key``; for folder keys, the folder's own name."""

    trimmed = key.rstrip(DELIMITER)
    return trimmed[trimmed.rfind(DELIMITER) + 1:]


def is_within(key: str, prefix: str) -> bool:
    return bool(prefix) and key.startswith(prefix)
