from __future__ import annotations
"""View helpers for formatting listings in the browser."""
from dataclasses import dataclass
from datetime import datetime
from importlib.metadata import PackageNotFoundError, metadata, version
from urllib.parse import quote

from . import paths

DIST_NAME = "s3-file-manager"


@dataclass(frozen=True)
class PackageInfo:
    name: str
    version: str
    summary: str


@dataclass(frozen=True)
class Breadcrumb:
    name: str
    prefix: str


def load_package_info(dist_name: str = DIST_NAME) -> PackageInfo:
    try:
        distribution_metadata = metadata(dist_name)
        package_version = version(dist_name)
    except PackageNotFoundError:
        return PackageInfo(
            name="S3 File Manager",
            version="",
            summary="Manage the files of one S3 bucket from the browser.",
        )
    return PackageInfo(
        name=distribution_metadata.get("Name") or "S3 File Manager",
        version=package_version,
        summary=distribution_metadata.get("Summary") or "",
    )


def format_size(size: int | None) -> str:
    if size is None:
        return "-"
    suffixes = ["B", "KB", "MB", "GB", "TB"]
    value = float(max(size, 0))
    for suffix in suffixes:
        if value < 1024 or suffix == suffixes[-1]:
            return f"{value:.1f} {suffix}" if suffix != "B" else f"{int(value)} {suffix}"
        value /= 1024
    return f"{size} B"


def format_last_modified(last_modified: object) -> str:
    if not last_modified:
        return "-"
    if isinstance(last_modified, datetime):
        return last_modified.strftime("%Y-%m-%d %H:%M:%S %Z").strip() or last_modified.isoformat()
    try:
        return last_modified.strftime("%Y-%m-%d %H:%M:%S %Z").strip() or str(last_modified)
    except AttributeError:
        return str(last_modified)


def build_breadcrumbs(prefix: str) -> list[Breadcrumb]:
    crumbs = [Breadcrumb(name="Root", prefix="")]
    current = ""
    for part in prefix.split(paths.DELIMITER):
        if not part:
            continue
        current += part + paths.DELIMITER
        crumbs.append(Breadcrumb(name=part, prefix=current))
    return crumbs


def display_name(key: str, prefix: str) -> str:
    """Name of a listing entry relative to the directory being shown."""

    return paths.relative_name(key, prefix).rstrip(paths.DELIMITER)


def public_url(base_url: str, key: str) -> str | None:
    if not base_url:
        return None
    return f"{base_url.rstrip('/')}/{quote(key)}"
