from __future__ import annotations
"""Application settings persistence helpers."""

from dataclasses import dataclass, replace
import json
import logging
import os
from pathlib import Path
from typing import Mapping

from .profiles import ConnectionProfile

LOGGER = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class AppSettings:
    """Simple container for persistent app settings."""

    bucket: str = ""
    region: str = "us-east-1"
    profile_name: str = "default"
    public_base_url: str = ""
    presign_expires: int = 900
    page_size: int = 1000
    host: str = "127.0.0.1"
    port: int = 8080
    login_username: str = "admin"
    log_level: str = "INFO"


def default_settings_path(environ: Mapping[str, str] | None = None) -> Path:
    env = os.environ if environ is None else environ
    override = env.get("S3FM_SETTINGS")
    if override:
        return Path(override)
    return Path.home() / ".s3_file_manager_settings.json"


def _positive_int(value: object, default: int, *, maximum: int | None = None) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    if number <= 0:
        return default
    if maximum is not None and number > maximum:
        return maximum
    return number


def _text(value: object, default: str) -> str:
    return value if isinstance(value, str) else default


def _log_level(value: object, default: str) -> str:
    if isinstance(value, str) and value.upper() in LOG_LEVELS:
        return value.upper()
    return default


class SettingsStorage:
    """Reads :class:`AppSettings` from a hand-edited JSON file."""

    def __init__(self, storage_path: str | Path | None = None):
        if storage_path is None:
            storage_path = default_settings_path()
        self._path = Path(storage_path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> AppSettings:
        if not self._path.exists():
            return AppSettings()
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            LOGGER.warning("Ignoring unreadable settings file %s: %s", self._path, exc)
            return AppSettings()
        if not isinstance(data, dict):
            LOGGER.warning("Ignoring settings file %s: expected a JSON object", self._path)
            return AppSettings()
        defaults = AppSettings()
        return AppSettings(
            bucket=_text(data.get("bucket"), defaults.bucket),
            region=_text(data.get("region"), defaults.region) or defaults.region,
            profile_name=_text(data.get("profile_name"), defaults.profile_name) or defaults.profile_name,
            public_base_url=_text(data.get("public_base_url"), defaults.public_base_url),
            presign_expires=_positive_int(data.get("presign_expires"), defaults.presign_expires, maximum=7 * 24 * 3600),
            page_size=_positive_int(data.get("page_size"), defaults.page_size, maximum=1000),
            host=_text(data.get("host"), defaults.host) or defaults.host,
            port=_positive_int(data.get("port"), defaults.port, maximum=65535),
            login_username=_text(data.get("login_username"), defaults.login_username) or defaults.login_username,
            log_level=_log_level(data.get("log_level"), defaults.log_level),
        )


def apply_environment(settings: AppSettings, environ: Mapping[str, str] | None = None) -> AppSettings:
    """Return ``settings`` with environment overrides applied."""

    env = os.environ if environ is None else environ
    return replace(
        settings,
        bucket=env.get("AWS_BUCKET_NAME") or settings.bucket,
        region=env.get("AWS_DEFAULT_REGION") or settings.region,
        profile_name=env.get("S3FM_PROFILE") or settings.profile_name,
        public_base_url=env.get("S3FM_PUBLIC_BASE_URL") or settings.public_base_url,
        host=env.get("S3FM_HOST") or settings.host,
        port=_positive_int(env.get("S3FM_PORT"), settings.port, maximum=65535),
        login_username=env.get("S3FM_USERNAME") or settings.login_username,
        log_level=_log_level(env.get("S3FM_LOG_LEVEL"), settings.log_level),
    )


def configuration_problems(settings: AppSettings, profile: ConnectionProfile) -> list[str]:
    """Describe what is missing before the manager can talk to the bucket."""

    problems: list[str] = []
    if not settings.bucket:
        problems.append("No bucket is configured (set AWS_BUCKET_NAME or 'bucket').")
    if not (profile.region or settings.region):
        problems.append("No region is configured (set AWS_DEFAULT_REGION or 'region').")
    if profile.endpoint_url.strip().rstrip("/") in ("https:", "http:"):
        problems.append("The endpoint must be a full URL, not just a scheme.")
    if not profile.access_key or not profile.secret_key:
        problems.append(
            "Credentials are missing or incomplete; provide both an access key and a secret key."
        )
    return problems
