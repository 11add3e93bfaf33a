from __future__ import annotations
"""Connection profile models and persistence."""
from dataclasses import dataclass, replace
import json
import logging
import os
from pathlib import Path
from typing import Mapping

import keyring
from keyring.errors import KeyringError

LOGGER = logging.getLogger(__name__)

SERVICE_NAME = "s3-file-manager"
LOGIN_ACCOUNT_PREFIX = "login:"


@dataclass
class ConnectionProfile:
    """Represents a saved S3 connection."""

    name: str
    endpoint_url: str = ""
    access_key: str = ""
    secret_key: str = ""
    region: str = ""


class KeychainStore:
    """Secrets kept under one keyring service, one account per profile or login.

    A failing keyring backend is logged; reads then behave as if nothing was
    stored and writes report ``False``.
    """

    def __init__(self, service_name: str = SERVICE_NAME):
        self.service_name = service_name

    def get_secret(self, account: str) -> str:
        if not account:
            return ""
        try:
            secret = keyring.get_password(self.service_name, account)
        except KeyringError as exc:
            LOGGER.warning("Could not read keychain entry '%s': %s", account, exc)
            return ""
        return secret or ""

    def set_secret(self, account: str, secret: str) -> bool:
        if not account or not secret:
            return False
        try:
            keyring.set_password(self.service_name, account, secret)
        except KeyringError as exc:
            LOGGER.warning("Could not write keychain entry '%s': %s", account, exc)
            return False
        return True


class ProfileStorage:
    """JSON-backed store for connection profiles; secrets stay in the keychain."""

    def __init__(self, storage_path: str | Path | None = None, keychain: KeychainStore | None = None):
        if storage_path is None:
            storage_path = Path.home() / ".s3_file_manager_connections.json"
        self._path = Path(storage_path)
        self._keychain = keychain or KeychainStore()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[ConnectionProfile]:
        data = self._read_data()
        profiles: list[ConnectionProfile] = []
        sanitized: list[dict[str, str]] = []
        saw_plaintext = False
        for entry in data:
            try:
                name = entry["name"]
                secret_key = entry.get("secret_key", "")
                if secret_key:
                    saw_plaintext = True
                    self._keychain.set_secret(name, secret_key)
                else:
                    secret_key = self._keychain.get_secret(name)
                profile = ConnectionProfile(
                    name=name,
                    endpoint_url=entry.get("endpoint_url", ""),
                    access_key=entry.get("access_key", ""),
                    secret_key=secret_key,
                    region=entry.get("region", ""),
                )
            except (KeyError, AttributeError):
                continue
            profiles.append(profile)
            sanitized.append(self._public_fields(profile))
        if saw_plaintext:
            self._write_data(sanitized)
        return profiles

    def get(self, name: str) -> ConnectionProfile | None:
        for profile in self.load():
            if profile.name == name:
                return profile
        return None

    def upsert(self, profile: ConnectionProfile) -> bool:
        """Add or replace ``profile``; returns whether its secret reached the keychain."""

        entries = [
            entry
            for entry in self._read_data()
            if isinstance(entry, dict) and entry.get("name") != profile.name
        ]
        entries.append(self._public_fields(profile))
        stored = self._keychain.set_secret(profile.name, profile.secret_key)
        self._write_data(entries)
        LOGGER.info("Saved connection profile '%s' to %s", profile.name, self._path)
        return stored

    def get_login_password(self, username: str) -> str:
        return self._keychain.get_secret(LOGIN_ACCOUNT_PREFIX + username) if username else ""

    def set_login_password(self, username: str, password: str) -> bool:
        if not username:
            return False
        return self._keychain.set_secret(LOGIN_ACCOUNT_PREFIX + username, password)

    @staticmethod
    def _public_fields(profile: ConnectionProfile) -> dict[str, str]:
        return {
            "name": profile.name,
            "endpoint_url": profile.endpoint_url,
            "access_key": profile.access_key,
            "region": profile.region,
        }

    def _read_data(self) -> list:
        if not self._path.exists():
            return []
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            return []
        return data if isinstance(data, list) else []

    def _write_data(self, data: list) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def resolve_profile(
    name: str,
    storage: ProfileStorage,
    environ: Mapping[str, str] | None = None,
    *,
    default_region: str = "",
) -> ConnectionProfile:
    """Return the named profile with ``AWS_*`` environment values taking precedence."""

    env = os.environ if environ is None else environ
    profile = (storage.get(name) if name else None) or ConnectionProfile(name=name or "default")
    return replace(
        profile,
        endpoint_url=env.get("AWS_ENDPOINT") or profile.endpoint_url,
        access_key=env.get("AWS_ACCESS_KEY_ID") or profile.access_key,
        secret_key=env.get("AWS_SECRET_ACCESS_KEY") or profile.secret_key,
        region=env.get("AWS_DEFAULT_REGION") or profile.region or default_region,
    )


def resolve_login_password(
    username: str,
    storage: ProfileStorage,
    environ: Mapping[str, str] | None = None,
) -> str:
    env = os.environ if environ is None else environ
    return env.get("S3FM_PASSWORD") or storage.get_login_password(username)
