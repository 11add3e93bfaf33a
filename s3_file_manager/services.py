from __future__ import annotations
"""Object store access for the file manager, built on boto3."""
import logging
from typing import BinaryIO, Callable, Iterator

import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from .models import FileEntry, ObjectPage
from .profiles import ConnectionProfile


LOGGER = logging.getLogger(__name__)

PAGE_SIZE = 1000
PRESIGN_EXPIRES = 15 * 60


class StoreUnavailable(RuntimeError):
    """Raised when any call into the object store fails."""


def describe_error(exc: Exception) -> str:
    """Return the store's own error message when it reported one."""

    if isinstance(exc, ClientError):
        error = exc.response.get("Error") or {}
        message = error.get("Message") or error.get("Code")
        if message:
            return str(message)
    return str(exc)


class S3ObjectStore:
    """Thin wrapper over the S3 calls the file manager needs.

    Each method performs exactly one request (``iter_pages`` one per page) and
    converts boto errors into :class:`StoreUnavailable`.
    """

    def __init__(
        self,
        profile: ConnectionProfile,
        client_factory: Callable[..., object] | None = None,
    ):
        self._profile = profile
        self._client_factory = client_factory or boto3.client
        self._client = None

    @property
    def client(self):
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def _create_client(self):
        profile = self._profile
        if profile.endpoint_url:
            config = Config(signature_version="s3v4", s3={"addressing_style": "path"})
        else:
            config = Config(signature_version="s3v4")
        return self._client_factory(
            "s3",
            endpoint_url=profile.endpoint_url or None,
            region_name=profile.region or None,
            aws_access_key_id=profile.access_key or None,
            aws_secret_access_key=profile.secret_key or None,
            config=config,
        )

    def list_page(
        self,
        *,
        bucket_name: str,
        prefix: str = "",
        delimiter: str | None = "/",
        continuation_token: str | None = None,
        max_keys: int = PAGE_SIZE,
    ) -> ObjectPage:
        """Return one page of objects (and common prefixes) under ``prefix``."""

        list_params = {"Bucket": bucket_name, "MaxKeys": max_keys}
        if prefix:
            list_params["Prefix"] = prefix
        if delimiter:
            list_params["Delimiter"] = delimiter
        if continuation_token:
            list_params["ContinuationToken"] = continuation_token

        try:
            response = self.client.list_objects_v2(**list_params)
        except (ClientError, BotoCoreError) as exc:
            raise StoreUnavailable(describe_error(exc)) from exc

        files = [
            FileEntry(
                key=obj["Key"],
                size=obj.get("Size", 0),
                last_modified=obj.get("LastModified"),
            )
            for obj in response.get("Contents", [])
        ]
        prefixes = [common["Prefix"] for common in response.get("CommonPrefixes", [])]
        token = None
        if response.get("IsTruncated", False):
            token = response.get("NextContinuationToken")
        return ObjectPage(files=files, prefixes=prefixes, continuation_token=token)

    def iter_pages(
        self,
        *,
        bucket_name: str,
        prefix: str = "",
        delimiter: str | None = "/",
        max_keys: int = PAGE_SIZE,
    ) -> Iterator[ObjectPage]:
        """Yield pages until the store stops returning a continuation token."""

        token: str | None = None
        page_number = 1
        while True:
            page = self.list_page(
                bucket_name=bucket_name,
                prefix=prefix,
                delimiter=delimiter,
                continuation_token=token,
                max_keys=max_keys,
            )
            LOGGER.debug(
                "Listed page %d of '%s' in bucket '%s' (%d object(s), %d prefix(es))",
                page_number,
                prefix,
                bucket_name,
                len(page.files),
                len(page.prefixes),
            )
            yield page
            if not page.continuation_token:
                return
            token = page.continuation_token
            page_number += 1

    def put_object(
        self,
        *,
        bucket_name: str,
        key: str,
        body: bytes = b"",
        content_type: str | None = None,
    ) -> None:
        params = {"Bucket": bucket_name, "Key": key, "Body": body}
        if content_type:
            params["ContentType"] = content_type
        try:
            self.client.put_object(**params)
        except (ClientError, BotoCoreError) as exc:
            raise StoreUnavailable(describe_error(exc)) from exc

    def upload_fileobj(
        self,
        *,
        bucket_name: str,
        key: str,
        fileobj: BinaryIO,
        content_type: str | None = None,
    ) -> None:
        """Stream ``fileobj`` to ``key`` through boto3's managed transfer.

        Large bodies are sent as a multipart upload, so nothing is buffered
        in full.
        """

        extra_args = {"ContentType": content_type} if content_type else None
        try:
            self.client.upload_fileobj(fileobj, bucket_name, key, ExtraArgs=extra_args)
        except (ClientError, BotoCoreError, S3UploadFailedError) as exc:
            raise StoreUnavailable(describe_error(exc)) from exc

    def copy_object(self, *, bucket_name: str, source_key: str, destination_key: str) -> None:
        try:
            self.client.copy_object(
                Bucket=bucket_name,
                Key=destination_key,
                CopySource={"Bucket": bucket_name, "Key": source_key},
            )
        except (ClientError, BotoCoreError) as exc:
            raise StoreUnavailable(describe_error(exc)) from exc

    def delete_object(self, *, bucket_name: str, key: str) -> None:
        try:
            self.client.delete_object(Bucket=bucket_name, Key=key)
        except (ClientError, BotoCoreError) as exc:
            raise StoreUnavailable(describe_error(exc)) from exc

    def generate_presigned_url(
        self,
        *,
        bucket_name: str,
        key: str,
        expires_in: int = PRESIGN_EXPIRES,
    ) -> str:
        """Create a time-limited GET URL for ``key``."""

        if expires_in <= 0:
            raise ValueError("expires_in must be greater than zero")
        try:
            return self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": bucket_name, "Key": key},
                ExpiresIn=expires_in,
            )
        except (ClientError, BotoCoreError) as exc:
            raise StoreUnavailable(describe_error(exc)) from exc
