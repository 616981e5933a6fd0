"""
AWS S3 object store: existence checks, downloads and uploads through aioboto3.

Objects are served to clients directly from the bucket (or the configured
public base URL); this adapter only builds the URL and never signs it.
"""
from __future__ import annotations

import logging
from typing import Any

import aioboto3
from botocore.exceptions import BotoCoreError, ClientError

from resizer.config import Settings
from resizer.storage.base import ObjectStore, StorageError, StorageErrorKind, StoredObject

logger = logging.getLogger(__name__)

# Resized variants never change once written under a key
_RESIZED_CACHE_CONTROL = "public, max-age=31536000"

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}
_FORBIDDEN_CODES = {"403", "AccessDenied", "Forbidden", "InvalidObjectState"}
_BAD_REQUEST_CODES = {"400", "EntityTooLarge", "BadRequest"}


def _error_kind(exc: ClientError) -> StorageErrorKind:
    code = exc.response.get("Error", {}).get("Code", "")
    status_code = str(exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode", ""))
    if code in _NOT_FOUND_CODES or status_code == "404":
        return StorageErrorKind.NOT_FOUND
    if code in _FORBIDDEN_CODES or status_code == "403":
        return StorageErrorKind.FORBIDDEN
    if code in _BAD_REQUEST_CODES or status_code == "400":
        return StorageErrorKind.BAD_REQUEST
    return StorageErrorKind.UNKNOWN


class S3ObjectStore(ObjectStore):
    def __init__(self, settings: Settings, session: aioboto3.Session | None = None) -> None:
        self.bucket = settings.s3_bucket_name
        self.region = settings.aws_region
        self.endpoint_url = settings.s3_endpoint_url or None
        self.public_base_url = settings.public_base_url.rstrip("/")
        if session is None:
            # Blank credentials fall through to the default boto chain
            session = aioboto3.Session(
                aws_access_key_id=settings.aws_access_key_id or None,
                aws_secret_access_key=settings.aws_secret_access_key or None,
                region_name=settings.aws_region,
            )
        self._session = session

    def _client(self) -> Any:
        return self._session.client("s3", endpoint_url=self.endpoint_url)

    def object_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    async def check_object(self, key: str) -> bool:
        try:
            async with self._client() as s3:
                await s3.head_object(Bucket=self.bucket, Key=key)
        except ClientError as exc:
            kind = _error_kind(exc)
            if kind is StorageErrorKind.NOT_FOUND:
                return False
            raise StorageError(kind, key, str(exc)) from exc
        except BotoCoreError as exc:
            raise StorageError(StorageErrorKind.UNKNOWN, key, str(exc)) from exc
        return True

    async def download_object(self, key: str) -> StoredObject:
        try:
            async with self._client() as s3:
                response = await s3.get_object(Bucket=self.bucket, Key=key)
                body = await response["Body"].read()
        except ClientError as exc:
            raise StorageError(_error_kind(exc), key, str(exc)) from exc
        except BotoCoreError as exc:
            raise StorageError(StorageErrorKind.UNKNOWN, key, str(exc)) from exc
        return StoredObject(
            body=body,
            content_type=response.get("ContentType") or "application/octet-stream",
        )

    async def upload_object(self, key: str, body: bytes, content_type: str) -> None:
        try:
            async with self._client() as s3:
                await s3.put_object(
                    Bucket=self.bucket,
                    Key=key,
                    Body=body,
                    ContentType=content_type,
                    CacheControl=_RESIZED_CACHE_CONTROL,
                )
        except ClientError as exc:
            kind = _error_kind(exc)
            if kind is not StorageErrorKind.BAD_REQUEST:
                kind = StorageErrorKind.UNKNOWN
            raise StorageError(kind, key, str(exc)) from exc
        except BotoCoreError as exc:
            raise StorageError(StorageErrorKind.UNKNOWN, key, str(exc)) from exc
        logger.debug("Uploaded s3://%s/%s (%d bytes)", self.bucket, key, len(body))
