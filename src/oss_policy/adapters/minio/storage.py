"""MinIO adapter – MinioStorageManager, bucket/object pass-through façade.

Everything here delegates to the SDK; the only logic of its own is argument
validation and the public-URL shortcut for objects the policy engine reports
as publicly readable.
"""
from __future__ import annotations

import dataclasses
import logging
from datetime import datetime, timedelta
from typing import Any, Awaitable, Iterable, TypeVar
from urllib.parse import quote

from oss_policy.adapters.minio.client import MISSING_OBJECT_CODES, delete_object_type, error_code, run_blocking
from oss_policy.config.settings import DEFAULT_REGION
from oss_policy.kernel.errors import BaseError, ConflictError, StorageBackendError, ValidationError
from oss_policy.policy.engine import BucketPolicyEngine
from oss_policy.policy.models import AccessMode
from oss_policy.policy.resources import format_object_name, require_bucket

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_PRESIGN_SECONDS = 7 * 24 * 3600


@dataclasses.dataclass(frozen=True)
class BucketInfo:
    name: str
    creation_date: datetime | None = None


@dataclasses.dataclass(frozen=True)
class ObjectInfo:
    name: str
    size: int | None = None
    etag: str | None = None
    last_modified: datetime | None = None
    content_type: str | None = None
    is_dir: bool = False


def _validate_expiry(expires_seconds: int) -> timedelta:
    if expires_seconds <= 0:
        raise ValidationError.for_field("expires_seconds", "Presigned URL expiry must be positive")
    if expires_seconds > MAX_PRESIGN_SECONDS:
        raise ValidationError.for_field("expires_seconds", "Presigned URL expiry must not exceed 7 days")
    return timedelta(seconds=expires_seconds)


class MinioStorageManager:
    """Bucket and object operations plus the bucket policy engine.

    Usage::

        manager = build_storage_manager(settings)
        await manager.create_bucket("docs")
        await manager.policy.set_bucket_access_mode("docs", AccessMode.PUBLIC_READ)
        url = await manager.presigned_get_object("docs", "f.txt", 3600)
    """

    def __init__(
        self,
        client: Any,
        policy: BucketPolicyEngine,
        *,
        endpoint: str,
        secure: bool = False,
        region: str = DEFAULT_REGION,
    ) -> None:
        self._client = client
        self.policy = policy
        self._endpoint = endpoint
        self._secure = secure
        self._region = region

    # ------------------------------------------------------------------
    # Buckets
    # ------------------------------------------------------------------

    async def bucket_exists(self, bucket: str) -> bool:
        bucket = require_bucket(bucket)
        return await self._call("bucket_exists", bucket, run_blocking(self._client.bucket_exists, bucket_name=bucket))

    async def create_bucket(self, bucket: str) -> None:
        if await self.bucket_exists(bucket):
            raise ConflictError(f"Bucket '{bucket}' already exists", detail={"bucket": bucket})
        await self._call(
            "make_bucket", bucket, run_blocking(self._client.make_bucket, bucket_name=bucket, location=self._region)
        )
        logger.info("minio.bucket_created bucket=%s region=%s", bucket, self._region)

    async def remove_bucket(self, bucket: str) -> None:
        if not await self.bucket_exists(bucket):
            return
        await self._call("remove_bucket", bucket, run_blocking(self._client.remove_bucket, bucket_name=bucket))
        logger.info("minio.bucket_removed bucket=%s", bucket)

    async def list_buckets(self) -> list[BucketInfo]:
        buckets = await self._call("list_buckets", None, run_blocking(self._client.list_buckets))
        return [BucketInfo(name=b.name, creation_date=getattr(b, "creation_date", None)) for b in buckets]

    # ------------------------------------------------------------------
    # Objects
    # ------------------------------------------------------------------

    async def list_objects(self, bucket: str, prefix: str | None = None) -> list[ObjectInfo]:
        bucket = require_bucket(bucket)

        def _list() -> list[ObjectInfo]:
            return [
                ObjectInfo(
                    name=item.object_name,
                    size=item.size,
                    etag=item.etag,
                    last_modified=item.last_modified,
                    content_type=getattr(item, "content_type", None),
                    is_dir=bool(item.is_dir),
                )
                for item in self._client.list_objects(bucket_name=bucket, prefix=prefix, recursive=True)
            ]

        return await self._call("list_objects", bucket, run_blocking(_list))

    async def object_exists(self, bucket: str, object_name: str) -> bool:
        bucket = require_bucket(bucket)
        name = format_object_name(object_name)
        try:
            await run_blocking(self._client.stat_object, bucket_name=bucket, object_name=name)
        except Exception as exc:
            if error_code(exc) in MISSING_OBJECT_CODES:
                return False
            raise StorageBackendError("stat_object", bucket=bucket, cause=exc) from exc
        return True

    async def remove_object(self, bucket: str, object_name: str) -> None:
        bucket = require_bucket(bucket)
        name = format_object_name(object_name)
        await self._call(
            "remove_object", bucket, run_blocking(self._client.remove_object, bucket_name=bucket, object_name=name)
        )

    async def remove_objects(self, bucket: str, object_names: Iterable[str]) -> None:
        """Delete several objects in one request; any per-object failure is raised."""
        DeleteObject = delete_object_type()
        bucket = require_bucket(bucket)
        targets = [DeleteObject(format_object_name(name)) for name in object_names]
        if not targets:
            return

        def _remove() -> list[Any]:
            # the SDK returns a lazy iterator; draining it sends the request
            return list(self._client.remove_objects(bucket_name=bucket, delete_object_list=targets))

        errors = await self._call("remove_objects", bucket, run_blocking(_remove))
        if errors:
            failed = [getattr(err, "name", str(err)) for err in errors]
            raise StorageBackendError(
                "remove_objects",
                f"Failed to remove {len(failed)} object(s) from '{bucket}'",
                bucket=bucket,
                detail={"objects": failed},
            )

    # ------------------------------------------------------------------
    # Presigned URLs
    # ------------------------------------------------------------------

    async def presigned_get_object(self, bucket: str, object_name: str, expires_seconds: int) -> str:
        """Temporary download URL; publicly readable objects get their plain URL."""
        bucket = require_bucket(bucket)
        name = format_object_name(object_name)
        expires = _validate_expiry(expires_seconds)
        mode = await self.policy.get_object_access_mode(bucket, name)
        if mode in (AccessMode.PUBLIC_READ, AccessMode.PUBLIC_READ_WRITE):
            return self.public_url(bucket, name)
        return await self._call(
            "presigned_get_object",
            bucket,
            run_blocking(self._client.presigned_get_object, bucket_name=bucket, object_name=name, expires=expires),
        )

    async def presigned_put_object(self, bucket: str, object_name: str, expires_seconds: int) -> str:
        bucket = require_bucket(bucket)
        name = format_object_name(object_name)
        expires = _validate_expiry(expires_seconds)
        return await self._call(
            "presigned_put_object",
            bucket,
            run_blocking(self._client.presigned_put_object, bucket_name=bucket, object_name=name, expires=expires),
        )

    def public_url(self, bucket: str, object_name: str) -> str:
        scheme = "https" if self._secure else "http"
        return f"{scheme}://{self._endpoint}/{bucket}/{quote(format_object_name(object_name), safe='/')}"

    async def _call(self, operation: str, bucket: str | None, awaitable: Awaitable[T]) -> T:
        try:
            return await awaitable
        except BaseError:
            raise
        except Exception as exc:
            logger.warning("minio.call_failed operation=%s bucket=%s cause=%r", operation, bucket, exc)
            raise StorageBackendError(operation, bucket=bucket, cause=exc) from exc


__all__ = ["BucketInfo", "MAX_PRESIGN_SECONDS", "MinioStorageManager", "ObjectInfo"]
