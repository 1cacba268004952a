"""MinIO adapter – SDK import guard and client construction."""
from __future__ import annotations

import asyncio
import functools
from typing import Any, Callable, TypeVar

from oss_policy.config.settings import OssSettings

T = TypeVar("T")

MISSING_POLICY_CODES = frozenset({"NoSuchBucketPolicy"})
MISSING_OBJECT_CODES = frozenset({"NoSuchKey", "NoSuchObject", "ResourceNotFound"})


def _require_minio() -> Any:
    try:
        import minio  # type: ignore[import-untyped]
        return minio
    except ImportError as exc:
        raise ImportError("Install 'minio' to use the MinIO adapter") from exc


def delete_object_type() -> Any:
    """``minio.deleteobjects.DeleteObject``, behind the same install check."""
    _require_minio()
    try:
        from minio.deleteobjects import DeleteObject  # type: ignore[import-untyped]
    except ImportError as exc:
        raise ImportError("Install 'minio' to use the MinIO adapter") from exc
    return DeleteObject


def create_minio_client(settings: OssSettings) -> Any:
    """Build a ``minio.Minio`` client from immutable connection settings."""
    minio = _require_minio()
    return minio.Minio(
        settings.endpoint,
        access_key=settings.access_key or None,
        secret_key=settings.secret_key or None,
        secure=settings.secure,
        region=settings.region,
    )


def error_code(exc: BaseException) -> str | None:
    """S3 error code carried by SDK exceptions (``S3Error.code``)."""
    code = getattr(exc, "code", None)
    return code if isinstance(code, str) else None


def is_missing_policy(exc: BaseException) -> bool:
    if error_code(exc) in MISSING_POLICY_CODES:
        return True
    return "the bucket policy does not exist" in str(exc).lower()


async def run_blocking(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run a blocking SDK call on the default executor."""
    return await asyncio.get_event_loop().run_in_executor(None, functools.partial(func, *args, **kwargs))


__all__ = [
    "MISSING_OBJECT_CODES",
    "MISSING_POLICY_CODES",
    "create_minio_client",
    "delete_object_type",
    "error_code",
    "is_missing_policy",
    "run_blocking",
]
