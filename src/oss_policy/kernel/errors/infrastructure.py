"""Infrastructure errors — backend I/O failures and bad payloads."""

from __future__ import annotations

from typing import Any

from oss_policy.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a caller mistake."""

    default_code = "infrastructure_error"


class SerializationError(InfrastructureError):
    """Failed to serialize or deserialize a payload."""

    default_code = "serialization_error"

    def __init__(
        self,
        message: str,
        *,
        payload_type: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.payload_type = payload_type


class PolicyDocumentError(SerializationError):
    """The backend returned a policy document that cannot be decoded."""

    default_code = "policy_document_error"

    def __init__(self, message: str, *, bucket: str | None = None, **kwargs: Any) -> None:
        kwargs.setdefault("payload_type", "policy")
        super().__init__(message, **kwargs)
        self.bucket = bucket
        if bucket is not None:
            self.detail.setdefault("bucket", bucket)


class PolicyBackendError(InfrastructureError):
    """The storage backend failed while reading or writing a bucket policy.

    The original backend exception is kept as ``cause`` (and ``__cause__``).
    """

    default_code = "policy_backend_error"

    def __init__(
        self,
        bucket: str,
        message: str | None = None,
        *,
        resource: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message or f"Policy backend failed for bucket '{bucket}'", **kwargs)
        self.bucket = bucket
        self.resource = resource
        self.detail.setdefault("bucket", bucket)
        if resource is not None:
            self.detail.setdefault("resource", resource)


class StorageBackendError(InfrastructureError):
    """A bucket/object pass-through call to the storage backend failed."""

    default_code = "storage_backend_error"

    def __init__(
        self,
        operation: str,
        message: str | None = None,
        *,
        bucket: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message or f"Storage operation '{operation}' failed", **kwargs)
        self.operation = operation
        self.bucket = bucket
        if bucket is not None:
            self.detail.setdefault("bucket", bucket)


__all__ = [
    "InfrastructureError",
    "PolicyBackendError",
    "PolicyDocumentError",
    "SerializationError",
    "StorageBackendError",
]
