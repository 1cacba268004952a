"""Kernel – framework-agnostic building blocks."""

from oss_policy.kernel.errors import (
    BaseError,
    ConflictError,
    DomainError,
    InfrastructureError,
    NotFoundError,
    PolicyBackendError,
    PolicyDocumentError,
    PolicyNotFoundError,
    SerializationError,
    StorageBackendError,
    ValidationError,
)

__all__ = [
    "BaseError",
    "ConflictError",
    "DomainError",
    "InfrastructureError",
    "NotFoundError",
    "PolicyBackendError",
    "PolicyDocumentError",
    "PolicyNotFoundError",
    "SerializationError",
    "StorageBackendError",
    "ValidationError",
]
