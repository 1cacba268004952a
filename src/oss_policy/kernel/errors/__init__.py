"""Kernel error hierarchy — public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError              (domain.py)
    │   ├── ValidationError
    │   ├── NotFoundError
    │   │   └── PolicyNotFoundError
    │   └── ConflictError
    └── InfrastructureError      (infrastructure.py)
        ├── SerializationError
        │   └── PolicyDocumentError
        ├── PolicyBackendError
        └── StorageBackendError
"""

from oss_policy.kernel.errors.base import BaseError
from oss_policy.kernel.errors.domain import (
    ConflictError,
    DomainError,
    NotFoundError,
    PolicyNotFoundError,
    ValidationError,
)
from oss_policy.kernel.errors.infrastructure import (
    InfrastructureError,
    PolicyBackendError,
    PolicyDocumentError,
    SerializationError,
    StorageBackendError,
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
