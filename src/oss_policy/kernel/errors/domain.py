"""Domain errors — caller mistakes and state conflicts.

None of these are worth retrying: the same request fails the same way.
"""

from __future__ import annotations

from typing import Any

from oss_policy.kernel.errors.base import BaseError


class DomainError(BaseError):
    """Raised when a request breaks a domain rule."""

    default_code = "domain_error"


class ValidationError(DomainError):
    """Input rejected before any backend call.

    ``errors`` lists the offending fields, e.g.
    ``[{"field": "effect", "index": 0, "value": "Permit"}]``.
    """

    default_code = "validation_error"

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.errors: list[dict[str, Any]] = list(errors or [])

    @classmethod
    def for_field(cls, field: str, message: str, **context: Any) -> ValidationError:
        """Single-field failure; *context* (``index``, ``value`` ...) joins the entry."""
        cause = context.pop("cause", None)
        return cls(message, errors=[{"field": field, **context}], cause=cause)

    @property
    def fields(self) -> list[str]:
        return [entry["field"] for entry in self.errors if "field" in entry]

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["errors"] = self.errors
        return payload


class NotFoundError(DomainError):
    """The requested resource does not exist."""

    default_code = "not_found"

    def __init__(self, resource: str, identifier: Any = None, **kwargs: Any) -> None:
        if identifier is None:
            message = f"{resource} not found"
        else:
            message = f"{resource} '{identifier}' not found"
        super().__init__(message, **kwargs)
        self.resource = resource
        self.identifier = identifier


class PolicyNotFoundError(NotFoundError):
    """The backend holds no policy document for ``bucket``.

    Backends raise it; :class:`~oss_policy.policy.store.PolicyStore` turns it
    into "no policy" and it never reaches engine callers.
    """

    default_code = "policy_not_found"

    def __init__(self, bucket: str, **kwargs: Any) -> None:
        super().__init__("Bucket policy", bucket, **kwargs)
        self.bucket = bucket
        self.detail.setdefault("bucket", bucket)


class ConflictError(DomainError):
    """The operation conflicts with existing state, e.g. the bucket already exists."""

    default_code = "conflict"


__all__ = [
    "ConflictError",
    "DomainError",
    "NotFoundError",
    "PolicyNotFoundError",
    "ValidationError",
]
