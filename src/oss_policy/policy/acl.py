"""Policy – AclBuilder: canonical statements for each access mode."""
from __future__ import annotations

from oss_policy.kernel.errors import ValidationError
from oss_policy.policy.merger import PolicyMerger
from oss_policy.policy.models import AccessMode, PolicyDocument, Statement
from oss_policy.policy.resources import BUCKET_ROOT_ARN, object_arn, require_bucket

DELETE_OBJECT = "s3:DeleteObject"
GET_OBJECT = "s3:GetObject"
LIST_BUCKET = "s3:ListBucket"
PUT_OBJECT = "s3:PutObject"


def bucket_statements(mode: AccessMode) -> tuple[Statement, ...]:
    """Statements granting *mode* on the bucket root; empty for ``DEFAULT``."""
    resources = (BUCKET_ROOT_ARN,)
    if mode is AccessMode.PRIVATE:
        return (Statement.deny((DELETE_OBJECT, GET_OBJECT, LIST_BUCKET, PUT_OBJECT), resources),)
    if mode is AccessMode.PUBLIC_READ:
        return (
            Statement.allow((GET_OBJECT, LIST_BUCKET), resources),
            Statement.deny((DELETE_OBJECT, PUT_OBJECT), resources),
        )
    if mode is AccessMode.PUBLIC_READ_WRITE:
        return (Statement.allow((DELETE_OBJECT, GET_OBJECT, LIST_BUCKET, PUT_OBJECT), resources),)
    return ()


def object_statements(bucket: str, object_name: str, mode: AccessMode) -> tuple[Statement, ...]:
    if mode is AccessMode.DEFAULT:
        raise ValidationError.for_field(
            "mode", f"Unsupported access mode '{mode.value}' for an object", value=mode.value
        )
    resources = (object_arn(bucket, object_name),)
    if mode is AccessMode.PRIVATE:
        return (Statement.deny((DELETE_OBJECT, GET_OBJECT, PUT_OBJECT), resources),)
    if mode is AccessMode.PUBLIC_READ:
        return (
            Statement.allow((GET_OBJECT,), resources),
            Statement.deny((DELETE_OBJECT, PUT_OBJECT), resources),
        )
    return (Statement.allow((DELETE_OBJECT, GET_OBJECT, PUT_OBJECT), resources),)


def _require_mode(mode: AccessMode | str) -> AccessMode:
    try:
        return AccessMode(mode)
    except ValueError as exc:
        raise ValidationError.for_field(
            "mode", f"Unknown access mode {mode!r}", value=str(mode), cause=exc
        ) from exc


class AclBuilder:
    """Translates a requested :class:`AccessMode` into a policy merge."""

    def __init__(self, merger: PolicyMerger) -> None:
        self._merger = merger

    async def apply_bucket(self, bucket: str, mode: AccessMode | str) -> PolicyDocument | None:
        """Returns the written document, or ``None`` when ``DEFAULT`` removed the policy."""
        bucket = require_bucket(bucket)
        statements = bucket_statements(_require_mode(mode))
        if not statements:
            await self._merger.remove_policy(bucket)
            return None
        return await self._merger.merge(bucket, statements)

    async def apply_object(self, bucket: str, object_name: str, mode: AccessMode | str) -> PolicyDocument:
        statements = object_statements(require_bucket(bucket), object_name, _require_mode(mode))
        return await self._merger.merge(bucket, statements, resource=object_arn(bucket, object_name))


__all__ = [
    "AclBuilder",
    "DELETE_OBJECT",
    "GET_OBJECT",
    "LIST_BUCKET",
    "PUT_OBJECT",
    "bucket_statements",
    "object_statements",
]
