"""Policy – AccessModeEvaluator: effective access mode of a bucket or object.

Bucket scope only consults ``Allow`` statements on root resources.  Object
scope starts from the bucket's mode and then applies every statement that
targets the object, ``Allow`` and ``Deny`` alike, in document order; a later
statement overrides an earlier one for the same flag.
"""
from __future__ import annotations

from oss_policy.observability.logging import get_logger
from oss_policy.policy.merger import PolicyMerger
from oss_policy.policy.models import AccessMode, Effect, PolicyDocument
from oss_policy.policy.normalizer import normalize
from oss_policy.policy.resources import ARN_PREFIX, is_root, object_path, path_keys, require_bucket
from oss_policy.policy.store import PolicyStore

logger = get_logger(__name__)

READ_ACTION = "s3:GetObject"
WRITE_ACTION = "s3:PutObject"
ANY_ACTION = "*"


def bucket_mode_of(bucket: str, document: PolicyDocument | None) -> AccessMode:
    if document is None:
        return AccessMode.DEFAULT
    can_read = can_write = False
    for unit in normalize(document.statements):
        if not unit.action_keys or not is_root(bucket, unit.resource):
            continue
        if unit.effect is not Effect.ALLOW:
            continue
        if unit.has_action(ANY_ACTION):
            return AccessMode.PUBLIC_READ_WRITE
        can_read = can_read or unit.has_action(READ_ACTION)
        can_write = can_write or unit.has_action(WRITE_ACTION)
        if can_read and can_write:
            return AccessMode.PUBLIC_READ_WRITE
    return AccessMode.from_flags(can_read, can_write)


def object_mode_of(bucket: str, path: str, document: PolicyDocument | None) -> AccessMode:
    """Effective mode of the object at ``<bucket>/<key>`` *path*."""
    bucket_mode = bucket_mode_of(bucket, document)
    if document is None or document.is_empty:
        return bucket_mode
    can_read = bucket_mode in (AccessMode.PUBLIC_READ, AccessMode.PUBLIC_READ_WRITE)
    can_write = bucket_mode is AccessMode.PUBLIC_READ_WRITE
    keys = path_keys(path)
    for unit in normalize(document.statements):
        if unit.resource_key not in keys or not unit.action_keys:
            continue
        if unit.effect is Effect.ALLOW:
            if unit.has_action(ANY_ACTION):
                return AccessMode.PUBLIC_READ_WRITE
            if unit.has_action(READ_ACTION):
                can_read = True
            if unit.has_action(WRITE_ACTION):
                can_write = True
        elif unit.effect is Effect.DENY:
            if unit.has_action(ANY_ACTION):
                return AccessMode.PRIVATE
            if unit.has_action(READ_ACTION):
                can_read = False
            if unit.has_action(WRITE_ACTION):
                can_write = False
    return AccessMode.from_flags(can_read, can_write)


class AccessModeEvaluator:
    """Reads the current document and derives effective access modes."""

    def __init__(self, store: PolicyStore, merger: PolicyMerger) -> None:
        self._store = store
        self._merger = merger

    async def bucket_mode(self, bucket: str) -> AccessMode:
        bucket = require_bucket(bucket)
        return bucket_mode_of(bucket, await self._store.fetch(bucket))

    async def object_mode(self, bucket: str, object_name: str) -> AccessMode:
        path = object_path(bucket, object_name)
        return object_mode_of(bucket, path, await self._store.fetch(bucket, resource=ARN_PREFIX + path))

    async def remove_object(self, bucket: str, object_name: str) -> AccessMode:
        """Drop every statement scoped to the object; it then inherits the bucket mode."""
        path = object_path(bucket, object_name)
        document = await self._store.fetch(bucket, resource=ARN_PREFIX + path)
        if document is None or document.is_empty:
            return object_mode_of(bucket, path, document)

        keys = path_keys(path)
        units = normalize(document.statements)
        survivors = [unit for unit in units if unit.resource_key not in keys]
        if len(survivors) == len(units):
            return object_mode_of(bucket, path, document)

        written = await self._merger.rewrite(bucket, survivors, resource=ARN_PREFIX + path)
        logger.info("policy.object_acl_removed", bucket=bucket, object=path, removed=len(units) - len(survivors))
        return object_mode_of(bucket, path, written)


__all__ = [
    "AccessModeEvaluator",
    "ANY_ACTION",
    "READ_ACTION",
    "WRITE_ACTION",
    "bucket_mode_of",
    "object_mode_of",
]
