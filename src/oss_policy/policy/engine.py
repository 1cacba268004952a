"""Policy – BucketPolicyEngine, the caller-facing API of the policy engine."""
from __future__ import annotations

import contextlib
from typing import AsyncIterator, Awaitable, Callable, Collection, Iterable, TypeVar

from oss_policy.config.settings import DEFAULT_POLICY_VERSION
from oss_policy.policy.acl import AclBuilder
from oss_policy.policy.evaluator import AccessModeEvaluator
from oss_policy.policy.locks import BucketLocks
from oss_policy.policy.merger import PolicyMerger, StatementInput
from oss_policy.policy.models import AccessMode, PolicyDocument
from oss_policy.policy.ports import PolicyBackend
from oss_policy.policy.resources import require_bucket
from oss_policy.policy.store import PolicyStore

T = TypeVar("T")


class BucketPolicyEngine:
    """Get, merge and evaluate bucket policies over a :class:`PolicyBackend`.

    The engine holds no mutable state beyond its collaborators and never
    caches documents.  With ``serialize_writes=True`` every
    read-modify-write runs under the bucket's :class:`BucketLocks` entry,
    which protects writers sharing this engine's event loop only.

    Usage::

        engine = BucketPolicyEngine(backend)
        await engine.set_bucket_access_mode("docs", AccessMode.PUBLIC_READ)
        mode = await engine.get_object_access_mode("docs", "f.txt")
    """

    def __init__(
        self,
        backend: PolicyBackend,
        *,
        policy_version: str = DEFAULT_POLICY_VERSION,
        locks: BucketLocks | None = None,
        serialize_writes: bool = False,
    ) -> None:
        self.store = PolicyStore(backend, policy_version)
        self.merger = PolicyMerger(self.store)
        self.evaluator = AccessModeEvaluator(self.store, self.merger)
        self.acl = AclBuilder(self.merger)
        self.locks = locks or BucketLocks()
        self._serialize_writes = serialize_writes

    # ------------------------------------------------------------------
    # Whole-document operations
    # ------------------------------------------------------------------

    async def get_policy(self, bucket: str) -> PolicyDocument:
        return await self.store.get(bucket)

    async def set_policy(
        self, bucket: str, statements: Iterable[StatementInput], *, deleted: Collection[int] = ()
    ) -> PolicyDocument:
        """Merge *statements* into the bucket policy (newest first) and return what was written.

        Indexes in *deleted* flag incoming statements as deleted: they are
        neither written nor allowed to supersede stored statements.
        """
        statements = list(statements or ())
        return await self._write(bucket, lambda: self.merger.merge(bucket, statements, deleted=deleted))

    async def remove_policy(self, bucket: str) -> None:
        await self._write(bucket, lambda: self.merger.remove_policy(bucket))

    async def policy_exists(self, bucket: str, statement: StatementInput) -> bool:
        return await self.merger.policy_exists(bucket, statement)

    # ------------------------------------------------------------------
    # Access modes
    # ------------------------------------------------------------------

    async def get_bucket_access_mode(self, bucket: str) -> AccessMode:
        return await self.evaluator.bucket_mode(bucket)

    async def set_bucket_access_mode(self, bucket: str, mode: AccessMode | str) -> PolicyDocument | None:
        return await self._write(bucket, lambda: self.acl.apply_bucket(bucket, mode))

    async def get_object_access_mode(self, bucket: str, object_name: str) -> AccessMode:
        return await self.evaluator.object_mode(bucket, object_name)

    async def set_object_access_mode(
        self, bucket: str, object_name: str, mode: AccessMode | str
    ) -> PolicyDocument:
        return await self._write(bucket, lambda: self.acl.apply_object(bucket, object_name, mode))

    async def remove_object_access_mode(self, bucket: str, object_name: str) -> AccessMode:
        """Forget the object's own statements and return its new effective mode."""
        return await self._write(bucket, lambda: self.evaluator.remove_object(bucket, object_name))

    # ------------------------------------------------------------------
    # Exclusive sections
    # ------------------------------------------------------------------

    @contextlib.asynccontextmanager
    async def exclusive(self, bucket: str) -> AsyncIterator[BucketPolicyEngine]:
        """Hold the bucket's lock across several calls.

        Do not combine with ``serialize_writes=True`` on the same engine:
        the lock is not re-entrant.
        """
        async with self.locks.exclusive(require_bucket(bucket)):
            yield self

    async def _write(self, bucket: str, operation: Callable[[], Awaitable[T]]) -> T:
        if not self._serialize_writes:
            return await operation()
        return await self.locks.run(require_bucket(bucket), operation)


__all__ = ["BucketPolicyEngine"]
