"""Policy – PolicyStore, a thin adapter over the backend policy primitive."""
from __future__ import annotations

from typing import Awaitable, TypeVar

from oss_policy.config.settings import DEFAULT_POLICY_VERSION
from oss_policy.kernel.errors import BaseError, PolicyBackendError, PolicyNotFoundError
from oss_policy.observability.logging import get_logger
from oss_policy.policy.models import PolicyDocument, Statement
from oss_policy.policy.ports import PolicyBackend
from oss_policy.policy.resources import require_bucket

logger = get_logger(__name__)

T = TypeVar("T")


class PolicyStore:
    """Reads, writes and deletes whole policy documents.

    The store never caches: every call goes to the backend.  ``version`` is
    stamped on every document written, and on the empty document returned
    for buckets without a policy.
    """

    def __init__(self, backend: PolicyBackend, version: str = DEFAULT_POLICY_VERSION) -> None:
        self._backend = backend
        self.version = version

    async def fetch(self, bucket: str, *, resource: str | None = None) -> PolicyDocument | None:
        """Return the stored document, or ``None`` if the bucket has none.

        ``resource`` names the object being operated on; it is only used to
        give a :class:`PolicyBackendError` its context.
        """
        bucket = require_bucket(bucket)
        try:
            raw = await self._call(bucket, self._backend.get_policy(bucket), resource)
        except PolicyNotFoundError:
            logger.debug("policy.absent", bucket=bucket)
            return None
        return PolicyDocument.from_json(raw, bucket=bucket)

    async def get(self, bucket: str, *, resource: str | None = None) -> PolicyDocument:
        """Return the stored document; a missing policy reads as empty."""
        document = await self.fetch(bucket, resource=resource)
        if document is None:
            return PolicyDocument.empty(self.version)
        return document

    async def set(
        self,
        bucket: str,
        statements: tuple[Statement, ...] | list[Statement],
        *,
        resource: str | None = None,
    ) -> PolicyDocument:
        bucket = require_bucket(bucket)
        document = PolicyDocument(self.version, tuple(statements))
        await self._call(bucket, self._backend.set_policy(bucket, document.to_json()), resource)
        logger.debug("policy.saved", bucket=bucket, statements=len(document.statements))
        return document

    async def remove(self, bucket: str) -> None:
        """Delete the whole document; removing an absent policy succeeds."""
        bucket = require_bucket(bucket)
        try:
            await self._call(bucket, self._backend.delete_policy(bucket))
        except PolicyNotFoundError:
            logger.debug("policy.absent", bucket=bucket)
            return
        logger.info("policy.removed", bucket=bucket)

    async def _call(self, bucket: str, awaitable: Awaitable[T], resource: str | None = None) -> T:
        try:
            return await awaitable
        except BaseError:
            raise
        except Exception as exc:
            error = PolicyBackendError(bucket, resource=resource, cause=exc)
            logger.warning("policy.backend_failed", **error.log_fields())
            raise error from exc


__all__ = ["PolicyStore"]
