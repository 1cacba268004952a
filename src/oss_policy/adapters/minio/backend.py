"""MinIO adapter – MinioPolicyBackend."""
from __future__ import annotations

import logging
from typing import Any

from oss_policy.adapters.minio.client import create_minio_client, is_missing_policy, run_blocking
from oss_policy.config.settings import OssSettings
from oss_policy.kernel.errors import PolicyNotFoundError
from oss_policy.policy.ports import PolicyBackend

logger = logging.getLogger(__name__)


class MinioPolicyBackend(PolicyBackend):
    """Bucket-policy primitive backed by the ``minio`` SDK.

    SDK calls are blocking and run on the default executor.  A cancelled
    caller stops waiting but the whole-document request itself either
    completes or never reaches the server.
    """

    def __init__(self, client: Any) -> None:
        self._client = client

    @classmethod
    def from_settings(cls, settings: OssSettings) -> "MinioPolicyBackend":
        return cls(create_minio_client(settings))

    async def get_policy(self, bucket: str) -> str:
        return await run_blocking(self._sync_get_policy, bucket)

    def _sync_get_policy(self, bucket: str) -> str:
        try:
            return self._client.get_bucket_policy(bucket_name=bucket)
        except Exception as exc:
            if is_missing_policy(exc):
                logger.debug("minio.policy_missing bucket=%s", bucket)
                raise PolicyNotFoundError(bucket, cause=exc) from exc
            raise

    async def set_policy(self, bucket: str, policy: str) -> None:
        await run_blocking(self._client.set_bucket_policy, bucket_name=bucket, policy=policy)

    async def delete_policy(self, bucket: str) -> None:
        await run_blocking(self._sync_delete_policy, bucket)

    def _sync_delete_policy(self, bucket: str) -> None:
        try:
            self._client.delete_bucket_policy(bucket_name=bucket)
        except Exception as exc:
            if is_missing_policy(exc):
                raise PolicyNotFoundError(bucket, cause=exc) from exc
            raise


__all__ = ["MinioPolicyBackend"]
