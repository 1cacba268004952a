"""MinIO adapter – wiring helpers from :class:`OssSettings`."""
from __future__ import annotations

from typing import Any

from oss_policy.adapters.minio.backend import MinioPolicyBackend
from oss_policy.adapters.minio.client import create_minio_client
from oss_policy.adapters.minio.storage import MinioStorageManager
from oss_policy.config.settings import OssSettings
from oss_policy.policy.engine import BucketPolicyEngine


def build_policy_engine(
    settings: OssSettings,
    *,
    client: Any = None,
    serialize_writes: bool = False,
) -> BucketPolicyEngine:
    """Engine over a MinIO backend; *client* defaults to one built from *settings*."""
    backend = MinioPolicyBackend(client if client is not None else create_minio_client(settings))
    return BucketPolicyEngine(
        backend,
        policy_version=settings.policy_version,
        serialize_writes=serialize_writes,
    )


def build_storage_manager(
    settings: OssSettings,
    *,
    client: Any = None,
    serialize_writes: bool = False,
) -> MinioStorageManager:
    client = client if client is not None else create_minio_client(settings)
    return MinioStorageManager(
        client,
        build_policy_engine(settings, client=client, serialize_writes=serialize_writes),
        endpoint=settings.endpoint,
        secure=settings.secure,
        region=settings.region,
    )


__all__ = ["build_policy_engine", "build_storage_manager"]
