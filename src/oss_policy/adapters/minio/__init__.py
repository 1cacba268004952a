"""MinIO adapter – policy backend, storage façade and engine factory."""
from oss_policy.adapters.minio.backend import MinioPolicyBackend
from oss_policy.adapters.minio.client import create_minio_client, is_missing_policy
from oss_policy.adapters.minio.factory import build_policy_engine, build_storage_manager
from oss_policy.adapters.minio.storage import BucketInfo, MinioStorageManager, ObjectInfo

__all__ = [
    "BucketInfo",
    "MinioPolicyBackend",
    "MinioStorageManager",
    "ObjectInfo",
    "build_policy_engine",
    "build_storage_manager",
    "create_minio_client",
    "is_missing_policy",
]
