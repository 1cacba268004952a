"""
oss_policy – access-policy engine for S3-compatible object storage.

Import path convention::

    from oss_policy.policy import AccessMode, BucketPolicyEngine, Statement
    from oss_policy.adapters.minio import build_policy_engine
    from oss_policy.config import OssSettings, EnvSettingsLoader
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
