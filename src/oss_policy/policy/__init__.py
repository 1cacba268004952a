"""Policy engine – bucket/object access policies over a whole-document backend."""
from oss_policy.policy.acl import AclBuilder, bucket_statements, object_statements
from oss_policy.policy.engine import BucketPolicyEngine
from oss_policy.policy.evaluator import AccessModeEvaluator, bucket_mode_of, object_mode_of
from oss_policy.policy.locks import BucketLocks
from oss_policy.policy.merger import MergeResult, PolicyMerger, merge_statements
from oss_policy.policy.models import AccessMode, Effect, PolicyDocument, Principal, Statement
from oss_policy.policy.normalizer import ScopedStatement, normalize
from oss_policy.policy.ports import PolicyBackend
from oss_policy.policy.resources import identity_equals, is_root
from oss_policy.policy.store import PolicyStore

__all__ = [
    "AccessMode",
    "AccessModeEvaluator",
    "AclBuilder",
    "BucketLocks",
    "BucketPolicyEngine",
    "Effect",
    "MergeResult",
    "PolicyBackend",
    "PolicyDocument",
    "PolicyMerger",
    "PolicyStore",
    "Principal",
    "ScopedStatement",
    "Statement",
    "bucket_mode_of",
    "bucket_statements",
    "identity_equals",
    "is_root",
    "merge_statements",
    "normalize",
    "object_mode_of",
    "object_statements",
]
