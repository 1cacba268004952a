"""Policy – resource identity rules.

A resource string is *root* for a bucket when it names the whole bucket
(``*``, ``arn:aws:s3:::*``, ``arn:aws:s3:::<bucket>*`` or
``arn:aws:s3:::<bucket>/*``).  Every root spelling belongs to one identity
class; all other resources are compared as case-insensitive strings.
"""
from __future__ import annotations

from oss_policy.kernel.errors import ValidationError

ARN_PREFIX = "arn:aws:s3:::"
BUCKET_ROOT_ARN = f"{ARN_PREFIX}*"


def canonical(value: str) -> str:
    """Lower-case form used for every resource/action/effect comparison."""
    return value.lower()


def require_bucket(bucket: str | None) -> str:
    if not bucket or not bucket.strip():
        raise ValidationError.for_field("bucket", "Bucket name must not be empty")
    return bucket


def root_resources(bucket: str) -> frozenset[str]:
    """All canonical spellings that denote the whole of *bucket*."""
    name = canonical(bucket)
    return frozenset({"*", BUCKET_ROOT_ARN, f"{ARN_PREFIX}{name}*", f"{ARN_PREFIX}{name}/*"})


def is_root(bucket: str, resource: str) -> bool:
    return canonical(resource) in root_resources(bucket)


def identity_equals(bucket: str, first: str, second: str) -> bool:
    """True when *first* and *second* protect the same scope of *bucket*."""
    if is_root(bucket, first) and is_root(bucket, second):
        return True
    return canonical(first) == canonical(second)


def format_object_name(object_name: str | None) -> str:
    """Strip a leading ``/``; empty names and the bare ``/`` are rejected."""
    if not object_name or object_name == "/":
        raise ValidationError.for_field("object_name", "Object name must not be empty")
    name = object_name.lstrip("/")
    if not name:
        raise ValidationError.for_field("object_name", "Object name must not be empty")
    return name


def object_path(bucket: str, object_name: str) -> str:
    """``<bucket>/<object>``; names already qualified with the bucket are kept."""
    bucket = require_bucket(bucket)
    name = format_object_name(object_name)
    if name.startswith(f"{bucket}/"):
        return name
    return f"{bucket}/{name}"


def object_arn(bucket: str, object_name: str) -> str:
    return f"{ARN_PREFIX}{object_path(bucket, object_name)}"


def path_keys(path: str) -> frozenset[str]:
    """Canonical resource strings that address *path* exactly."""
    key = canonical(path)
    return frozenset({key, f"{ARN_PREFIX}{key}"})


__all__ = [
    "ARN_PREFIX",
    "BUCKET_ROOT_ARN",
    "canonical",
    "format_object_name",
    "identity_equals",
    "is_root",
    "object_arn",
    "object_path",
    "path_keys",
    "require_bucket",
    "root_resources",
]
