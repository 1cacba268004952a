"""Observability – SensitiveFieldsFilter.

Redacts credential-bearing keys and the signature/credential query
parameters of presigned URLs before a log event is rendered.
"""
from __future__ import annotations

import re
from typing import Any

REDACTED = "[REDACTED]"

DEFAULT_SENSITIVE_FIELDS: frozenset[str] = frozenset({
    "access_key", "secret_key", "session_token", "token",
    "password", "authorization", "api_key",
})

# X-Amz-Signature / X-Amz-Credential / X-Amz-Security-Token in presigned URLs
_PRESIGNED_PARAM = re.compile(r"(?i)(x-amz-(?:signature|credential|security-token)=)[^&\s]+")


class SensitiveFieldsFilter:
    """Replace values of sensitive keys with ``[REDACTED]``.

    Key matching is case-insensitive.  String values anywhere in the event are
    scrubbed of presigned-URL secrets; nested dicts and lists are walked.
    """

    REDACTED = REDACTED

    def __init__(self, sensitive_fields: frozenset[str] | None = None) -> None:
        self._fields = frozenset(f.lower() for f in (sensitive_fields or DEFAULT_SENSITIVE_FIELDS))

    def is_sensitive(self, key: str) -> bool:
        return key.lower() in self._fields

    def redact(self, data: dict[str, Any]) -> dict[str, Any]:
        """Top-level keys only."""
        return {k: (REDACTED if self.is_sensitive(k) else v) for k, v in data.items()}

    def redact_deep(self, data: dict[str, Any]) -> dict[str, Any]:
        return {k: (REDACTED if self.is_sensitive(k) else self._scrub(v)) for k, v in data.items()}

    def _scrub(self, value: Any) -> Any:
        if isinstance(value, str):
            return _PRESIGNED_PARAM.sub(lambda m: m.group(1) + REDACTED, value)
        if isinstance(value, dict):
            return self.redact_deep(value)
        if isinstance(value, list):
            return [self._scrub(item) for item in value]
        if isinstance(value, tuple):
            return tuple(self._scrub(item) for item in value)
        return value


__all__ = ["DEFAULT_SENSITIVE_FIELDS", "REDACTED", "SensitiveFieldsFilter"]
