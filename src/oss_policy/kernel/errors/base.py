"""Root error class for the oss-policy error hierarchy."""

from __future__ import annotations

import json
from typing import Any


class BaseError(Exception):
    """Root of the error hierarchy.

    Every error raised by the engine, its adapters or its configuration layer
    derives from this class, so callers can tell "ours" from SDK failures
    with a single ``except BaseError``.

    Args:
        message: Human-readable description.
        code: Machine-readable slug (defaults to ``default_code``).
        detail: Serialisable context such as ``bucket`` or ``resource``.
        cause: Original exception; also chained as ``__cause__``.
    """

    default_code: str = "base_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.detail: dict[str, Any] = dict(detail or {})
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "detail": self.detail,
        }
        if self.cause is not None:
            payload["cause"] = repr(self.cause)
        return payload

    def log_fields(self) -> dict[str, Any]:
        """Flat key/values for a structured log event.

        ``detail`` keys are merged in without overriding the ``error_*`` keys.
        """
        fields: dict[str, Any] = {**self.detail}
        fields["error_code"] = self.code
        fields["error"] = self.message
        if self.cause is not None:
            fields["error_cause"] = type(self.cause).__name__
        return fields


__all__ = ["BaseError"]
