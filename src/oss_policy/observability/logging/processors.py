"""Observability – structlog processors and get_logger helper."""
from __future__ import annotations

from typing import Any

import structlog

from oss_policy.observability.logging.filters import SensitiveFieldsFilter


class RedactingProcessor:
    """structlog processor that runs every event through :class:`SensitiveFieldsFilter`.

    Usage::

        structlog.configure(processors=[RedactingProcessor(), ...])
    """

    def __init__(self, sensitive_fields: frozenset[str] | None = None) -> None:
        self._filter = SensitiveFieldsFilter(sensitive_fields)

    def __call__(
        self,
        logger: Any,           # noqa: ARG002
        method_name: str,      # noqa: ARG002
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        return self._filter.redact_deep(event_dict)


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a structlog logger, bound to *initial_values* when given.

    Modules call ``get_logger(__name__)`` at import time; the logger resolves
    its configuration lazily, so :meth:`JsonLoggerFactory.configure` may run
    afterwards.
    """
    logger = structlog.get_logger(name)
    return logger.bind(**initial_values) if initial_values else logger


__all__ = ["RedactingProcessor", "get_logger"]
