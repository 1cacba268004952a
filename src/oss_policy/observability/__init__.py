"""Observability – structured logging."""
from oss_policy.observability.logging import (
    DEFAULT_SENSITIVE_FIELDS,
    JsonLoggerFactory,
    RedactingProcessor,
    SensitiveFieldsFilter,
    get_logger,
)

__all__ = [
    "DEFAULT_SENSITIVE_FIELDS",
    "JsonLoggerFactory",
    "RedactingProcessor",
    "SensitiveFieldsFilter",
    "get_logger",
]
