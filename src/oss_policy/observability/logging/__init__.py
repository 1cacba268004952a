"""Observability – structured logging helpers."""
from oss_policy.observability.logging.factory import JsonLoggerFactory
from oss_policy.observability.logging.filters import DEFAULT_SENSITIVE_FIELDS, REDACTED, SensitiveFieldsFilter
from oss_policy.observability.logging.processors import RedactingProcessor, get_logger

__all__ = [
    "DEFAULT_SENSITIVE_FIELDS",
    "JsonLoggerFactory",
    "REDACTED",
    "RedactingProcessor",
    "SensitiveFieldsFilter",
    "get_logger",
]
