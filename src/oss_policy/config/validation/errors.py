"""Config validation errors."""
from __future__ import annotations

from oss_policy.kernel.errors import BaseError

# settings whose values never appear in messages
_SECRET_MARKERS = ("secret", "password", "token")


def _shown(setting_name: str, value: object) -> str:
    if any(marker in setting_name.lower() for marker in _SECRET_MARKERS):
        return "'***'"
    return repr(value)


class ConfigError(BaseError):
    """Configuration is invalid or could not be loaded."""

    default_code = "config_error"


class MissingRequiredSettingError(ConfigError):
    default_code = "missing_required_setting"

    def __init__(self, setting_name: str) -> None:
        super().__init__(f"Required setting '{setting_name}' is missing", detail={"setting": setting_name})
        self.setting_name = setting_name


class InvalidSettingValueError(ConfigError):
    """A setting is present but unusable; secret values are masked in the message."""

    default_code = "invalid_setting_value"

    def __init__(self, setting_name: str, value: object, reason: str) -> None:
        super().__init__(
            f"Setting '{setting_name}' has invalid value {_shown(setting_name, value)}: {reason}",
            detail={"setting": setting_name, "reason": reason},
        )
        self.setting_name = setting_name
        self.value = value
        self.reason = reason


__all__ = ["ConfigError", "InvalidSettingValueError", "MissingRequiredSettingError"]
