"""Config – 12-factor settings and loaders."""

from oss_policy.config.settings import (
    DotenvSettingsLoader,
    EnvSettingsLoader,
    OssSettings,
    Settings,
    SettingsLoader,
)
from oss_policy.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "OssSettings",
    "Settings",
    "SettingsLoader",
]
