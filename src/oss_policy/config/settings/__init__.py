"""Config settings – 12-factor env-based configuration."""
from oss_policy.config.settings.base import Settings
from oss_policy.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader
from oss_policy.config.settings.oss import DEFAULT_POLICY_VERSION, DEFAULT_REGION, OssSettings

__all__ = [
    "DEFAULT_POLICY_VERSION",
    "DEFAULT_REGION",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "OssSettings",
    "Settings",
    "SettingsLoader",
]
