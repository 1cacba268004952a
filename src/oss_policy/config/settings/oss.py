"""Config settings – connection settings for the object-storage backend."""
from __future__ import annotations

import dataclasses
from typing import ClassVar

from oss_policy.config.settings.base import Settings
from oss_policy.config.validation import InvalidSettingValueError

DEFAULT_REGION = "us-east-1"
DEFAULT_POLICY_VERSION = "2024-10-22"


@dataclasses.dataclass(frozen=True)
class OssSettings(Settings):
    """Endpoint, credentials and policy constants, read from ``OSS_*`` variables.

    ``policy_version`` is the ``Version`` written into every saved policy
    document; values read back from the backend are never preserved.
    """

    _prefix: ClassVar[str] = "OSS"

    endpoint: str
    access_key: str = ""
    secret_key: str = dataclasses.field(default="", repr=False)
    region: str = DEFAULT_REGION
    secure: bool = False
    policy_version: str = DEFAULT_POLICY_VERSION

    def _validate(self) -> None:
        if not self.endpoint or not self.endpoint.strip():
            raise InvalidSettingValueError("endpoint", self.endpoint, "must not be blank")
        if not self.region:
            object.__setattr__(self, "region", DEFAULT_REGION)
        if not self.policy_version:
            raise InvalidSettingValueError("policy_version", self.policy_version, "must not be blank")


__all__ = ["DEFAULT_POLICY_VERSION", "DEFAULT_REGION", "OssSettings"]
