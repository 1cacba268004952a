"""Config settings – Settings base class."""
from __future__ import annotations

import dataclasses
from typing import Any, ClassVar, Mapping, TypeVar

S = TypeVar("S", bound="Settings")


@dataclasses.dataclass(frozen=True)
class Settings:
    """Immutable settings read from ``<_prefix>_<FIELD>`` variables.

    Subclasses override :meth:`_validate`; it runs on construction and on
    every :meth:`replace`.
    """

    _prefix: ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Override to add cross-field validation."""

    @classmethod
    def from_env(cls: type[S], environ: Mapping[str, str] | None = None) -> S:
        from oss_policy.config.settings.loaders import EnvSettingsLoader

        return EnvSettingsLoader(environ).load(cls)

    def replace(self: S, **changes: Any) -> S:
        return dataclasses.replace(self, **changes)


__all__ = ["Settings"]
