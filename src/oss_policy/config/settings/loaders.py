"""Config settings – EnvSettingsLoader, DotenvSettingsLoader.

Variables are named ``<PREFIX>_<FIELD>`` in upper case, e.g. ``OSS_ENDPOINT``
or ``OSS_POLICY_VERSION`` for :class:`~oss_policy.config.settings.OssSettings`.
"""
from __future__ import annotations

import abc
import dataclasses
import os
import typing
from typing import Any, Mapping, TypeVar

from oss_policy.config.settings.base import Settings
from oss_policy.config.validation import ConfigError, InvalidSettingValueError, MissingRequiredSettingError

T = TypeVar("T", bound=Settings)

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off", ""})


def env_key(settings_class: type[Settings], field_name: str) -> str:
    prefix = getattr(settings_class, "_prefix", "")
    return f"{prefix}_{field_name}".upper().lstrip("_")


class SettingsLoader(abc.ABC):
    """Port: load settings from an external source."""

    @abc.abstractmethod
    def load(self, settings_class: type[T]) -> T: ...


class EnvSettingsLoader(SettingsLoader):
    """Build settings from a mapping of variables, ``os.environ`` by default."""

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ

    def load(self, settings_class: type[T]) -> T:
        environ = os.environ if self._environ is None else self._environ
        hints = typing.get_type_hints(settings_class)
        kwargs: dict[str, Any] = {}

        for field in dataclasses.fields(settings_class):  # type: ignore[arg-type]
            key = env_key(settings_class, field.name)
            raw = environ.get(key)
            if raw is None:
                if field.default is dataclasses.MISSING and field.default_factory is dataclasses.MISSING:  # type: ignore[misc]
                    raise MissingRequiredSettingError(key)
                continue
            kwargs[field.name] = self._coerce(key, raw, hints.get(field.name, str))

        try:
            return settings_class(**kwargs)
        except ConfigError:
            raise
        except Exception as exc:
            raise ConfigError(f"Failed to load {settings_class.__name__}: {exc}", cause=exc) from exc

    @staticmethod
    def _coerce(key: str, raw: str, hint: Any) -> Any:
        if hint is bool:
            lowered = raw.strip().lower()
            if lowered in _TRUE:
                return True
            if lowered in _FALSE:
                return False
            raise InvalidSettingValueError(key, raw, "expected a boolean")
        if hint in (int, float):
            try:
                return hint(raw)
            except ValueError as exc:
                raise InvalidSettingValueError(key, raw, f"expected {hint.__name__}") from exc
        return raw


class DotenvSettingsLoader(SettingsLoader):
    """Read a ``.env`` file layered with ``os.environ``.

    Process variables win unless ``override=True``.  ``os.environ`` itself is
    never modified.
    """

    def __init__(self, env_file: str = ".env", override: bool = False) -> None:
        self._env_file = env_file
        self._override = override

    def load(self, settings_class: type[T]) -> T:
        try:
            from dotenv import dotenv_values  # type: ignore[import-untyped]
        except ImportError as exc:
            raise ImportError("Install 'oss-policy[dotenv]' (python-dotenv) to use DotenvSettingsLoader") from exc
        file_values = {k: v for k, v in dotenv_values(self._env_file).items() if v is not None}
        if self._override:
            merged = {**os.environ, **file_values}
        else:
            merged = {**file_values, **os.environ}
        return EnvSettingsLoader(merged).load(settings_class)


__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "SettingsLoader", "env_key"]
