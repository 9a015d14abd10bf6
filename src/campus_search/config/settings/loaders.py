"""Config settings – loaders that build a settings dataclass from the process environment.

Each field ``redis_url`` on a class with ``_prefix = "SEARCH"`` is read from
``SEARCH_REDIS_URL``. Raw strings are converted according to the field's
annotation; unannotated or unknown types stay strings.
"""
from __future__ import annotations

import abc
import dataclasses
import os
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from campus_search.config.settings.base import Settings
from campus_search.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

T = TypeVar("T", bound=Settings)

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off", ""})


def _to_bool(raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise ValueError("expected one of 1/0, true/false, yes/no, on/off")


def _to_list(raw: str) -> list[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


# annotations arrive as strings under ``from __future__ import annotations``
_CONVERTERS: dict[str, Callable[[str], Any]] = {
    "bool": _to_bool,
    "int": int,
    "float": float,
    "str": str,
}


def env_key_for(settings_class: type[Settings], field_name: str) -> str:
    """Return the environment variable name backing *field_name*."""
    prefix = getattr(settings_class, "_prefix", "")
    return f"{prefix}_{field_name}".upper().lstrip("_")


def _converter_for(annotation: Any) -> Callable[[str], Any]:
    name = annotation if isinstance(annotation, str) else getattr(annotation, "__name__", "")
    name = name.replace(" ", "").removesuffix("|None")
    if name.startswith("list[") or getattr(annotation, "__origin__", None) is list:
        return _to_list
    return _CONVERTERS.get(name, str)


def _is_required(field: dataclasses.Field[Any]) -> bool:
    return field.default is dataclasses.MISSING and field.default_factory is dataclasses.MISSING


class SettingsLoader(abc.ABC):
    """Port: build a settings instance from some external source."""

    @abc.abstractmethod
    def load(self, settings_class: type[T]) -> T: ...


class EnvSettingsLoader(SettingsLoader):
    """Read ``<PREFIX>_<FIELD>`` variables from *environ* (``os.environ`` by default).

    Fields without a variable keep their dataclass default. A required field
    with no variable raises :class:`MissingRequiredSettingError`; a variable
    that cannot be converted raises :class:`InvalidSettingValueError` naming
    the variable. Range checks run in the settings class itself.
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ

    def load(self, settings_class: type[T]) -> T:
        environ = os.environ if self._environ is None else self._environ
        overrides: dict[str, Any] = {}
        for field in dataclasses.fields(settings_class):
            if not field.init:
                continue
            env_key = env_key_for(settings_class, field.name)
            raw = environ.get(env_key)
            if raw is None:
                if _is_required(field):
                    raise MissingRequiredSettingError(env_key)
                continue
            try:
                overrides[field.name] = _converter_for(field.type)(raw)
            except ValueError as exc:
                raise InvalidSettingValueError(env_key, raw, str(exc)) from exc

        try:
            return settings_class(**overrides)
        except ConfigError:
            raise
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Cannot build {settings_class.__name__}: {exc}", cause=exc) from exc


class DotenvSettingsLoader(SettingsLoader):
    """Merge a ``.env`` file into the process environment, then defer to :class:`EnvSettingsLoader`.

    Variables already exported in the process win unless *override* is set.
    """

    def __init__(self, env_file: str = ".env", override: bool = False) -> None:
        self._env_file = env_file
        self._override = override

    def load(self, settings_class: type[T]) -> T:
        from dotenv import load_dotenv

        load_dotenv(self._env_file, override=self._override)
        return EnvSettingsLoader().load(settings_class)


__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "SettingsLoader", "env_key_for"]
