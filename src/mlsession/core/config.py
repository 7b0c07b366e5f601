# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Session store configuration: YAML/TOML files, ``MLSESSION_*`` env vars, dataclass binding."""

from __future__ import annotations

import dataclasses
import importlib.resources
import os
import tomllib
import types
import typing
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, TypeVar, get_type_hints

import yaml  # type: ignore[import-untyped]

T = TypeVar("T")

_CONFIG_PROPERTIES_ATTR = "__mlsession_config_prefix__"

_ENV_PREFIX = "MLSESSION_"

_FILE_STEM = "mlsession"
_FILE_SUFFIXES = (".yaml", ".yml", ".toml")


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Mark a dataclass as bindable to a configuration prefix.

    Usage:
        @config_properties(prefix="mlsession.store")
        @dataclass(frozen=True)
        class StoreProperties:
            host: str = "127.0.0.1"
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _CONFIG_PROPERTIES_ATTR, prefix)
        return cls

    return decorator


class Config:
    """Nested configuration read by dot-notation key.

    Priority (highest wins):
    1. Environment variables (``mlsession.store.host`` -> ``MLSESSION_STORE_HOST``)
    2. Configuration dict / YAML / TOML file values
    3. Packaged defaults (mlsession-defaults.yaml) and dataclass defaults
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}

    def to_dict(self) -> dict[str, Any]:
        """Return a shallow copy of the raw configuration data."""
        return dict(self._data)

    @classmethod
    def from_sources(cls, base_dir: str | Path, load_defaults: bool = True) -> Config:
        """Merge the packaged defaults with ``config/mlsession.*`` and then ``mlsession.*`` under *base_dir*."""
        base_dir = Path(base_dir)
        data = cls._load_packaged_defaults() if load_defaults else {}
        for search_dir in (base_dir / "config", base_dir):
            for suffix in _FILE_SUFFIXES:
                candidate = search_dir / f"{_FILE_STEM}{suffix}"
                if candidate.is_file():
                    data = _deep_merge(data, _load_file(candidate))
        return cls(data)

    @classmethod
    def from_file(cls, path: str | Path, load_defaults: bool = True) -> Config:
        """Merge a single YAML or TOML file over the packaged defaults.

        A missing file leaves only the defaults.
        """
        path = Path(path)
        data = cls._load_packaged_defaults() if load_defaults else {}
        if path.is_file():
            data = _deep_merge(data, _load_file(path))
        return cls(data)

    @staticmethod
    def _load_packaged_defaults() -> dict[str, Any]:
        defaults_file = importlib.resources.files("mlsession.resources").joinpath(
            "mlsession-defaults.yaml"
        )
        with importlib.resources.as_file(defaults_file) as p:
            return _load_file(p)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key; an ``MLSESSION_*`` env var wins over the data."""
        env_val = os.environ.get(_env_key(key))
        if env_val is not None:
            return env_val

        current: Any = self._data
        for part in key.split("."):
            if not isinstance(current, dict) or current.get(part) is None:
                return default
            current = current[part]
        return current

    def bind(self, config_cls: type[T]) -> T:
        """Bind configuration to a @config_properties dataclass.

        Scalar fields are read through :meth:`get`, so environment overrides
        apply to them. Nested dataclass fields bind from nested mappings.
        """
        prefix = getattr(config_cls, _CONFIG_PROPERTIES_ATTR, None)
        if prefix is None:
            raise ValueError(f"{config_cls.__name__} is not decorated with @config_properties")

        hints = get_type_hints(config_cls)
        kwargs: dict[str, Any] = {}
        for field in dataclasses.fields(config_cls):  # type: ignore[arg-type]
            value = self.get(f"{prefix}.{field.name}")
            if value is None:
                continue
            kwargs[field.name] = _coerce(value, hints.get(field.name))

        return config_cls(**kwargs)


def _env_key(key: str) -> str:
    # mlsession.store.auth-type -> MLSESSION_STORE_AUTH_TYPE
    base = key.removeprefix(f"{_FILE_STEM}.")
    return _ENV_PREFIX + base.upper().replace(".", "_").replace("-", "_")


def _load_file(path: Path) -> dict[str, Any]:
    if path.suffix == ".toml":
        with open(path, "rb") as f:
            return tomllib.load(f) or {}
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _coerce(value: Any, expected_type: Any) -> Any:
    """Convert a raw config value (often a string from env) to *expected_type*."""
    origin = typing.get_origin(expected_type)
    if origin is typing.Union or origin is types.UnionType:
        candidates = [a for a in typing.get_args(expected_type) if a is not type(None)]
        if len(candidates) == 1:
            expected_type = candidates[0]

    if dataclasses.is_dataclass(expected_type) and isinstance(value, Mapping):
        nested_hints = get_type_hints(expected_type)
        return expected_type(
            **{k: _coerce(v, nested_hints.get(k)) for k, v in value.items()}
        )
    if isinstance(value, str):
        if expected_type is int:
            return int(value)
        if expected_type is float:
            return float(value)
        if expected_type is bool:
            return value.lower() in ("true", "1", "yes")
    return value
