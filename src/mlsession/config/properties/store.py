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
"""Session store configuration properties."""

from __future__ import annotations

import dataclasses
import hashlib
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from mlsession.core.config import config_properties
from mlsession.kernel.exceptions import ConfigurationError

DEFAULT_TTL_MS = 1000 * 60 * 60 * 24 * 14  # 14 days
DEFAULT_HASH_SALT = "mlsession"
DEFAULT_HASH_ALGORITHM = "sha1"

_AUTH_TYPES = ("digest", "basic")

# camelCase spellings accepted alongside the field names.
_OPTION_ALIASES = {
    "default_expiration_time": "ttl",
    "defaultExpirationTime": "ttl",
    "baseUri": "base_uri",
    "authType": "auth_type",
}


@dataclass(frozen=True)
class HashProperties:
    """Session id hashing: ``hexdigest(algorithm, salt + sid)``.

    A ``None`` salt or algorithm (e.g. ``salt: ~`` in YAML) takes the default.
    """

    salt: str = DEFAULT_HASH_SALT
    algorithm: str = DEFAULT_HASH_ALGORITHM

    def __post_init__(self) -> None:
        if self.salt is None:
            object.__setattr__(self, "salt", DEFAULT_HASH_SALT)
        if self.algorithm is None:
            object.__setattr__(self, "algorithm", DEFAULT_HASH_ALGORITHM)
        for name in ("salt", "algorithm"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise ConfigurationError(
                    f"Hash {name} must be a non-empty string, got {value!r}",
                    context={name: value},
                )
        if self.algorithm not in hashlib.algorithms_available:
            raise ConfigurationError(
                f"Unknown digest algorithm '{self.algorithm}'",
                context={"algorithm": self.algorithm},
            )


@config_properties(prefix="mlsession.store")
@dataclass(frozen=True)
class StoreProperties:
    """Configuration for the MarkLogic session store (mlsession.store.*).

    ``ttl`` is in milliseconds. It is added to the current time when a
    session's cookie carries no expiry of its own.
    """

    host: str = "127.0.0.1"
    port: int = 8000
    database: str | None = None
    user: str = "admin"
    password: str = "admin"
    auth_type: str = "digest"
    ssl: bool = False
    timeout: float = 30.0
    collection: str = "sessions"
    base_uri: str | None = None
    ttl: int = DEFAULT_TTL_MS
    hash: HashProperties | None = None
    stringify: bool | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "hash", _normalize_hash(self.hash))
        self._validate()

    def _validate(self) -> None:
        if not isinstance(self.host, str) or not self.host.strip():
            raise ConfigurationError("Store host must be a non-empty string", context={"host": self.host})
        if isinstance(self.port, bool) or not isinstance(self.port, int) or not 1 <= self.port <= 65535:
            raise ConfigurationError(f"Store port must be in 1..65535, got {self.port!r}", context={"port": self.port})
        if self.auth_type not in _AUTH_TYPES:
            raise ConfigurationError(
                f"Unsupported auth type '{self.auth_type}', expected one of {', '.join(_AUTH_TYPES)}",
                context={"auth_type": self.auth_type},
            )
        if not isinstance(self.collection, str) or not self.collection.strip():
            raise ConfigurationError("Collection name must be a non-empty string")
        if isinstance(self.ttl, bool) or not isinstance(self.ttl, int | float) or self.ttl <= 0:
            raise ConfigurationError(f"ttl must be a positive number of milliseconds, got {self.ttl!r}")
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout!r}")

    @property
    def scheme(self) -> str:
        return "https" if self.ssl else "http"

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None = None) -> StoreProperties:
        """Merge caller options over the defaults and return new properties.

        Pure: *options* is not modified. Unknown option names raise
        :class:`ConfigurationError`.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in (options or {}).items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in known:
                raise ConfigurationError(f"Unknown store option '{key}'", context={"option": key})
            if value is None:
                continue
            kwargs[name] = value
        try:
            return cls(**kwargs)
        except TypeError as exc:
            raise ConfigurationError(f"Invalid store options: {exc}") from exc

    def with_options(self, **overrides: Any) -> StoreProperties:
        """Return a copy with *overrides* applied; this instance is unchanged."""
        return dataclasses.replace(self, **{_OPTION_ALIASES.get(k, k): v for k, v in overrides.items()})


def _normalize_hash(value: Any) -> HashProperties | None:
    if value is None or value is False:
        return None
    if isinstance(value, HashProperties):
        return value
    if value is True or (isinstance(value, str) and value.lower() in ("true", "1", "yes")):
        return HashProperties()
    if isinstance(value, str) and value.lower() in ("false", "0", "no", ""):
        return None
    if isinstance(value, Mapping):
        unknown = set(value) - {"salt", "algorithm"}
        if unknown:
            raise ConfigurationError(f"Unknown hash option(s): {', '.join(sorted(unknown))}")
        return HashProperties(salt=value.get("salt"), algorithm=value.get("algorithm"))
    raise ConfigurationError(f"Invalid hash option {value!r}")
