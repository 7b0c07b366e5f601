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
"""Session serializers.

Two strategies turn a session payload into the ``session`` field of a stored
document and back:

- :class:`JsonSerializer` (default) stores the payload as a JSON string.
- :class:`StructuredSerializer` stores it as a JSON object, flattening the
  cookie descriptor through its ``to_dict()`` conversion.

Deserializers receive the whole stored document and return the payload.
"""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Callable, Mapping
from datetime import date, datetime
from typing import Any, Protocol, runtime_checkable

from mlsession.kernel.exceptions import SerializationError

SerializeFn = Callable[[Any], Any]
DeserializeFn = Callable[[Mapping[str, Any]], Any]


@runtime_checkable
class SessionSerializer(Protocol):
    """Encode a session payload for storage; decode it from a stored document."""

    def serialize(self, session: Any) -> Any: ...

    def deserialize(self, document: Mapping[str, Any]) -> Any: ...


def flatten_cookie(cookie: Any) -> Any:
    """Convert a cookie object to plain data via its canonical conversion, if it has one."""
    if cookie is None or isinstance(cookie, Mapping):
        return cookie
    for name in ("to_dict", "to_json"):
        convert = getattr(cookie, name, None)
        if callable(convert):
            return convert()
    if dataclasses.is_dataclass(cookie) and not isinstance(cookie, type):
        return dataclasses.asdict(cookie)
    return cookie


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime | date):
        return value.isoformat()
    flattened = flatten_cookie(value)
    if flattened is not value:
        return flattened
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class JsonSerializer:
    """Stores the payload as a JSON string; round-trips any JSON-representable payload."""

    def serialize(self, session: Any) -> str:
        try:
            return json.dumps(session, default=_json_default)
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"Session is not JSON serializable: {exc}") from exc

    def deserialize(self, document: Mapping[str, Any]) -> Any:
        raw = document.get("session")
        if raw is None:
            return None
        if not isinstance(raw, str | bytes):
            raise SerializationError(
                f"Expected a JSON string in the session field, got {type(raw).__name__}"
            )
        try:
            return json.loads(raw)
        except ValueError as exc:
            raise SerializationError(f"Stored session is not valid JSON: {exc}") from exc


class StructuredSerializer:
    """Stores the payload as a structured object, one shallow copy per write."""

    def serialize(self, session: Any) -> dict[str, Any]:
        if not isinstance(session, Mapping):
            raise SerializationError(f"Expected a mapping session, got {type(session).__name__}")
        result: dict[str, Any] = {}
        for key, value in session.items():
            result[key] = flatten_cookie(value) if key == "cookie" else value
        return result

    def deserialize(self, document: Mapping[str, Any]) -> Any:
        for key in ("session", "content"):
            if key in document:
                return document[key]
        return dict(document)


class FunctionSerializer:
    """Wraps caller-supplied functions; a missing function falls back to *base*."""

    def __init__(
        self,
        serialize: SerializeFn | None = None,
        deserialize: DeserializeFn | None = None,
        base: SessionSerializer | None = None,
    ) -> None:
        base = base or StructuredSerializer()
        self._serialize = serialize or base.serialize
        self._deserialize = deserialize or base.deserialize

    def serialize(self, session: Any) -> Any:
        try:
            return self._serialize(session)
        except SerializationError:
            raise
        except Exception as exc:
            raise SerializationError(f"Session serializer failed: {exc}") from exc

    def deserialize(self, document: Mapping[str, Any]) -> Any:
        try:
            return self._deserialize(document)
        except SerializationError:
            raise
        except Exception as exc:
            raise SerializationError(f"Session deserializer failed: {exc}") from exc


def select_serializer(
    *,
    stringify: bool | None = None,
    serialize: SerializeFn | None = None,
    deserialize: DeserializeFn | None = None,
) -> SessionSerializer:
    """Pick the serialization strategy for a store.

    JSON strings are used when *stringify* is true, or when no option at all
    is given. Otherwise the structured strategy applies, with *serialize* and
    *deserialize* each replacing its counterpart independently.
    """
    if stringify or (stringify is None and serialize is None and deserialize is None):
        return JsonSerializer()
    if serialize is None and deserialize is None:
        return StructuredSerializer()
    return FunctionSerializer(serialize, deserialize)
