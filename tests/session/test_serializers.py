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
"""Tests for session serializers and strategy selection."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, datetime

import pytest

from mlsession.kernel.exceptions import SerializationError
from mlsession.session.cookie import SessionCookie
from mlsession.session.serializers import (
    FunctionSerializer,
    JsonSerializer,
    SessionSerializer,
    StructuredSerializer,
    flatten_cookie,
    select_serializer,
)


class TestSelectSerializer:
    def test_defaults_to_json(self):
        assert isinstance(select_serializer(), JsonSerializer)

    def test_stringify_wins_over_overrides(self):
        serializer = select_serializer(stringify=True, serialize=lambda s: s)
        assert isinstance(serializer, JsonSerializer)

    def test_stringify_false_selects_structured(self):
        assert isinstance(select_serializer(stringify=False), StructuredSerializer)

    def test_override_selects_function_serializer(self):
        serializer = select_serializer(deserialize=lambda d: d)
        assert isinstance(serializer, FunctionSerializer)
        assert isinstance(serializer, SessionSerializer)


class TestJsonSerializer:
    def test_serialize_produces_json_string(self):
        raw = JsonSerializer().serialize({"cookie": {}, "user": "alice"})
        assert json.loads(raw) == {"cookie": {}, "user": "alice"}

    def test_deserialize_reads_session_field(self):
        document = {"sid": "x", "session": '{"user": "alice"}', "expires": "2030-01-01T00:00:00+00:00"}
        assert JsonSerializer().deserialize(document) == {"user": "alice"}

    def test_cookie_object_flattened(self):
        expires = datetime(2030, 1, 1, tzinfo=UTC)
        raw = JsonSerializer().serialize({"cookie": SessionCookie(expires=expires)})
        assert json.loads(raw)["cookie"]["expires"] == "2030-01-01T00:00:00+00:00"

    def test_unserializable_raises(self):
        with pytest.raises(SerializationError):
            JsonSerializer().serialize({"x": {1, 2}})

    def test_corrupt_document_raises(self):
        with pytest.raises(SerializationError):
            JsonSerializer().deserialize({"session": "{not json"})

    def test_structured_document_rejected(self):
        with pytest.raises(SerializationError):
            JsonSerializer().deserialize({"session": {"user": "alice"}})


class TestStructuredSerializer:
    def test_shallow_copy(self):
        items = [1, 2]
        session = {"cookie": {"path": "/"}, "items": items}
        result = StructuredSerializer().serialize(session)
        assert result == session
        assert result is not session
        assert result["items"] is items

    def test_cookie_converted_with_to_dict(self):
        cookie = SessionCookie(path="/app")
        result = StructuredSerializer().serialize({"cookie": cookie})
        assert result["cookie"] == cookie.to_dict()

    def test_cookie_converted_with_to_json(self):
        class Cookie:
            def to_json(self):
                return {"original_max_age": 60}

        result = StructuredSerializer().serialize({"cookie": Cookie()})
        assert result["cookie"] == {"original_max_age": 60}

    def test_only_cookie_key_flattened(self):
        cookie = SessionCookie()
        result = StructuredSerializer().serialize({"other": cookie})
        assert result["other"] is cookie

    def test_non_mapping_rejected(self):
        with pytest.raises(SerializationError):
            StructuredSerializer().serialize(["not", "a", "session"])

    def test_deserialize_prefers_session_then_content(self):
        s = StructuredSerializer()
        assert s.deserialize({"session": {"a": 1}, "content": {"b": 2}}) == {"a": 1}
        assert s.deserialize({"content": {"b": 2}}) == {"b": 2}
        assert s.deserialize({"a": 1}) == {"a": 1}

    def test_empty_session_preserved(self):
        assert StructuredSerializer().deserialize({"session": {}, "content": {"b": 2}}) == {}


class TestFunctionSerializer:
    def test_errors_wrapped(self):
        def bad(_):
            raise KeyError("missing")

        serializer = FunctionSerializer(serialize=bad, deserialize=bad)
        with pytest.raises(SerializationError):
            serializer.serialize({})
        with pytest.raises(SerializationError):
            serializer.deserialize({})


class TestFlattenCookie:
    def test_dataclass_without_conversion_method(self):
        @dataclass
        class Cookie:
            path: str = "/"

        assert flatten_cookie(Cookie()) == {"path": "/"}

    def test_mapping_and_none_untouched(self):
        cookie = {"path": "/"}
        assert flatten_cookie(cookie) is cookie
        assert flatten_cookie(None) is None
