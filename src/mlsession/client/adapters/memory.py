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
"""In-memory document store client."""

from __future__ import annotations

import asyncio
import copy
from collections.abc import Sequence
from typing import Any

from mlsession.kernel.exceptions import DocumentNotFoundError


class InMemoryDocumentClient:
    """Document client holding documents in a dict, guarded by an asyncio.Lock.

    Suitable for development, testing, and single-process applications.
    Contents are deep-copied on the way in and out so callers never share
    state with the stored document.
    """

    def __init__(self) -> None:
        self._documents: dict[str, tuple[dict[str, Any], frozenset[str]]] = {}
        self._lock = asyncio.Lock()

    async def read(self, uri: str) -> dict[str, Any]:
        async with self._lock:
            entry = self._documents.get(uri)
            if entry is None:
                raise DocumentNotFoundError(f"Document not found: {uri}", context={"uri": uri, "status_code": 404})
            return copy.deepcopy(entry[0])

    async def write(self, uri: str, content: dict[str, Any], *, collections: Sequence[str] = ()) -> None:
        async with self._lock:
            self._documents[uri] = (copy.deepcopy(content), frozenset(collections))

    async def remove(self, uri: str) -> None:
        async with self._lock:
            if self._documents.pop(uri, None) is None:
                raise DocumentNotFoundError(f"Document not found: {uri}", context={"uri": uri, "status_code": 404})

    async def count(self, collection: str) -> int:
        async with self._lock:
            return sum(1 for _, tags in self._documents.values() if collection in tags)

    async def remove_collection(self, collection: str) -> None:
        async with self._lock:
            for uri in [u for u, (_, tags) in self._documents.items() if collection in tags]:
                del self._documents[uri]

    async def close(self) -> None:
        """No-op -- nothing to release."""

    def uris(self) -> list[str]:
        """Return the stored document URIs, sorted."""
        return sorted(self._documents)
