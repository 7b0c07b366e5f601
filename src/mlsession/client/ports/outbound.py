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
"""Document store client port: the outbound contract the session store depends on."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class DocumentStoreClient(Protocol):
    """Abstract document database client.

    Documents are JSON objects addressed by URI and tagged with collections.
    ``read`` and ``remove`` raise ``DocumentNotFoundError`` for a missing URI;
    every other failure is a ``StoreError``.
    """

    async def read(self, uri: str) -> dict[str, Any]: ...

    async def write(self, uri: str, content: dict[str, Any], *, collections: Sequence[str] = ()) -> None: ...

    async def remove(self, uri: str) -> None: ...

    async def count(self, collection: str) -> int: ...

    async def remove_collection(self, collection: str) -> None: ...

    async def close(self) -> None: ...
