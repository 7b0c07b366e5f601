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
"""Logging contract for the session store and its clients."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from mlsession.core.config import Config


@runtime_checkable
class LoggingPort(Protocol):
    """Routes the store's log records to a renderer.

    The store and its document clients log through ``logging.getLogger(__name__)``
    (``mlsession.session.adapters.marklogic``, ``mlsession.client.adapters.httpx_adapter``);
    an implementation decides how those records are formatted and filtered.
    """

    def configure(self, config: Config) -> None:
        """Apply ``mlsession.logging.format`` and ``mlsession.logging.level``."""
        ...

    def get_logger(self, name: str) -> Any: ...

    def set_level(self, name: str, level: str) -> None:
        """Set the level of one logger, e.g. ``mlsession.client`` to ``DEBUG``."""
        ...
