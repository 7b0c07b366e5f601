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
"""httpx-based MarkLogic REST client adapter."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from mlsession.config.properties.store import StoreProperties
from mlsession.kernel.exceptions import (
    ConfigurationError,
    DocumentNotFoundError,
    StoreConnectionError,
    StoreError,
)

_logger = logging.getLogger(__name__)

_DOCUMENTS_PATH = "/v1/documents"
_SEARCH_PATH = "/v1/search"


class MarkLogicRestClient:
    """Document store client backed by httpx.AsyncClient and the MarkLogic REST API.

    One connection pool is created per instance and reused for every call.
    No retries are attempted: each method issues exactly one request and
    translates the outcome into a return value or a ``StoreError``.
    """

    def __init__(
        self,
        base_url: str,
        *,
        auth: httpx.Auth | None = None,
        database: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        try:
            self._client = httpx.AsyncClient(
                base_url=base_url,
                auth=auth,
                timeout=timeout,
                transport=transport,
                headers={"Accept": "application/json"},
            )
        except (httpx.InvalidURL, TypeError, ValueError) as exc:
            raise ConfigurationError(
                f"Cannot create MarkLogic client for '{base_url}': {exc}",
                context={"base_url": base_url},
            ) from exc
        self._database = database

    @classmethod
    def from_properties(
        cls,
        props: StoreProperties,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> MarkLogicRestClient:
        """Build a client from store connection properties."""
        auth: httpx.Auth
        if props.auth_type == "basic":
            auth = httpx.BasicAuth(props.user, props.password)
        else:
            auth = httpx.DigestAuth(props.user, props.password)
        return cls(
            props.base_url,
            auth=auth,
            database=props.database,
            timeout=props.timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return str(self._client.base_url)

    async def read(self, uri: str) -> dict[str, Any]:
        """Fetch the JSON content of the document at *uri*."""
        response = await self._send("GET", _DOCUMENTS_PATH, {"uri": uri, "format": "json"}, uri=uri)
        try:
            content = response.json()
        except ValueError as exc:
            raise StoreError(
                f"Document '{uri}' is not JSON",
                context={"uri": uri, "status_code": response.status_code},
            ) from exc
        if not isinstance(content, dict):
            raise StoreError(f"Document '{uri}' is not a JSON object", context={"uri": uri})
        return content

    async def write(self, uri: str, content: dict[str, Any], *, collections: Sequence[str] = ()) -> None:
        """Create or fully replace the document at *uri*."""
        params: dict[str, Any] = {"uri": uri}
        if collections:
            params["collection"] = list(collections)
        await self._send("PUT", _DOCUMENTS_PATH, params, uri=uri, json=content)

    async def remove(self, uri: str) -> None:
        await self._send("DELETE", _DOCUMENTS_PATH, {"uri": uri}, uri=uri)

    async def count(self, collection: str) -> int:
        """Return the number of documents in *collection*."""
        response = await self._send(
            "GET", _SEARCH_PATH, {"collection": collection, "format": "json", "pageLength": 0}
        )
        try:
            return int(response.json()["total"])
        except (ValueError, KeyError, TypeError) as exc:
            raise StoreError(
                f"Unexpected search response counting collection '{collection}'",
                context={"collection": collection, "status_code": response.status_code},
            ) from exc

    async def remove_collection(self, collection: str) -> None:
        """Remove every document in *collection*."""
        await self._send("DELETE", _SEARCH_PATH, {"collection": collection})

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def _send(
        self,
        method: str,
        path: str,
        params: dict[str, Any],
        *,
        uri: str | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        if self._database:
            params = {**params, "database": self._database}
        _logger.debug("%s %s params=%s", method, path, params)
        try:
            response = await self._client.request(method, path, params=params, **kwargs)
        except httpx.TimeoutException as exc:
            _logger.warning("MarkLogic request timed out: %s %s", method, path)
            raise StoreConnectionError(
                f"MarkLogic request timed out: {method} {path}",
                context={"uri": uri},
            ) from exc
        except httpx.TransportError as exc:
            _logger.warning("MarkLogic transport error on %s %s: %s", method, path, exc)
            raise StoreConnectionError(
                f"MarkLogic is unreachable at {self.base_url}: {exc}",
                context={"uri": uri},
            ) from exc

        if response.status_code == 404 and uri is not None:
            raise DocumentNotFoundError(
                f"Document not found: {uri or path}",
                context={"uri": uri, "status_code": 404},
            )
        if response.is_error:
            _logger.warning("MarkLogic %s %s failed with status %s", method, path, response.status_code)
            raise StoreError(
                f"MarkLogic {method} {path} failed with {response.status_code}: {_error_message(response)}",
                context={"uri": uri, "status_code": response.status_code},
            )
        return response


def _error_message(response: httpx.Response) -> str:
    """Extract the message from a MarkLogic ``errorResponse`` body, if there is one."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        error = body.get("errorResponse")
        if isinstance(error, dict):
            return str(error.get("message") or error.get("messageCode") or error)
    return response.text
