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
"""MarkLogic-backed session store."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from mlsession.client.adapters.httpx_adapter import MarkLogicRestClient
from mlsession.client.ports.outbound import DocumentStoreClient
from mlsession.config.properties.store import StoreProperties
from mlsession.kernel.exceptions import DocumentNotFoundError
from mlsession.session.document import (
    SessionRecord,
    derive_base_uri,
    document_uri,
    hash_sid,
    resolve_expires,
)
from mlsession.session.serializers import (
    DeserializeFn,
    SerializeFn,
    SessionSerializer,
    select_serializer,
)

_logger = logging.getLogger(__name__)


class MarkLogicSessionStore:
    """Session store persisting one JSON document per session in MarkLogic.

    Each session lives at ``/<base_uri>/<sid>.json`` in the configured
    collection, as ``{"sid", "session", "expires"}``. ``expires`` is
    recorded but never enforced here: expired sessions are still returned
    by :meth:`get` until something else removes them.

    When hashing is configured, the stored id and document URI use
    ``hexdigest(salt + sid)`` on every operation.

    Args:
        properties: ``StoreProperties`` or a mapping of options merged over
            the defaults.
        client: An existing document client to share. When omitted, a
            ``MarkLogicRestClient`` is built from *properties* and owned by
            this store.
        serialize: Replaces the serializer of the structured strategy.
        unserialize: Replaces the deserializer of the structured strategy.
            It receives the stored document.
        serializer: A complete ``SessionSerializer``; takes precedence over
            the options above.
    """

    def __init__(
        self,
        properties: StoreProperties | Mapping[str, Any] | None = None,
        *,
        client: DocumentStoreClient | None = None,
        serialize: SerializeFn | None = None,
        unserialize: DeserializeFn | None = None,
        serializer: SessionSerializer | None = None,
    ) -> None:
        if properties is None:
            properties = StoreProperties()
        elif not isinstance(properties, StoreProperties):
            properties = StoreProperties.from_options(properties)
        self._properties = properties
        self._base_uri = properties.base_uri or derive_base_uri(properties.collection)
        self._serializer = serializer or select_serializer(
            stringify=properties.stringify,
            serialize=serialize,
            deserialize=unserialize,
        )

        if client is not None:
            self._client = client
            self._owns_client = False
        else:
            self._client = MarkLogicRestClient.from_properties(properties)
            self._owns_client = True

    @property
    def properties(self) -> StoreProperties:
        return self._properties

    @property
    def collection(self) -> str:
        return self._properties.collection

    @property
    def base_uri(self) -> str:
        return self._base_uri

    @property
    def client(self) -> DocumentStoreClient:
        return self._client

    @property
    def serializer(self) -> SessionSerializer:
        return self._serializer

    def storage_id(self, sid: str) -> str:
        """Return the id a session is stored under: *sid*, or its hash when hashing is on."""
        if not isinstance(sid, str) or not sid:
            raise ValueError("Session id must be a non-empty string")
        hashing = self._properties.hash
        if hashing is None:
            return sid
        return hash_sid(sid, hashing.salt, hashing.algorithm)

    def document_uri(self, sid: str) -> str:
        """Return the URI of the document holding session *sid*."""
        return document_uri(self.storage_id(sid), self._base_uri)

    async def get(self, sid: str) -> Any | None:
        """Fetch the session for *sid*, or ``None`` if there is none."""
        uri = self.document_uri(sid)
        _logger.debug("Reading session document %s", uri)
        try:
            document = await self._client.read(uri)
        except DocumentNotFoundError:
            _logger.debug("No session document at %s", uri)
            return None
        return self._serializer.deserialize(document)

    async def set(self, sid: str, session: Any) -> None:
        """Write *session* for *sid*, fully replacing any previous document."""
        key = self.storage_id(sid)
        payload = self._serializer.serialize(session)
        record = SessionRecord(
            sid=key,
            session=payload,
            expires=resolve_expires(session, self._properties.ttl),
        )
        uri = document_uri(key, self._base_uri)
        _logger.debug("Writing session document %s (expires %s)", uri, record.expires.isoformat())
        await self._client.write(uri, record.to_document(), collections=[self.collection])

    async def destroy(self, sid: str) -> None:
        """Remove the session for *sid*. Removing an unknown session succeeds."""
        uri = self.document_uri(sid)
        _logger.debug("Removing session document %s", uri)
        try:
            await self._client.remove(uri)
        except DocumentNotFoundError:
            _logger.debug("Session document %s was already absent", uri)

    async def length(self) -> int:
        """Count the sessions in the collection, expired ones included."""
        _logger.debug("Counting sessions in collection %s", self.collection)
        return await self._client.count(self.collection)

    async def clear(self) -> None:
        """Remove every session in the collection."""
        _logger.info("Clearing all sessions in collection %s", self.collection)
        await self._client.remove_collection(self.collection)

    async def close(self) -> None:
        """Close the client if this store created it; shared clients are left open."""
        if self._owns_client:
            await self._client.close()

    async def __aenter__(self) -> MarkLogicSessionStore:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
