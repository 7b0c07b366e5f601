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
"""Build a session store from configuration."""

from __future__ import annotations

import logging

from mlsession.client.adapters.memory import InMemoryDocumentClient
from mlsession.client.ports.outbound import DocumentStoreClient
from mlsession.config.properties.store import StoreProperties
from mlsession.core.config import Config
from mlsession.kernel.exceptions import ConfigurationError
from mlsession.session.adapters.marklogic import MarkLogicSessionStore
from mlsession.session.serializers import DeserializeFn, SerializeFn

_logger = logging.getLogger(__name__)

_PROVIDERS = ("marklogic", "memory")


def create_session_store(
    config: Config | None = None,
    *,
    client: DocumentStoreClient | None = None,
    serialize: SerializeFn | None = None,
    unserialize: DeserializeFn | None = None,
) -> MarkLogicSessionStore:
    """Create a session store from the ``mlsession.store`` section of *config*.

    ``mlsession.store.provider`` chooses the document client: ``marklogic``
    (default) talks to the REST API, ``memory`` keeps documents in-process.
    An explicit *client* overrides the provider. Environment variables
    (``MLSESSION_STORE_HOST``, ``MLSESSION_STORE_TTL``, ...) win over file values.
    """
    config = config or Config()
    provider = str(config.get("mlsession.store.provider", "marklogic")).strip().lower()
    if provider not in _PROVIDERS:
        raise ConfigurationError(
            f"Unknown session store provider '{provider}', expected one of {', '.join(_PROVIDERS)}",
            context={"provider": provider},
        )

    try:
        properties = config.bind(StoreProperties)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid session store configuration: {exc}") from exc

    shared = client is not None
    if client is None and provider == "memory":
        client = InMemoryDocumentClient()

    _logger.info(
        "Creating session store provider=%s collection=%s shared_client=%s",
        provider,
        properties.collection,
        shared,
    )
    return MarkLogicSessionStore(
        properties,
        client=client,
        serialize=serialize,
        unserialize=unserialize,
    )
