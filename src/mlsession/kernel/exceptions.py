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
"""Exception hierarchy for mlsession.

Every error raised by the store, its serializers and its document clients
inherits from MLSessionException, so callers can catch a single base type or
target the specific failure.

Categories:
- ConfigurationError: invalid options, raised while constructing a store
- SerializationError: a session payload could not be encoded or decoded
- StoreError: the document store rejected or failed an operation
"""

from __future__ import annotations

# =============================================================================
# Base Exception
# =============================================================================


class MLSessionException(Exception):
    """Base exception for all mlsession errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "NOT_FOUND").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    default_code: str | None = None

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code if code is not None else self.default_code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Construction and payload errors
# =============================================================================


class ConfigurationError(MLSessionException):
    """Invalid or missing store options. Raised from construction, never deferred."""

    default_code = "CONFIG"


class SerializationError(MLSessionException):
    """A serializer or deserializer failed for the in-flight operation."""

    default_code = "SERIALIZATION"


# =============================================================================
# Store Exceptions
# =============================================================================


class StoreError(MLSessionException):
    """The document store failed an operation (network, auth, query)."""

    default_code = "STORE"

    @property
    def status_code(self) -> int | None:
        return self.context.get("status_code")


class DocumentNotFoundError(StoreError):
    """The addressed document does not exist."""

    default_code = "NOT_FOUND"


class StoreConnectionError(StoreError):
    """The document store could not be reached or did not answer in time."""

    default_code = "STORE_UNAVAILABLE"
