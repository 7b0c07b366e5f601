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
"""mlsession: HTTP session storage on MarkLogic."""

from mlsession.core.config import Config
from mlsession.kernel.exceptions import (
    ConfigurationError,
    DocumentNotFoundError,
    MLSessionException,
    SerializationError,
    StoreConnectionError,
    StoreError,
)
from mlsession.session.adapters.marklogic import MarkLogicSessionStore
from mlsession.session.factory import create_session_store

__version__ = "0.1.0"

__all__ = [
    "Config",
    "ConfigurationError",
    "DocumentNotFoundError",
    "MLSessionException",
    "MarkLogicSessionStore",
    "SerializationError",
    "StoreConnectionError",
    "StoreError",
    "create_session_store",
]
