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
"""mlsession session: HTTP session persistence in a document store.

Import concrete store types from the adapter package::

    from mlsession.session.adapters.marklogic import MarkLogicSessionStore
"""

from mlsession.session.cookie import SessionCookie
from mlsession.session.document import SessionRecord, document_uri
from mlsession.session.ports.outbound import SessionStore
from mlsession.session.serializers import (
    JsonSerializer,
    SessionSerializer,
    StructuredSerializer,
)

__all__ = [
    "JsonSerializer",
    "SessionCookie",
    "SessionRecord",
    "SessionSerializer",
    "SessionStore",
    "StructuredSerializer",
    "document_uri",
]
