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
"""Session documents: addressing, id hashing, and expiry resolution."""

from __future__ import annotations

import hashlib
import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from email.utils import parsedate_to_datetime
from typing import Any
from urllib.parse import quote

from mlsession.kernel.exceptions import SerializationError

# Reserved and unreserved URI marks stay unescaped in a base URI.
_URI_SAFE = ";,/?:@&=+$-_.!~*'()#"

_WHITESPACE_RE = re.compile(r"\s")


@dataclass(frozen=True)
class SessionRecord:
    """The document persisted per session."""

    sid: str
    session: Any
    expires: datetime

    def to_document(self) -> dict[str, Any]:
        return {"sid": self.sid, "session": self.session, "expires": self.expires.isoformat()}


def derive_base_uri(collection: str) -> str:
    """Turn a collection name into a path-safe base URI: whitespace to ``-``, then percent-encode."""
    return quote(_WHITESPACE_RE.sub("-", collection), safe=_URI_SAFE)


def document_uri(sid: str, base_uri: str) -> str:
    """Return the URI of the document holding session *sid*: ``/<base_uri>/<sid>.json``."""
    return f"/{base_uri.strip('/')}/{sid}.json"


def hash_sid(sid: str, salt: str, algorithm: str) -> str:
    """Hex digest of ``salt + sid`` using the named hashlib algorithm."""
    digest = hashlib.new(algorithm, (salt + sid).encode("utf-8"))
    if digest.digest_size == 0:
        # shake_* digests are variable-length; 20 bytes matches sha1
        return digest.hexdigest(20)  # type: ignore[call-arg]
    return digest.hexdigest()


def session_cookie(session: Any) -> Any:
    """Return the cookie descriptor of a session payload, or ``None``."""
    if isinstance(session, Mapping):
        return session.get("cookie")
    return getattr(session, "cookie", None)


def resolve_expires(session: Any, ttl_ms: float, now: datetime | None = None) -> datetime:
    """Compute the ``expires`` value stored with a session.

    The cookie's own expiry wins when present. Otherwise the session is a
    browser-session cookie (or has no cookie at all) and expires *ttl_ms*
    milliseconds from *now*.
    """
    cookie = session_cookie(session)
    if isinstance(cookie, Mapping):
        expires = cookie.get("expires")
    else:
        expires = getattr(cookie, "expires", None)

    if expires is not None and expires != "":
        return to_datetime(expires)

    now = now or datetime.now(UTC)
    return now + timedelta(milliseconds=ttl_ms)


def to_datetime(value: Any) -> datetime:
    """Convert a cookie expiry to an aware datetime.

    Accepts a ``datetime``, an ISO-8601 string, an RFC 1123 HTTP-date
    (``Wed, 21 Oct 2026 07:28:00 GMT``) or a number of epoch milliseconds.
    Naive values are taken as UTC.
    """
    if isinstance(value, datetime):
        result = value
    elif isinstance(value, str):
        result = _parse_date_string(value)
    elif isinstance(value, int | float) and not isinstance(value, bool):
        try:
            result = datetime.fromtimestamp(value / 1000, tz=UTC)
        except (OverflowError, OSError, ValueError) as exc:
            raise SerializationError(f"Cookie expiry out of range: {value!r}") from exc
    else:
        raise SerializationError(f"Unsupported cookie expiry type: {type(value).__name__}")

    if result.tzinfo is None:
        result = result.replace(tzinfo=UTC)
    return result


def _parse_date_string(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        pass
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Invalid cookie expiry {value!r}") from exc
