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
"""SessionCookie, the cookie descriptor embedded in a session payload."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any


@dataclass
class SessionCookie:
    """Cookie attributes a session middleware keeps alongside session data.

    ``expires`` of ``None`` means a browser-session cookie.
    """

    expires: datetime | None = None
    max_age: int | None = None
    path: str = "/"
    domain: str | None = None
    http_only: bool = True
    secure: bool = False
    same_site: str | None = "lax"

    @classmethod
    def with_max_age(cls, max_age: int, **kwargs: Any) -> SessionCookie:
        """Create a cookie expiring *max_age* seconds from now."""
        expires = datetime.now(UTC) + timedelta(seconds=max_age)
        return cls(expires=expires, max_age=max_age, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Flatten to JSON-compatible primitives; ``expires`` becomes ISO-8601."""
        return {
            "expires": self.expires.isoformat() if self.expires is not None else None,
            "max_age": self.max_age,
            "path": self.path,
            "domain": self.domain,
            "http_only": self.http_only,
            "secure": self.secure,
            "same_site": self.same_site,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SessionCookie:
        expires = data.get("expires")
        return cls(
            expires=datetime.fromisoformat(expires) if isinstance(expires, str) else expires,
            max_age=data.get("max_age"),
            path=data.get("path", "/"),
            domain=data.get("domain"),
            http_only=data.get("http_only", True),
            secure=data.get("secure", False),
            same_site=data.get("same_site", "lax"),
        )
