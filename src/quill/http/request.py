"""Immutable HTTP request, as much of it as view handlers read.

Handlers only need the method, path, and headers (``Accept-Encoding``
for compression negotiation), so the body is never consumed here.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from quill.http.headers import Headers


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request."""

    method: str = "GET"
    path: str = "/"
    headers: Headers = field(default_factory=Headers)

    @property
    def accept_encoding(self) -> str:
        """The raw ``Accept-Encoding`` header, or ``""``."""
        return ", ".join(self.headers.get_list("accept-encoding"))

    @classmethod
    def from_asgi(cls, scope: Mapping[str, Any]) -> Request:
        """Create a Request from an ASGI HTTP scope."""
        return cls(
            method=scope.get("method", "GET"),
            path=scope.get("path", "/"),
            headers=Headers(scope.get("headers", ())),
        )
