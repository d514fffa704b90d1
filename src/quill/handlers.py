"""Request handler adapters — pipeline results to responses.

Each handler is an async callable ``handler(request, **locals)`` that
always returns a ``Response`` and never raises. Failures become a 404
(missing resource) or 500 (anything else); the exception is logged and
forwarded to the owning ``Views`` error channel.

Handlers are normally created through ``Views``::

    views.send_static("about")              # first pass -> text/html
    views.send_script("app.js")             # public file, gzip negotiated
    views.send_template("profile")          # second pass, called with locals
"""

from __future__ import annotations

import logging
import mimetypes
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from quill.errors import ResourceNotFound
from quill.http.request import Request
from quill.http.response import Response

if TYPE_CHECKING:
    from quill.views import Views

logger = logging.getLogger("quill.server")

HTML = "text/html; charset=utf-8"
DEFAULT_SCRIPT_TYPE = "application/javascript"


def accepts_encoding(header: str | None, coding: str = "gzip") -> bool:
    """Whether an ``Accept-Encoding`` header allows *coding*.

    An explicit entry for *coding* wins; otherwise ``*`` decides. A
    quality of zero refuses. A missing or empty header refuses.
    """
    if not header:
        return False
    coding = coding.lower()
    wildcard: float | None = None
    for item in header.split(","):
        token, _, params = item.strip().partition(";")
        token = token.strip().lower()
        if not token:
            continue
        q = _quality(params)
        if token == coding:
            return q > 0
        if token == "*":
            wildcard = q
    return wildcard is not None and wildcard > 0


def _quality(params: str) -> float:
    for param in params.split(";"):
        key, _, value = param.strip().partition("=")
        if key.strip().lower() == "q":
            try:
                return float(value)
            except ValueError:
                return 0.0
    return 1.0


async def failure_response(views: Views, request: Request, exc: Exception) -> Response:
    """Map a pipeline failure to a 404/500 response and report it."""
    if isinstance(exc, ResourceNotFound):
        logger.debug("404 %s %s: %s", request.method, request.path, exc)
        response = Response(body="Not Found", status=404, content_type="text/plain; charset=utf-8")
    else:
        logger.error("500 %s %s", request.method, request.path, exc_info=exc)
        response = Response(
            body="Internal Server Error",
            status=500,
            content_type="text/plain; charset=utf-8",
        )
    await views.report(exc)
    return response


class SendStatic:
    """Serve a first-pass rendered template as HTML."""

    __slots__ = ("name", "views")

    def __init__(self, views: Views, name: str) -> None:
        self.views = views
        self.name = name

    async def warm(self) -> None:
        await self.views.render(self.name)

    async def __call__(self, request: Request, **locals_: Any) -> Response:
        self.views.check_warm()
        try:
            html = await self.views.render(self.name)
        except Exception as exc:
            return await failure_response(self.views, request, exc)
        return Response(body=html, content_type=HTML)


class SendScript:
    """Serve a public file, gzip-compressed when the client accepts it."""

    __slots__ = ("content_type", "name", "views")

    def __init__(self, views: Views, name: str) -> None:
        self.views = views
        self.name = name
        guessed, _ = mimetypes.guess_type(name)
        self.content_type = guessed or DEFAULT_SCRIPT_TYPE

    async def warm(self) -> None:
        # Compressed load stores both representations
        await self.views.public_file(self.name, zip=True)

    async def __call__(self, request: Request, **locals_: Any) -> Response:
        self.views.check_warm()
        needs_zip = accepts_encoding(request.accept_encoding, "gzip")
        try:
            data = await self.views.public_file(self.name, zip=needs_zip)
        except Exception as exc:
            return await failure_response(self.views, request, exc)

        response = Response(body=data, content_type=self.content_type).with_header(
            "Vary", "Accept-Encoding"
        )
        if needs_zip:
            response = response.with_headers(
                {
                    "Content-Encoding": "gzip",
                    "Content-Length": str(len(data)),
                }
            )
        return response


class SendTemplate:
    """Serve a second-pass template, rendered per request with locals."""

    __slots__ = ("name", "vars", "views")

    def __init__(
        self,
        views: Views,
        name: str,
        vars: Mapping[str, Any] | None = None,  # noqa: A002
    ) -> None:
        self.views = views
        self.name = name
        self.vars = dict(vars or {})

    async def warm(self) -> None:
        await self.views.compile(self.name, self.vars)

    async def __call__(self, request: Request, **locals_: Any) -> Response:
        self.views.check_warm()
        try:
            render = await self.views.compile(self.name, self.vars)
            html = render(locals_)
        except Exception as exc:
            return await failure_response(self.views, request, exc)
        return Response(body=html, content_type=HTML)


type Handler = SendStatic | SendScript | SendTemplate
