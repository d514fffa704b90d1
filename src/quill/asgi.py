"""ASGI adapter — mount a view handler on any ASGI server.

Translates the ASGI scope into a ``Request``, awaits the handler, and
sends the ``Response`` back as ASGI messages. Lifespan scopes run an
optional startup hook, typically ``Views.warm_up``, so caches are
populated before the server accepts traffic.

Usage::

    views = Views(ViewsConfig.from_env())
    home = views.send_static("index", warm=True)
    app = as_asgi(home, on_startup=views.warm_up)
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from quill._internal.asgi import ASGIApp, Receive, Scope, Send
from quill._internal.invoke import invoke
from quill.http.request import Request
from quill.http.response import Response

logger = logging.getLogger("quill.server")

type Handler = Callable[..., Awaitable[Response]]


async def send_response(response: Response, send: Send) -> None:
    """Translate a Response into ASGI send() calls."""
    raw_headers: list[tuple[bytes, bytes]] = [
        (b"content-type", response.content_type.encode("latin-1")),
    ]
    for name, value in response.headers:
        raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))

    body = response.body_bytes

    if response.header("content-length") is None:
        raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": body,
        }
    )


async def _handle_lifespan(
    receive: Receive,
    send: Send,
    on_startup: Callable[[], Any] | None,
) -> None:
    while True:
        message = await receive()
        msg_type = message["type"]

        if msg_type == "lifespan.startup":
            try:
                if on_startup is not None:
                    await invoke(on_startup)
                await send({"type": "lifespan.startup.complete"})
            except Exception as exc:
                logger.exception("Lifespan startup failed")
                await send({"type": "lifespan.startup.failed", "message": str(exc)})
                return
        elif msg_type == "lifespan.shutdown":
            await send({"type": "lifespan.shutdown.complete"})
            return


def as_asgi(
    handler: Handler,
    *,
    on_startup: Callable[[], Any] | None = None,
    **locals_: Any,
) -> ASGIApp:
    """Wrap *handler* as an ASGI application.

    Extra keyword arguments are passed to the handler on every request
    as per-call locals (used by template handlers).
    """

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await _handle_lifespan(receive, send, on_startup)
            return
        if scope["type"] != "http":
            return
        request = Request.from_asgi(scope)
        response = await handler(request, **locals_)
        await send_response(response, send)

    return app
