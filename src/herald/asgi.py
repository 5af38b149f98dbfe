"""ASGI interface adapter."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Mapping

from .body import BodyReader
from .requests import Request
from .responses import Handler, Response, ResponseWriter

Receive = Callable[[], Awaitable[Mapping[str, Any]]]
Send = Callable[[Mapping[str, Any]], Awaitable[None]]


class ASGIAdapter:
    """Serve a plain handler as an ASGI 3 application.

    The request body is pulled from ``receive`` only as the handler reads
    it. The response is sent once the handler has returned, so a client
    never sees a partially written body.
    """

    def __init__(self, handler: Handler) -> None:
        self.handler = handler

    async def __call__(self, scope: Mapping[str, Any], receive: Receive, send: Send) -> None:
        scope_type = scope.get("type")
        if scope_type == "http":
            await self._handle_http(scope, receive, send)
            return
        if scope_type == "lifespan":
            await self._handle_lifespan(receive, send)
            return
        raise RuntimeError("ASGIAdapter only supports HTTP and lifespan scopes")

    async def _handle_http(self, scope: Mapping[str, Any], receive: Receive, send: Send) -> None:
        headers = {key.decode("latin-1").lower(): value.decode("latin-1") for key, value in scope.get("headers", [])}
        request = Request(
            method=scope["method"],
            path=scope["path"],
            headers=headers,
            query_string=(scope.get("query_string") or b"").decode("latin-1"),
            body_reader=BodyReader.from_asgi(receive),
        )
        writer = ResponseWriter()
        await self.handler(writer, request)
        await send_response(writer.to_response(), send)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            message_type = message.get("type")
            if message_type == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif message_type == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return


async def send_response(response: Response, send: Send) -> None:
    headers = [(k.encode("latin-1"), v.encode("latin-1")) for k, v in response.headers]
    if not any(name == b"content-length" for name, _ in headers):
        headers.append((b"content-length", str(len(response.body)).encode("latin-1")))
    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": headers,
        }
    )
    await send({"type": "http.response.body", "body": response.body})


__all__ = ["ASGIAdapter", "Receive", "Send", "send_response"]
