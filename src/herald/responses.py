"""Response primitives."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Awaitable, Callable

import msgspec

from .http import Status, ensure_status

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from .requests import Request

logger = logging.getLogger(__name__)

Headers = tuple[tuple[str, str], ...]

PLAIN_TEXT = "text/plain; charset=utf-8"


class Response(msgspec.Struct, frozen=True):
    """Immutable snapshot of what a handler wrote."""

    status: int = int(Status.OK)
    headers: Headers = ()
    body: bytes = b""

    def header(self, name: str, default: str | None = None) -> str | None:
        lowered = name.lower()
        for key, value in self.headers:
            if key == lowered:
                return value
        return default

    def text(self) -> str:
        return self.body.decode()


class ResponseWriter:
    """The response sink handed to every handler.

    Headers may be changed until the status is committed, either through
    :meth:`write_header` or implicitly by the first :meth:`write`. Only the
    first status commit counts.
    """

    __slots__ = ("_chunks", "_committed_headers", "_headers", "_status")

    def __init__(self) -> None:
        self._headers: dict[str, str] = {}
        self._status: int | None = None
        self._committed_headers: Headers = ()
        self._chunks: list[bytes] = []

    @property
    def committed(self) -> bool:
        return self._status is not None

    @property
    def status(self) -> int | None:
        return self._status

    def set_header(self, name: str, value: str) -> None:
        self._headers[name.lower()] = value

    def get_header(self, name: str) -> str | None:
        return self._headers.get(name.lower())

    def delete_header(self, name: str) -> None:
        self._headers.pop(name.lower(), None)

    def write_header(self, status: int | Status) -> None:
        code = ensure_status(status)
        if self._status is not None:
            logger.warning("Superfluous write_header(%d); status %d already sent", code, self._status)
            return
        self._status = code
        self._committed_headers = tuple(self._headers.items())

    def write(self, data: bytes | str) -> int:
        if isinstance(data, str):
            data = data.encode("utf-8")
        if self._status is None:
            self.write_header(Status.OK)
        self._chunks.append(bytes(data))
        return len(data)

    def error(self, message: str, status: int | Status) -> None:
        """Reply with ``message`` as a plain-text body."""

        self.delete_header("content-length")
        self.set_header("content-type", PLAIN_TEXT)
        self.set_header("x-content-type-options", "nosniff")
        self.write_header(status)
        self.write(message)

    def redirect(self, location: str, status: int | Status = Status.FOUND) -> None:
        self.set_header("location", location)
        self.write_header(status)

    def to_response(self) -> Response:
        if self._status is None:
            return Response(status=int(Status.OK), headers=tuple(self._headers.items()))
        return Response(
            status=self._status,
            headers=self._committed_headers,
            body=b"".join(self._chunks),
        )


Handler = Callable[[ResponseWriter, "Request"], Awaitable[None]]


__all__ = ["PLAIN_TEXT", "Handler", "Headers", "Response", "ResponseWriter"]
