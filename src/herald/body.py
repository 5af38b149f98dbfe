"""Readable request bodies."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Mapping

from .exceptions import BodyTooLargeError

ChunkSource = Callable[[], Awaitable[bytes | None]]
Receive = Callable[[], Awaitable[Mapping[str, Any]]]


class BodyReader:
    """Async reader over a body delivered in chunks.

    ``source`` returns the next chunk, or ``None``/``b""`` once the body is
    exhausted. Chunks are pulled lazily, so nothing beyond what a caller
    asks for is buffered.
    """

    __slots__ = ("_buffer", "_eof", "_source")

    def __init__(self, source: ChunkSource | None = None) -> None:
        self._source = source
        self._buffer = bytearray()
        self._eof = source is None

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview | None) -> "BodyReader":
        reader = cls()
        if data:
            reader._buffer.extend(data)
        return reader

    @classmethod
    def from_asgi(cls, receive: Receive) -> "BodyReader":
        """Read ``http.request`` messages from an ASGI ``receive`` callable."""

        done = False

        async def source() -> bytes | None:
            nonlocal done
            while not done:
                message = await receive()
                message_type = message.get("type")
                if message_type == "http.disconnect":
                    done = True
                    break
                if message_type != "http.request":
                    continue
                if not message.get("more_body", False):
                    done = True
                chunk = message.get("body", b"")
                if chunk:
                    return bytes(chunk)
            return None

        return cls(source)

    async def _fill(self, size: int) -> None:
        while not self._eof and (size < 0 or len(self._buffer) < size):
            assert self._source is not None
            chunk = await self._source()
            if not chunk:
                self._eof = True
                break
            self._buffer.extend(chunk)

    async def peek(self, size: int = 1) -> bytes:
        """Return up to ``size`` bytes without consuming them."""

        await self._fill(size)
        return bytes(self._buffer[:size])

    async def read(self, size: int = -1) -> bytes:
        """Read ``size`` bytes, fewer only at the end of the body; ``-1`` reads everything."""

        await self._fill(size)
        if size < 0 or size >= len(self._buffer):
            data = bytes(self._buffer)
            self._buffer.clear()
            return data
        data = bytes(self._buffer[:size])
        del self._buffer[:size]
        return data

    async def at_eof(self) -> bool:
        await self._fill(1)
        return not self._buffer


class LimitedReader:
    """Wrap a reader so that reading past ``limit`` bytes raises :class:`BodyTooLargeError`."""

    __slots__ = ("_limit", "_reader", "_remaining")

    def __init__(self, reader: "BodyReader | LimitedReader", limit: int) -> None:
        if limit < 0:
            raise ValueError("limit must not be negative")
        self._reader = reader
        self._limit = limit
        self._remaining = limit

    @property
    def limit(self) -> int:
        return self._limit

    async def peek(self, size: int = 1) -> bytes:
        return await self._reader.peek(min(size, self._remaining + 1))

    async def read(self, size: int = -1) -> bytes:
        wanted = self._remaining + 1 if size < 0 or size > self._remaining else size
        data = await self._reader.read(wanted)
        if len(data) > self._remaining:
            self._remaining = 0
            raise BodyTooLargeError(self._limit)
        self._remaining -= len(data)
        return data

    async def at_eof(self) -> bool:
        return await self._reader.at_eof()


__all__ = ["BodyReader", "ChunkSource", "LimitedReader", "Receive"]
