"""JSON body decoding and buffered response encoding."""

from __future__ import annotations

from typing import Any, TypeVar

import msgspec

from .body import BodyReader, LimitedReader
from .exceptions import BodyTooLargeError, DecodeError, EncodeError
from .serialization import json_decode, json_encode

T = TypeVar("T")


async def has_body(reader: BodyReader | LimitedReader) -> bool:
    """Peek a single byte to find out whether anything was sent."""

    return bool(await reader.peek(1))


async def decode_json_body(reader: BodyReader | LimitedReader, model: type[T], *, default: T) -> T:
    """Decode the body as JSON into ``model``.

    An empty body is not an error: ``default`` is returned untouched.
    """

    if not await has_body(reader):
        return default
    try:
        data = await reader.read()
    except BodyTooLargeError as exc:
        raise DecodeError.for_body(exc) from exc
    try:
        return json_decode(data, model)
    except msgspec.DecodeError as exc:
        raise DecodeError.for_body(exc) from exc


def encode_json_body(value: Any) -> bytes:
    """Serialize ``value`` completely before anything reaches the client."""

    try:
        return json_encode(value)
    except (msgspec.EncodeError, TypeError, ValueError, OverflowError) as exc:
        raise EncodeError.for_body(exc) from exc


__all__ = ["decode_json_body", "encode_json_body", "has_body"]
