from __future__ import annotations

import msgspec
import pytest

from herald.body import BodyReader, LimitedReader
from herald.codec import decode_json_body, encode_json_body, has_body
from herald.exceptions import DecodeError, EncodeError


class Greeting(msgspec.Struct):
    name: str = ""


@pytest.mark.asyncio
async def test_empty_body_returns_default() -> None:
    default = Greeting(name="zero")
    reader = BodyReader.from_bytes(b"")
    assert not await has_body(reader)
    assert await decode_json_body(reader, Greeting, default=default) is default


@pytest.mark.asyncio
async def test_decodes_json_and_ignores_unknown_keys() -> None:
    reader = BodyReader.from_bytes(b'{"name": "Me", "extra": 1}')
    assert await decode_json_body(reader, Greeting, default=Greeting()) == Greeting(name="Me")


@pytest.mark.asyncio
async def test_invalid_json_is_decode_error() -> None:
    with pytest.raises(DecodeError) as captured:
        await decode_json_body(BodyReader.from_bytes(b'{"name": '), Greeting, default=Greeting())
    assert str(captured.value).startswith("error decoding request body as JSON: ")
    assert isinstance(captured.value.cause, msgspec.DecodeError)


@pytest.mark.asyncio
async def test_type_mismatch_is_decode_error() -> None:
    with pytest.raises(DecodeError, match="error decoding request body as JSON: Expected `str`"):
        await decode_json_body(BodyReader.from_bytes(b'{"name": 1}'), Greeting, default=Greeting())


@pytest.mark.asyncio
async def test_oversized_body_is_decode_error() -> None:
    reader = LimitedReader(BodyReader.from_bytes(b'{"name": "Me"}'), 1)
    with pytest.raises(DecodeError, match="error decoding request body as JSON: request body too large"):
        await decode_json_body(reader, Greeting, default=Greeting())


def test_encode_success_and_failure() -> None:
    assert encode_json_body(Greeting(name="Me")) == b'{"name":"Me"}'
    with pytest.raises(EncodeError, match="error encoding response body as JSON"):
        encode_json_body({"value": object()})
