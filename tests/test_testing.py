from __future__ import annotations

import pytest

from herald.requests import Request
from herald.responses import ResponseWriter
from herald.testing import TestClient


async def inspect_request(writer: ResponseWriter, request: Request) -> None:
    body = await request.body.read()
    writer.set_header("x-method", request.method)
    writer.set_header("x-content-type", request.header("content-type", ""))
    writer.write(f"{request.path}?{request.raw_query}|".encode() + body)


@pytest.mark.asyncio
async def test_client_builds_requests() -> None:
    client = TestClient(inspect_request)
    response = await client.get("/items", query={"tag": ["a", "b"]})
    assert response.header("x-method") == "GET"
    assert response.body == b"/items?tag=a&tag=b|"

    form = await client.post_form("/submit", {"name": "Me"})
    assert form.header("x-content-type") == "application/x-www-form-urlencoded"
    assert form.body == b"/submit?|name=Me"

    posted = await client.post_json("/json", {"a": 1})
    assert posted.header("x-content-type") == "application/json"
    assert posted.body == b'/json?|{"a":1}'

    raw = await client.post("/raw", body="text")
    assert raw.body == b"/raw?|text"
