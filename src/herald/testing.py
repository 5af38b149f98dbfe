"""Testing helpers."""

from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import urlencode

from .requests import FORM_CONTENT_TYPE, Request
from .responses import Handler, Response, ResponseWriter
from .serialization import json_encode


class TestClient:
    """Async test client that runs a handler in-process."""

    __test__ = False

    def __init__(self, handler: Handler) -> None:
        self.handler = handler

    async def request(
        self,
        method: str,
        path: str,
        *,
        query: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        body: bytes | str | None = None,
    ) -> Response:
        if isinstance(body, str):
            body = body.encode("utf-8")
        request = Request(
            method=method,
            path=path,
            headers=headers,
            query_string=urlencode(query or {}, doseq=True),
            body=body,
        )
        writer = ResponseWriter()
        await self.handler(writer, request)
        return writer.to_response()

    async def get(
        self,
        path: str,
        *,
        query: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        return await self.request("GET", path, query=query, headers=headers)

    async def post(
        self,
        path: str,
        *,
        body: bytes | str | None = None,
        query: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        return await self.request("POST", path, body=body, query=query, headers=headers)

    async def post_form(
        self,
        path: str,
        data: Mapping[str, Any] | list[tuple[str, str]],
        *,
        query: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        request_headers = dict(headers or {})
        request_headers.setdefault("content-type", FORM_CONTENT_TYPE)
        return await self.post(path, body=urlencode(data, doseq=True), query=query, headers=request_headers)

    async def post_json(
        self,
        path: str,
        json: Any,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        request_headers = dict(headers or {})
        request_headers.setdefault("content-type", "application/json")
        return await self.post(path, body=json_encode(json), headers=request_headers)


__all__ = ["TestClient"]
