"""Request primitives."""

from __future__ import annotations

from typing import Mapping, MutableMapping
from urllib.parse import parse_qsl

from .body import BodyReader, LimitedReader
from .config import DEFAULT_MAX_FORM_BYTES, DEFAULT_MAX_FORM_FIELDS
from .exceptions import FormParseError

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

_FORM_METHODS = frozenset({"POST", "PUT", "PATCH"})


def parse_pairs(raw: str, *, max_fields: int = DEFAULT_MAX_FORM_FIELDS) -> MutableMapping[str, list[str]]:
    """Parse URL-encoded ``raw`` into a multi-valued mapping preserving submission order."""

    parsed: MutableMapping[str, list[str]] = {}
    try:
        pairs = parse_qsl(raw, keep_blank_values=True, max_num_fields=max_fields, errors="strict")
    except UnicodeDecodeError as exc:
        raise FormParseError("invalid UTF-8 in URL-encoded data") from exc
    except ValueError as exc:
        raise FormParseError("too many form fields") from exc
    for key, value in pairs:
        parsed.setdefault(key, []).append(value)
    return parsed


class Request:
    """View of an incoming request.

    ``body`` is a reader rather than bytes; adapters may replace it, for
    instance with a :class:`~herald.body.LimitedReader`, before anything is
    read.
    """

    __slots__ = (
        "_form",
        "_query_params",
        "_raw_query",
        "body",
        "headers",
        "method",
        "path",
    )

    def __init__(
        self,
        *,
        method: str,
        path: str,
        headers: Mapping[str, str] | None = None,
        query_string: str | None = None,
        body: bytes | None = None,
        body_reader: BodyReader | LimitedReader | None = None,
    ) -> None:
        if body is not None and body_reader is not None:
            raise ValueError("Request body and body_reader are mutually exclusive")
        self.method = method.upper()
        self.path = path
        self.headers = {k.lower(): v for k, v in (headers or {}).items()}
        self._raw_query = query_string or ""
        self.body: BodyReader | LimitedReader = body_reader or BodyReader.from_bytes(body)
        self._query_params: MutableMapping[str, list[str]] | None = None
        self._form: MutableMapping[str, list[str]] | None = None

    @property
    def raw_query(self) -> str:
        return self._raw_query

    @property
    def query_params(self) -> MutableMapping[str, list[str]]:
        if self._query_params is None:
            self._query_params = parse_pairs(self._raw_query)
        return self._query_params

    def header(self, name: str, default: str | None = None) -> str | None:
        return self.headers.get(name.lower(), default)

    @property
    def content_type(self) -> str:
        """The media type of the body without parameters, lower-cased."""

        raw = self.headers.get("content-type", "")
        return raw.split(";", 1)[0].strip().lower()

    async def form(
        self,
        *,
        max_bytes: int = DEFAULT_MAX_FORM_BYTES,
        max_fields: int = DEFAULT_MAX_FORM_FIELDS,
    ) -> MutableMapping[str, list[str]]:
        """Parse URL-encoded body values followed by query values.

        The body is only consulted for POST, PUT and PATCH requests sent as
        ``application/x-www-form-urlencoded``. The result is cached.
        """

        if self._form is None:
            merged: MutableMapping[str, list[str]] = {}
            if self.method in _FORM_METHODS and self.content_type == FORM_CONTENT_TYPE:
                raw = await LimitedReader(self.body, max_bytes).read()
                try:
                    text = raw.decode("utf-8")
                except UnicodeDecodeError as exc:
                    raise FormParseError("invalid UTF-8 in form body") from exc
                for key, values in parse_pairs(text, max_fields=max_fields).items():
                    merged.setdefault(key, []).extend(values)
            for key, values in parse_pairs(self._raw_query, max_fields=max_fields).items():
                merged.setdefault(key, []).extend(values)
            self._form = merged
        return self._form


__all__ = ["FORM_CONTENT_TYPE", "Request", "parse_pairs"]
