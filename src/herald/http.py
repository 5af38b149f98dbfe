"""HTTP status codes and reason phrases."""

from __future__ import annotations

from enum import IntEnum
from http import HTTPStatus as _HTTPStatus

_REASON_OVERRIDES = {418: "I'm a teapot"}


class Status(IntEnum):
    """Enumeration of the HTTP status codes used by the adapters."""

    OK = 200
    CREATED = 201
    ACCEPTED = 202
    NO_CONTENT = 204
    FOUND = 302
    SEE_OTHER = 303
    PERMANENT_REDIRECT = 308
    BAD_REQUEST = 400
    NOT_FOUND = 404
    PAYLOAD_TOO_LARGE = 413
    IM_A_TEAPOT = 418
    INTERNAL_SERVER_ERROR = 500


def ensure_status(status: int | Status) -> int:
    """Normalize ``status`` to an ``int`` and ensure it is within the HTTP range."""

    code = int(status)
    if code < 100 or code > 599:
        raise ValueError(f"Invalid HTTP status code: {status}")
    return code


def reason_phrase(status: int | Status) -> str:
    """Return the HTTP reason phrase for ``status`` if known."""

    try:
        code = ensure_status(status)
    except ValueError:
        return "Unknown Status"
    if code in _REASON_OVERRIDES:
        return _REASON_OVERRIDES[code]
    try:
        return _HTTPStatus(code).phrase
    except ValueError:
        return "Unknown Status"


def is_server_error(status: int | Status) -> bool:
    code = ensure_status(status)
    return 500 <= code < 600


__all__ = [
    "Status",
    "ensure_status",
    "is_server_error",
    "reason_phrase",
]
