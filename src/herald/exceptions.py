"""Error taxonomy for the handler adapters.

Every failure an adapter can detect is one of the types below. Each type
knows its transport status through ``status_code()``, which makes all of
them status-coded values in the same sense as application errors.
``error_envelope`` renders any message into the ``{"Error": ...}`` body
used by the JSON adapter.
"""

from __future__ import annotations

from typing import Any

import msgspec

from .http import Status, ensure_status, reason_phrase
from .serialization import json_encode


class ErrorEnvelope(msgspec.Struct, frozen=True, rename={"error": "Error"}):
    """Canonical JSON body for failures reported by the JSON adapter."""

    error: str


def error_envelope(message: str) -> bytes:
    """Serialize ``message`` into the error envelope."""

    return json_encode(ErrorEnvelope(error=message))


class HeraldError(Exception):
    """Base error type."""

    status: int = int(Status.INTERNAL_SERVER_ERROR)

    def status_code(self) -> int:
        return self.status


class ConfigurationError(HeraldError):
    """Raised when adapter or middleware configuration is unusable."""


class HTTPError(HeraldError):
    """An error carrying an explicit status code.

    The message defaults to the standard reason phrase for ``status``.
    """

    def __init__(self, status: int | Status, message: str | None = None) -> None:
        status_code = ensure_status(status)
        self.status = status_code
        self.reason = reason_phrase(status_code)
        self.message = message if message is not None else self.reason
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"HTTPError({self.status}, {self.message!r})"


class DecodeError(HeraldError):
    """Malformed or oversized request input."""

    status = int(Status.BAD_REQUEST)

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        target: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.field = field
        self.target = target
        self.cause = cause

    @classmethod
    def for_field(cls, field: str, target: str) -> "DecodeError":
        return cls(f"cannot parse '{field}' as {target}", field=field, target=target)

    @classmethod
    def for_body(cls, cause: BaseException) -> "DecodeError":
        return cls(f"error decoding request body as JSON: {cause}", cause=cause)


class FormParseError(DecodeError):
    """The URL-encoded form or query string could not be parsed."""


class BodyTooLargeError(DecodeError):
    """More bytes were read from a request body than its limit allows."""

    def __init__(self, limit: int) -> None:
        super().__init__("request body too large")
        self.limit = limit


class ValidationError(HeraldError):
    """A decoded request value rejected itself."""

    status = int(Status.BAD_REQUEST)

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause

    @classmethod
    def for_form(cls, cause: BaseException) -> "ValidationError":
        return cls(f"invalid form: {cause}", cause=cause)

    @classmethod
    def for_body(cls, cause: BaseException) -> "ValidationError":
        return cls(f"invalid request body: {cause}", cause=cause)


class EncodeError(HeraldError):
    """A response value could not be serialized."""

    status = int(Status.INTERNAL_SERVER_ERROR)

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause

    @classmethod
    def for_body(cls, cause: BaseException) -> "EncodeError":
        return cls(f"error encoding response body as JSON: {cause}", cause=cause)


def error_details(exc: BaseException) -> dict[str, Any]:
    """Structured fields for log records about ``exc``."""

    details: dict[str, Any] = {"error_type": type(exc).__name__}
    for name in ("field", "target", "limit"):
        value = getattr(exc, name, None)
        if value is not None:
            details[f"error_{name}"] = value
    return details


__all__ = [
    "BodyTooLargeError",
    "ConfigurationError",
    "DecodeError",
    "EncodeError",
    "ErrorEnvelope",
    "FormParseError",
    "HTTPError",
    "HeraldError",
    "ValidationError",
    "error_details",
    "error_envelope",
]
