"""JSON serialization helpers backed by :mod:`msgspec`."""

from __future__ import annotations

from typing import Any, Protocol, TypeVar, cast

import msgspec

T = TypeVar("T")


class _JSONModule(Protocol):
    def encode(self, obj: Any) -> bytes: ...

    def decode(self, data: bytes, *, type: Any = ...) -> Any: ...


_json = cast(_JSONModule, getattr(msgspec, "json"))


def json_encode(value: Any) -> bytes:
    """Serialize ``value`` to JSON bytes using msgspec."""

    return _json.encode(value)


def json_decode(data: bytes, model: type[T] | None = None) -> T | Any:
    """Deserialize JSON ``data`` into native values, or into ``model`` when given."""

    if model is None:
        return _json.decode(data)
    return _json.decode(data, type=model)


__all__ = ["json_decode", "json_encode"]
