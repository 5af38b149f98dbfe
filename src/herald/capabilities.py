"""Checks for the optional behaviours request, response and error values may expose.

None of these are required. A value opts in simply by defining the method;
the helpers fall back to a no-op default when it is absent.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

from .http import ensure_status

logger = logging.getLogger(__name__)


@runtime_checkable
class SizeLimited(Protocol):
    """A request shape that caps the number of body bytes it will accept."""

    def max_size_bytes(self) -> int: ...


@runtime_checkable
class Validatable(Protocol):
    """A value that can reject itself by raising from ``validate``."""

    def validate(self) -> None: ...


@runtime_checkable
class StatusCoded(Protocol):
    """A response or error value that dictates its own HTTP status."""

    def status_code(self) -> int: ...


def _capability(value: Any, name: str) -> Any:
    method = getattr(value, name, None)
    return method if callable(method) else None


def is_size_limited(value: Any) -> bool:
    return _capability(value, "max_size_bytes") is not None


def is_validatable(value: Any) -> bool:
    return _capability(value, "validate") is not None


def is_status_coded(value: Any) -> bool:
    return _capability(value, "status_code") is not None


def max_size_of(value: Any) -> int | None:
    """Return the body limit declared by ``value``, or ``None`` when it declares none."""

    method = _capability(value, "max_size_bytes")
    if method is None:
        return None
    limit = int(method())
    if limit < 0:
        raise ValueError(f"{type(value).__name__}.max_size_bytes() returned a negative limit")
    return limit


def run_validation(value: Any) -> None:
    """Call ``value.validate()`` when available; any exception it raises propagates."""

    method = _capability(value, "validate")
    if method is not None:
        method()


def status_code_of(value: Any, default: int) -> int:
    """Resolve the status declared by ``value``, falling back to ``default``."""

    method = _capability(value, "status_code")
    if method is None:
        return default
    try:
        return ensure_status(method())
    except (TypeError, ValueError):
        logger.warning(
            "Ignoring invalid status code from %s; using %d",
            type(value).__name__,
            default,
        )
        return default


__all__ = [
    "SizeLimited",
    "StatusCoded",
    "Validatable",
    "is_size_limited",
    "is_status_coded",
    "is_validatable",
    "max_size_of",
    "run_validation",
    "status_code_of",
]
