"""Weak string coercion for form fields."""

from __future__ import annotations

import re
import types
from collections.abc import MutableSequence, Sequence
from typing import Any, Union, get_args, get_origin

from .exceptions import DecodeError

FormValue = Union[str, Sequence[str]]

_SCALARS: dict[Any, str] = {str: "str", int: "int", bool: "bool"}
_SEQUENCE_ORIGINS = (list, tuple, Sequence, MutableSequence)
_INT_PATTERN = re.compile(r"[+-]?[0-9]+", re.ASCII)
_INT_MIN, _INT_MAX = -(2**63), 2**63 - 1


def is_optional(annotation: Any) -> bool:
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        return type(None) in get_args(annotation)
    return False


def unwrap_optional(annotation: Any) -> Any:
    """Strip ``None`` from ``Optional[T]``; other unions are returned as-is."""

    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        options = [option for option in get_args(annotation) if option is not type(None)]
        if len(options) == 1:
            return options[0]
    return annotation


def sequence_item(annotation: Any) -> Any | None:
    """Return the element type of a list/tuple annotation, or ``None`` for non-sequences."""

    origin = get_origin(annotation)
    if origin is None:
        if annotation in (list, tuple):
            return str
        return None
    if origin not in _SEQUENCE_ORIGINS:
        return None
    args = get_args(annotation)
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return args[0]
        return None
    return args[0] if args else str


def describe(annotation: Any) -> str:
    """Human readable name for a supported field annotation."""

    annotation = unwrap_optional(annotation)
    if annotation is Any:
        return "str"
    if annotation in _SCALARS:
        return _SCALARS[annotation]
    item = sequence_item(annotation)
    if item is not None:
        container = "tuple" if get_origin(annotation) is tuple or annotation is tuple else "list"
        return f"{container}[{describe(item)}]"
    return getattr(annotation, "__name__", repr(annotation))


def is_supported(annotation: Any) -> bool:
    """Whether a form field of this type can be weakly coerced."""

    annotation = unwrap_optional(annotation)
    if annotation is Any or annotation in _SCALARS:
        return True
    item = sequence_item(annotation)
    if item is None:
        return False
    item = unwrap_optional(item)
    return item is Any or item in _SCALARS


def coerce_weak(value: FormValue, annotation: Any, *, field: str) -> Any:
    """Convert a raw form value into ``annotation`` raising :class:`DecodeError` on failure.

    A single string becomes a one-element sequence when the field is a sequence.
    Several values for a scalar field are rejected.
    """

    annotation = unwrap_optional(annotation)
    item = sequence_item(annotation)
    if item is not None:
        values = [value] if isinstance(value, str) else list(value)
        converted = [
            _coerce_scalar(raw, unwrap_optional(item), field=f"{field}[{index}]")
            for index, raw in enumerate(values)
        ]
        if get_origin(annotation) is tuple or annotation is tuple:
            return tuple(converted)
        return converted
    if not isinstance(value, str):
        values = list(value)
        if len(values) != 1:
            raise DecodeError.for_field(field, describe(annotation))
        value = values[0]
    return _coerce_scalar(value, annotation, field=field)


def _coerce_scalar(value: str, annotation: Any, *, field: str) -> Any:
    if annotation is bool:
        if value == "true":
            return True
        if value in ("false", ""):
            return False
        raise DecodeError.for_field(field, "bool")
    if annotation is int:
        if value == "":
            return 0
        if not _INT_PATTERN.fullmatch(value):
            raise DecodeError.for_field(field, "int")
        number = int(value)
        if not _INT_MIN <= number <= _INT_MAX:
            raise DecodeError.for_field(field, "int")
        return number
    if annotation is str or annotation is Any:
        return value
    raise DecodeError.for_field(field, describe(annotation))


__all__ = [
    "FormValue",
    "coerce_weak",
    "describe",
    "is_optional",
    "is_supported",
    "sequence_item",
    "unwrap_optional",
]
