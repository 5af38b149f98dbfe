"""Decoding flat, multi-valued form data into typed request shapes."""

from __future__ import annotations

import dataclasses
import enum
import types
from collections.abc import Mapping as MappingABC
from collections.abc import MutableMapping, MutableSequence, MutableSet, Sequence, Set
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Generic, Literal, Mapping, TypeVar, Union, get_args, get_origin, get_type_hints

import msgspec
from msgspec import structs

from .typing_utils import FormValue, coerce_weak, describe, is_optional, is_supported

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class ShapeField:
    """One declared field of a request shape."""

    name: str
    encode_name: str
    annotation: Any
    required: bool


def is_shape(model: Any) -> bool:
    """Return ``True`` for the request shapes the adapters understand."""

    if not isinstance(model, type):
        return False
    return issubclass(model, msgspec.Struct) or dataclasses.is_dataclass(model)


@lru_cache(maxsize=None)
def shape_fields(model: type[Any]) -> tuple[ShapeField, ...]:
    if isinstance(model, type) and issubclass(model, msgspec.Struct):
        return tuple(
            ShapeField(
                name=info.name,
                encode_name=info.encode_name,
                annotation=info.type,
                required=info.required,
            )
            for info in structs.fields(model)
        )
    if isinstance(model, type) and dataclasses.is_dataclass(model):
        hints = get_type_hints(model)
        return tuple(
            ShapeField(
                name=field.name,
                encode_name=field.name,
                annotation=hints.get(field.name, Any),
                required=field.default is dataclasses.MISSING and field.default_factory is dataclasses.MISSING,
            )
            for field in dataclasses.fields(model)
            if field.init
        )
    raise TypeError(f"{model!r} is not a msgspec.Struct or dataclass request shape")


def zero_for(annotation: Any) -> Any:
    """The zero value of ``annotation``: empty strings, ``0``, ``False``, empty containers."""

    if annotation is Any or annotation is None or annotation is type(None):
        return None
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        if is_optional(annotation):
            return None
        return zero_for(get_args(annotation)[0])
    if origin is Literal:
        return get_args(annotation)[0]
    container = origin or annotation
    if container in (list, Sequence, MutableSequence):
        return []
    if container is tuple:
        return ()
    if container in (dict, MappingABC, MutableMapping):
        return {}
    if container in (set, MutableSet):
        return set()
    if container in (frozenset, Set):
        return frozenset()
    if annotation in (str, int, float, bool, bytes):
        return annotation()
    if isinstance(annotation, type) and issubclass(annotation, enum.Enum):
        return next(iter(annotation))
    if is_shape(annotation):
        return zero_value(annotation)
    return None


def zero_value(model: type[T]) -> T:
    """Instantiate ``model`` with defaults, or the type's zero value where there is no default.

    A fresh instance is built on every call. Construction goes through the
    model's own ``__init__``, so a ``__post_init__`` runs and may reject the
    zero value with its own ``ValueError`` or ``TypeError``.
    """

    kwargs = {
        field.name: zero_for(field.annotation)
        for field in shape_fields(model)
        if field.required
    }
    return model(**kwargs)


class FormDecoder(Generic[T]):
    """Weakly decode a flat form mapping into ``model``.

    Keys match a field's name or its encoded name, ignoring case. Unknown
    keys are ignored and missing keys leave the field at its default or
    zero value. Field types are checked once, at construction.
    """

    __slots__ = ("_fields", "_index", "model")

    def __init__(self, model: type[T]) -> None:
        if not is_shape(model):
            raise TypeError(f"Form request type must be a msgspec.Struct or dataclass, got {model!r}")
        fields = shape_fields(model)
        unsupported = [field.name for field in fields if not is_supported(field.annotation)]
        if unsupported:
            details = ", ".join(
                f"{field.name}: {describe(field.annotation)}" for field in fields if field.name in unsupported
            )
            raise TypeError(f"{model.__name__} has fields that cannot be decoded from a form ({details})")
        index: dict[str, ShapeField] = {}
        for field in fields:
            index.setdefault(field.name.lower(), field)
            index.setdefault(field.encode_name.lower(), field)
        self.model = model
        self._fields = fields
        self._index = index

    def decode(self, values: Mapping[str, FormValue]) -> T:
        kwargs: dict[str, Any] = {}
        for key, value in values.items():
            field = self._index.get(key.lower())
            if field is None or field.name in kwargs:
                continue
            kwargs[field.name] = coerce_weak(value, field.annotation, field=field.name)
        for field in self._fields:
            if field.required and field.name not in kwargs:
                kwargs[field.name] = zero_for(field.annotation)
        return self.model(**kwargs)


def flatten_form(values: Mapping[str, Sequence[str]]) -> dict[str, FormValue]:
    """Collapse single-valued keys to a plain string, keeping multi-valued keys as lists."""

    flat: dict[str, FormValue] = {}
    for key, items in values.items():
        if len(items) > 1:
            flat[key] = list(items)
        elif items:
            flat[key] = items[0]
    return flat


def weak_decode(values: Mapping[str, FormValue], model: type[T]) -> T:
    """One-shot helper around :class:`FormDecoder`."""

    return FormDecoder(model).decode(values)


__all__ = [
    "FormDecoder",
    "ShapeField",
    "flatten_form",
    "is_shape",
    "shape_fields",
    "weak_decode",
    "zero_for",
    "zero_value",
]
