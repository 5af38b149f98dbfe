"""Adapter configuration objects."""

from __future__ import annotations

from typing import Any, Mapping

import msgspec
from msgspec import Struct

from .exceptions import ConfigurationError

DEFAULT_MAX_FORM_BYTES = 10 << 20
DEFAULT_MAX_FORM_FIELDS = 1024


class AdapterConfig(Struct, frozen=True):
    """Typed configuration shared by the handler adapters.

    Instances are immutable, so a single config can back any number of
    concurrently invoked handlers.
    """

    max_form_bytes: int = DEFAULT_MAX_FORM_BYTES
    max_form_fields: int = DEFAULT_MAX_FORM_FIELDS
    json_content_type: str = "application/json"
    log_server_errors: bool = True

    def __post_init__(self) -> None:
        if self.max_form_bytes < 0:
            raise ValueError("max_form_bytes must not be negative")
        if self.max_form_fields < 1:
            raise ValueError("max_form_fields must be at least 1")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "AdapterConfig":
        """Build a config from plain data such as a parsed settings file."""

        try:
            return msgspec.convert(dict(values), type=cls)
        except (msgspec.ValidationError, ValueError) as exc:
            raise ConfigurationError(f"invalid adapter configuration: {exc}") from exc


DEFAULT_CONFIG = AdapterConfig()

__all__ = ["DEFAULT_CONFIG", "DEFAULT_MAX_FORM_BYTES", "DEFAULT_MAX_FORM_FIELDS", "AdapterConfig"]
