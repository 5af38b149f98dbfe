from __future__ import annotations

import logging

import msgspec
import pytest

from herald.capabilities import (
    SizeLimited,
    StatusCoded,
    Validatable,
    is_size_limited,
    is_status_coded,
    is_validatable,
    max_size_of,
    run_validation,
    status_code_of,
)
from herald.exceptions import HTTPError


class Plain(msgspec.Struct):
    status_code: int = 0


class Limited(msgspec.Struct):
    def max_size_bytes(self) -> int:
        return 64


class Checked(msgspec.Struct):
    name: str = ""

    def validate(self) -> None:
        if not self.name:
            raise ValueError("name is required")


class Created(msgspec.Struct):
    def status_code(self) -> int:
        return 201


class Broken(msgspec.Struct):
    def status_code(self) -> int:
        return 1000


def test_capability_checks_detect_methods_only() -> None:
    assert not is_status_coded(Plain())
    assert not is_size_limited(Plain())
    assert not is_validatable(Plain())
    assert is_size_limited(Limited())
    assert is_validatable(Checked())
    assert is_status_coded(Created())
    assert is_status_coded(HTTPError(404))


def test_protocols_are_runtime_checkable() -> None:
    assert isinstance(Limited(), SizeLimited)
    assert isinstance(Checked(), Validatable)
    assert isinstance(Created(), StatusCoded)
    assert not isinstance(object(), StatusCoded)


def test_max_size_of() -> None:
    assert max_size_of(Plain()) is None
    assert max_size_of(Limited()) == 64


def test_run_validation() -> None:
    run_validation(Plain())
    run_validation(Checked(name="Me"))
    with pytest.raises(ValueError, match="name is required"):
        run_validation(Checked())


def test_status_code_of(caplog: pytest.LogCaptureFixture) -> None:
    assert status_code_of(Plain(), 200) == 200
    assert status_code_of(Created(), 200) == 201
    assert status_code_of(HTTPError(418), 500) == 418
    assert status_code_of(RuntimeError("boom"), 500) == 500
    with caplog.at_level(logging.WARNING, logger="herald.capabilities"):
        assert status_code_of(Broken(), 200) == 200
    assert "Ignoring invalid status code from Broken" in caplog.text
