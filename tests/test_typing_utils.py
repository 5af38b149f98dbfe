from __future__ import annotations

from typing import Any, Optional

import pytest

from herald.exceptions import DecodeError
from herald.typing_utils import coerce_weak, describe, is_supported, sequence_item, unwrap_optional


def test_scalar_coercions() -> None:
    assert coerce_weak("Me", str, field="name") == "Me"
    assert coerce_weak("20", int, field="age") == 20
    assert coerce_weak("-3", int, field="age") == -3
    assert coerce_weak("true", bool, field="accept") is True
    assert coerce_weak("false", bool, field="accept") is False
    assert coerce_weak("anything", Any, field="raw") == "anything"


def test_empty_strings_become_zero_values() -> None:
    assert coerce_weak("", int, field="age") == 0
    assert coerce_weak("", bool, field="accept") is False


def test_bool_literals_are_case_sensitive() -> None:
    with pytest.raises(DecodeError, match="cannot parse 'accept' as bool"):
        coerce_weak("True", bool, field="accept")
    with pytest.raises(DecodeError):
        coerce_weak("1", bool, field="accept")


def test_invalid_int_names_field_and_type() -> None:
    with pytest.raises(DecodeError) as captured:
        coerce_weak("not a number", int, field="age")
    assert str(captured.value) == "cannot parse 'age' as int"
    assert captured.value.field == "age"
    assert captured.value.target == "int"


@pytest.mark.parametrize("raw", [" 20 ", "٢٠", "1_000", "9" * 30, "9223372036854775808", "-"])
def test_int_rejects_padding_non_ascii_digits_and_overflow(raw: str) -> None:
    with pytest.raises(DecodeError) as captured:
        coerce_weak(raw, int, field="age")
    assert str(captured.value) == "cannot parse 'age' as int"


def test_int_accepts_signs_and_int64_bounds() -> None:
    assert coerce_weak("+5", int, field="age") == 5
    assert coerce_weak("9223372036854775807", int, field="age") == 2**63 - 1
    assert coerce_weak("-9223372036854775808", int, field="age") == -(2**63)


def test_sequences_preserve_order_and_wrap_single_values() -> None:
    assert coerce_weak(["Hats", "Goats"], list[str], field="hobbies") == ["Hats", "Goats"]
    assert coerce_weak("Hats", list[str], field="hobbies") == ["Hats"]
    assert coerce_weak(["1", "2"], list[int], field="scores") == [1, 2]
    assert coerce_weak(["a", "b"], tuple[str, ...], field="tags") == ("a", "b")


def test_sequence_item_errors_name_the_index() -> None:
    with pytest.raises(DecodeError, match=r"cannot parse 'scores\[1\]' as int"):
        coerce_weak(["1", "x"], list[int], field="scores")


def test_multiple_values_for_scalar_field_are_rejected() -> None:
    with pytest.raises(DecodeError, match="cannot parse 'name' as str"):
        coerce_weak(["a", "b"], str, field="name")
    assert coerce_weak(["only"], str, field="name") == "only"


def test_optional_fields_coerce_as_inner_type() -> None:
    assert coerce_weak("3", Optional[int], field="limit") == 3
    assert coerce_weak("3", int | None, field="limit") == 3
    assert unwrap_optional(Optional[str]) is str


def test_support_and_descriptions() -> None:
    assert is_supported(str)
    assert is_supported(Optional[bool])
    assert is_supported(list[int])
    assert is_supported(tuple[str, ...])
    assert not is_supported(float)
    assert not is_supported(dict[str, str])
    assert not is_supported(list[float])
    assert not is_supported(tuple[str, int])
    assert describe(list[str]) == "list[str]"
    assert describe(tuple[bool, ...]) == "tuple[bool]"
    assert describe(float) == "float"
    assert sequence_item(list) is str
    assert sequence_item(int) is None
