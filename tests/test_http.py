from __future__ import annotations

import pytest

from herald.http import Status, ensure_status, is_server_error, reason_phrase


def test_ensure_status_validates_range() -> None:
    assert ensure_status(Status.OK) == 200
    assert ensure_status(418) == 418
    with pytest.raises(ValueError):
        ensure_status(99)
    with pytest.raises(ValueError):
        ensure_status(600)


def test_reason_phrase_for_known_and_unknown_statuses() -> None:
    assert reason_phrase(Status.OK) == "OK"
    assert reason_phrase(Status.BAD_REQUEST) == "Bad Request"
    assert reason_phrase(418) == "I'm a teapot"
    assert reason_phrase(799) == "Unknown Status"
    assert reason_phrase(599) == "Unknown Status"


def test_server_error_helper() -> None:
    assert is_server_error(Status.INTERNAL_SERVER_ERROR)
    assert not is_server_error(Status.IM_A_TEAPOT)
