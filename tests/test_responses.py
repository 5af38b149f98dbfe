from __future__ import annotations

import logging

import pytest

from herald.http import Status
from herald.responses import PLAIN_TEXT, Response, ResponseWriter


def test_write_commits_ok_implicitly() -> None:
    writer = ResponseWriter()
    writer.write("hello ")
    writer.write(b"world")
    response = writer.to_response()
    assert response.status == 200
    assert response.body == b"hello world"
    assert response.text() == "hello world"


def test_untouched_writer_is_an_empty_ok() -> None:
    assert ResponseWriter().to_response() == Response()


def test_headers_are_frozen_at_commit() -> None:
    writer = ResponseWriter()
    writer.set_header("X-Before", "1")
    writer.write_header(Status.ACCEPTED)
    writer.set_header("x-after", "1")
    response = writer.to_response()
    assert response.status == 202
    assert response.header("x-before") == "1"
    assert response.header("x-after") is None


def test_header_lookup_is_case_insensitive() -> None:
    writer = ResponseWriter()
    writer.set_header("Content-Type", "text/html")
    assert writer.get_header("content-type") == "text/html"
    writer.delete_header("CONTENT-TYPE")
    assert writer.get_header("Content-Type") is None


def test_superfluous_write_header_is_ignored(caplog: pytest.LogCaptureFixture) -> None:
    writer = ResponseWriter()
    writer.write_header(202)
    with caplog.at_level(logging.WARNING, logger="herald.responses"):
        writer.write_header(500)
    assert writer.status == 202
    assert "Superfluous write_header(500)" in caplog.text


def test_error_writes_plain_text() -> None:
    writer = ResponseWriter()
    writer.set_header("content-length", "99")
    writer.error("invalid form: invalid", Status.BAD_REQUEST)
    response = writer.to_response()
    assert response.status == 400
    assert response.body == b"invalid form: invalid"
    assert response.header("content-type") == PLAIN_TEXT
    assert response.header("x-content-type-options") == "nosniff"
    assert response.header("content-length") is None


def test_redirect() -> None:
    writer = ResponseWriter()
    writer.redirect("/", Status.FOUND)
    response = writer.to_response()
    assert response.status == 302
    assert response.header("location") == "/"
    assert writer.committed
