# /tests/test_http_response.py
from __future__ import annotations

import dataclasses

import pytest

from webbot.domain.http_response import Delivered, Failed, HttpResponse, status_message_for


def test_status_messages() -> None:
    assert status_message_for(200) == "OK"
    assert status_message_for(404) == "Not Found"
    assert status_message_for(505) == "HTTP Version Not Supported"
    assert status_message_for(999) == status_message_for(0) == "Initialization Error"
    assert status_message_for(306) == "Initialization Error"


def test_build_delivered() -> None:
    resp = HttpResponse.build(200, "Content-Type: text/html; charset=utf-8", b"<p>", ["HTTP/1.1 200 OK"], "http://x/")
    assert isinstance(resp.outcome, Delivered)
    assert resp.success is True
    assert resp.status_message == "OK"
    assert (resp.mime_type, resp.charset) == ("text/html", "utf-8")
    assert resp.body == b"<p>"
    assert resp.error is None


def test_success_only_for_200() -> None:
    assert HttpResponse.build(201, "", b"", [], "u").success is False
    assert HttpResponse.build(304, "", b"", [], "u").success is False


def test_failed_variant() -> None:
    resp = HttpResponse.failed("http://down.test/", "ClientConnectorError: refused")
    assert isinstance(resp.outcome, Failed)
    assert resp.status_code == 0
    assert resp.status_message == "Initialization Error"
    assert resp.body == b""
    assert resp.header_lines == ()
    assert resp.success is False
    assert resp.error.startswith("ClientConnectorError")


def test_status_zero_build_is_failed() -> None:
    resp = HttpResponse.build(0, "", b"body", ["x"], "u")
    assert isinstance(resp.outcome, Failed)
    assert resp.body == b""


def test_immutable() -> None:
    resp = HttpResponse.build(200, "", b"", [], "u")
    with pytest.raises(dataclasses.FrozenInstanceError):
        resp.url = "other"  # type: ignore[misc]


def test_text_uses_charset_and_falls_back() -> None:
    latin = HttpResponse.build(200, "text/html; charset=latin-1", "café".encode("latin-1"), [], "u")
    assert latin.text == "café"
    bogus = HttpResponse.build(200, "text/html; charset=no-such-codec", "café".encode("utf-8"), [], "u")
    assert bogus.text == "café"
