# /webbot/domain/http_parsing.py
"""
Header-line parsing, independent of any HTTP client library.

Input is the raw header block as a sequence of strings, e.g.::

    ["HTTP/1.1 200 OK", "Content-Type: text/html; charset=utf-8", ...]
"""
from __future__ import annotations

from collections.abc import Sequence

from webbot.domain.http_response import HttpResponse, parse_content_type

__all__ = ["parse_content_type", "parse_response", "parse_status_code", "resolve_timeout"]

DEFAULT_TIMEOUT_FALLBACK = 60.0
MIN_TIMEOUT = 0.1

_CONTENT_TYPE = "content-type:"


def resolve_timeout(timeout: float | None) -> float:
    """Near-zero, negative or missing timeouts mean "use the 60s default"."""
    t = float(timeout or 0)
    return DEFAULT_TIMEOUT_FALLBACK if t < MIN_TIMEOUT else t


def parse_status_code(line: str) -> int | None:
    """``HTTP/1.1 404 Not Found`` -> 404; None when the line is not a status line."""
    if not line.startswith("HTTP") or " " not in line:
        return None
    token = line.split(" ", 2)[1][:3]
    if len(token) != 3 or not token.isdigit():
        return None
    return int(token)


def parse_response(header_lines: Sequence[str] | None, body: bytes, url: str) -> HttpResponse:
    """First status line wins for the code, first Content-Type line wins for MIME/charset."""
    status_code: int | None = None
    content_type: str | None = None

    for line in header_lines or ():
        if status_code is None:
            code = parse_status_code(line)
            if code is not None:
                status_code = code
                continue
        if content_type is None and line[: len(_CONTENT_TYPE)].lower() == _CONTENT_TYPE:
            content_type = line

    return HttpResponse.build(status_code or 0, content_type or "", body, header_lines, url)
