# /webbot/domain/http_response.py
from __future__ import annotations

import codecs
from dataclasses import dataclass, field

DEFAULT_MIME = "text/plain"
DEFAULT_CHARSET = "UTF-8"

# http://www.w3.org/Protocols/rfc2616/rfc2616-sec10.html
STATUS_MESSAGES: dict[int, str] = {
    # internal
    0: "Initialization Error",
    # info
    100: "Continue",
    101: "Switching Protocols",
    # success
    200: "OK",
    201: "Created",
    202: "Accepted",
    203: "Non-Authoritative Information",
    204: "No Content",
    205: "Reset Content",
    206: "Partial Content",
    # redirection
    300: "Multiple Choices",
    301: "Moved Permanently",
    302: "Found",
    303: "See Other",
    304: "Not Modified",
    305: "Use Proxy",
    307: "Temporary Redirect",
    # client error
    400: "Bad Request",
    401: "Unauthorized",
    402: "Payment Required",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    406: "Not Acceptable",
    407: "Proxy Authentication Required",
    408: "Request Timeout",
    409: "Conflict",
    410: "Gone",
    411: "Length Required",
    412: "Precondition Failed",
    413: "Request Entity Too Large",
    414: "Request-URI Too Long",
    415: "Unsupported Media Type",
    416: "Requested Range Not Satisfiable",
    417: "Expectation Failed",
    # server error
    500: "Internal Server Error",
    501: "Not Implemented",
    502: "Bad Gateway",
    503: "Service Unavailable",
    504: "Gateway Timeout",
    505: "HTTP Version Not Supported",
}


_CONTENT_TYPE = "content-type:"


def status_message_for(status_code: int) -> str:
    return STATUS_MESSAGES.get(status_code, STATUS_MESSAGES[0])


def parse_content_type(value: str | None) -> tuple[str, str]:
    """
    Split a Content-Type header (with or without the ``Content-Type:`` prefix)
    into (mime, charset). Anything missing keeps the text/plain / UTF-8 defaults.
    """
    mime, charset = DEFAULT_MIME, DEFAULT_CHARSET
    if not value:
        return mime, charset

    parts = value.split(";")
    head = parts[0].strip()
    if head.lower().startswith(_CONTENT_TYPE):
        head = head[len(_CONTENT_TYPE):].strip()
    if head:
        mime = head

    for param in parts[1:]:
        key, sep, val = param.partition("=")
        if sep and key.strip().lower() == "charset":
            val = val.strip().strip('"').strip("'")
            if val:
                charset = val
            break

    return mime, charset


# ==== Outcome variants ====


@dataclass(frozen=True, slots=True)
class Delivered:
    status_code: int
    header_lines: tuple[str, ...] = ()
    body: bytes = b""


@dataclass(frozen=True, slots=True)
class Failed:
    reason: str = "no response received"


# ==== Response ====


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """
    Parsed HTTP response. Never mutated after construction.
    ``status_code == 0`` iff the request never produced a response (outcome is Failed).
    """

    url: str
    outcome: Delivered | Failed
    mime_type: str = DEFAULT_MIME
    charset: str = DEFAULT_CHARSET
    status_message: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "status_message", status_message_for(self.status_code))

    @classmethod
    def build(
        cls,
        status_code: int,
        content_type: str,
        body: bytes,
        header_lines: tuple[str, ...] | list[str] | None,
        url: str,
    ) -> HttpResponse:
        mime, charset = parse_content_type(content_type)
        if status_code == 0:
            return cls(url=url, outcome=Failed("no HTTP status line"), mime_type=mime, charset=charset)
        outcome = Delivered(
            status_code=int(status_code),
            header_lines=tuple(header_lines or ()),
            body=body or b"",
        )
        return cls(url=url, outcome=outcome, mime_type=mime, charset=charset)

    @classmethod
    def failed(cls, url: str, reason: str) -> HttpResponse:
        return cls(url=url, outcome=Failed(reason))

    @property
    def status_code(self) -> int:
        return self.outcome.status_code if isinstance(self.outcome, Delivered) else 0

    @property
    def success(self) -> bool:
        return self.status_code == 200

    @property
    def body(self) -> bytes:
        return self.outcome.body if isinstance(self.outcome, Delivered) else b""

    @property
    def header_lines(self) -> tuple[str, ...]:
        return self.outcome.header_lines if isinstance(self.outcome, Delivered) else ()

    @property
    def error(self) -> str | None:
        return self.outcome.reason if isinstance(self.outcome, Failed) else None

    @property
    def text(self) -> str:
        try:
            codecs.lookup(self.charset)
            encoding = self.charset
        except LookupError:
            encoding = DEFAULT_CHARSET
        return self.body.decode(encoding, errors="replace")
