# /webbot/ports/http_client.py
from __future__ import annotations

from typing import Protocol

from webbot.domain.http_response import HttpResponse


class HTTPClientPort(Protocol):
    async def get(self, url: str, timeout: float | None = None) -> HttpResponse:
        """GET url; never raises on network errors (status_code 0 instead)."""

    async def head(self, url: str, timeout: float | None = None) -> HttpResponse:
        """HEAD url; same contract as get(), body is empty."""

    async def close(self) -> None:
        """Release pooled connections."""
