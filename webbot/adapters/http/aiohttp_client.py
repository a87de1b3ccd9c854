# /webbot/adapters/http/aiohttp_client.py
from __future__ import annotations

import asyncio
import logging

import aiohttp

from webbot.config import Settings
from webbot.domain.http_parsing import parse_response, resolve_timeout
from webbot.domain.http_response import HttpResponse

LOG = logging.getLogger("adapter.http_client")


def raw_header_lines(resp: aiohttp.ClientResponse) -> list[str]:
    """Rebuild the raw header block (status line first) from an aiohttp response."""
    version = resp.version or aiohttp.HttpVersion11
    lines = [f"HTTP/{version.major}.{version.minor} {resp.status} {resp.reason or ''}".rstrip()]
    for name, value in resp.raw_headers:
        lines.append(f"{name.decode('latin-1')}: {value.decode('latin-1')}")
    return lines


class AiohttpClient:
    """
    Loop-aware aiohttp client.
    A sync caller may drive each run through its own asyncio.run(); we detect loop
    changes and rebuild the session so we never hold one tied to a closed loop.
    """

    def __init__(self, settings: Settings) -> None:
        self._headers = {"User-Agent": settings.USER_AGENT}
        self._max_bytes = settings.MAX_BYTES
        self._session: aiohttp.ClientSession | None = None
        self._loop: asyncio.AbstractEventLoop | None = None  # track owning loop

    async def _ensure_session(self) -> aiohttp.ClientSession:
        loop = asyncio.get_running_loop()
        loop_changed = self._loop is not None and self._loop is not loop

        if loop_changed:
            # old session belonged to a different (likely closed) loop -> drop it
            try:
                if self._session and not self._session.closed:
                    await self._session.close()
            finally:
                self._session = None
                self._loop = None

        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers=self._headers,
                raise_for_status=False,
                # no cookie persistence across requests
                cookie_jar=aiohttp.DummyCookieJar(),
                # only User-Agent goes out by default
                skip_auto_headers=("Accept", "Accept-Encoding"),
            )
            self._loop = loop

        return self._session

    async def _read_body(self, url: str, resp: aiohttp.ClientResponse) -> bytes:
        body = bytearray()
        async for chunk in resp.content.iter_chunked(64 * 1024):
            body.extend(chunk)
            if len(body) > self._max_bytes:
                LOG.warning("body_truncated", extra={"extra": {"url": url, "max": self._max_bytes}})
                break
        return bytes(body[: self._max_bytes])

    async def _request(self, method: str, url: str, timeout: float | None) -> HttpResponse:
        effective = resolve_timeout(timeout)
        LOG.info("fetching", extra={"extra": {"method": method, "url": url, "timeout": effective}})
        try:
            sess = await self._ensure_session()
            async with sess.request(
                method,
                url,
                timeout=aiohttp.ClientTimeout(total=effective),
                allow_redirects=True,
            ) as resp:
                body = b"" if method == "HEAD" else await self._read_body(url, resp)
                response = parse_response(raw_header_lines(resp), body, url)
        except (TimeoutError, asyncio.TimeoutError, aiohttp.ClientError, ValueError) as e:
            reason = f"{type(e).__name__}: {e}".rstrip(": ")
            LOG.warning("fetch.failed", extra={"extra": {"url": url, "error": reason}})
            return HttpResponse.failed(url, reason)

        LOG.info(
            "fetched",
            extra={"extra": {"url": url, "status": response.status_code, "bytes": len(response.body)}},
        )
        return response

    async def get(self, url: str, timeout: float | None = None) -> HttpResponse:
        return await self._request("GET", url, timeout)

    async def head(self, url: str, timeout: float | None = None) -> HttpResponse:
        return await self._request("HEAD", url, timeout)

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None
        self._loop = None
