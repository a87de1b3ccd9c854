# /tests/test_aiohttp_client.py
from __future__ import annotations

import asyncio
import json

import pytest
import pytest_asyncio
from aiohttp import test_utils, web

from webbot.adapters.http.aiohttp_client import AiohttpClient
from webbot.config import Settings
from webbot.domain.fetch_bot import FetchBot
from webbot.domain.http_response import Failed


async def _ok(request: web.Request) -> web.Response:
    return web.Response(text="<title>Hi</title>", content_type="text/html")


async def _missing(request: web.Request) -> web.Response:
    return web.Response(status=404, text="nope")


async def _agent(request: web.Request) -> web.Response:
    return web.Response(text=request.headers.get("User-Agent", ""))


async def _headers(request: web.Request) -> web.Response:
    return web.json_response({k.lower(): v for k, v in request.headers.items()})


async def _slow(request: web.Request) -> web.Response:
    await asyncio.sleep(1)
    return web.Response(text="late")


async def _big(request: web.Request) -> web.Response:
    return web.Response(body=b"x" * 4096, content_type="application/octet-stream")


@pytest_asyncio.fixture
async def server():
    app = web.Application()
    app.router.add_get("/ok", _ok)
    app.router.add_get("/missing", _missing)
    app.router.add_get("/agent", _agent)
    app.router.add_get("/headers", _headers)
    app.router.add_get("/slow", _slow)
    app.router.add_get("/big", _big)
    srv = test_utils.TestServer(app)
    await srv.start_server()
    yield srv
    await srv.close()


@pytest_asyncio.fixture
async def client():
    c = AiohttpClient(Settings(USER_AGENT="webbot-test/1.0", MAX_BYTES=1024))
    yield c
    await c.close()


@pytest.mark.asyncio
async def test_get_ok(server, client) -> None:
    url = str(server.make_url("/ok"))
    resp = await client.get(url, 5)
    assert resp.success is True
    assert resp.status_code == 200
    assert resp.status_message == "OK"
    assert resp.mime_type == "text/html"
    assert resp.charset.lower() == "utf-8"
    assert resp.body == b"<title>Hi</title>"
    assert resp.url == url
    assert resp.header_lines[0].startswith("HTTP/1.1 200")


@pytest.mark.asyncio
async def test_get_not_found(server, client) -> None:
    resp = await client.get(str(server.make_url("/missing")), 5)
    assert resp.status_code == 404
    assert resp.status_message == "Not Found"
    assert resp.success is False


@pytest.mark.asyncio
async def test_head_has_empty_body(server, client) -> None:
    resp = await client.head(str(server.make_url("/ok")), 5)
    assert resp.status_code == 200
    assert resp.body == b""


@pytest.mark.asyncio
async def test_user_agent_is_sent(server, client) -> None:
    resp = await client.get(str(server.make_url("/agent")), 5)
    assert resp.text == "webbot-test/1.0"


@pytest.mark.asyncio
async def test_only_user_agent_is_added(server, client) -> None:
    resp = await client.get(str(server.make_url("/headers")), 5)
    sent = json.loads(resp.text)
    assert sent["user-agent"] == "webbot-test/1.0"
    assert "accept" not in sent
    assert "accept-encoding" not in sent
    assert "cookie" not in sent


@pytest.mark.asyncio
async def test_unreachable_host_does_not_raise(client) -> None:
    resp = await client.get("http://127.0.0.1:1/", 2)
    assert resp.status_code == 0
    assert resp.success is False
    assert resp.body == b""
    assert isinstance(resp.outcome, Failed)


@pytest.mark.asyncio
async def test_timeout_does_not_raise(server, client) -> None:
    resp = await client.get(str(server.make_url("/slow")), 0.2)
    assert resp.status_code == 0
    assert resp.success is False


@pytest.mark.asyncio
async def test_body_is_capped(server, client) -> None:
    resp = await client.get(str(server.make_url("/big")), 5)
    assert resp.status_code == 200
    assert len(resp.body) == 1024


@pytest.mark.asyncio
async def test_bot_against_live_server(server, client) -> None:
    base = f"{server.host}:{server.port}"
    bot = FetchBot(
        {"a": f"{base}/ok", "b": f"{base}/missing", "dup": f"http://{base}/ok"},
        client,
        settings=Settings(DEFAULT_TIMEOUT_SECONDS=5, DELAY_BETWEEN_FETCHES_SECONDS=0, FORCE_HTTPS=False),
    )
    report = await bot.run()

    assert report.total_distinct == 2
    assert report.total_succeeded == 1
    assert report.total_failed == 1
    docs = {d.id: d for d in bot.documents.values()}
    assert docs["a"].find_between("<title>", "</title>") == "Hi"
    assert docs["b"].response.status_code == 404
