# /webbot/domain/fetch_bot.py
from __future__ import annotations

import asyncio
import enum
import hashlib
import logging
import re
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field

from webbot.config import Settings
from webbot.domain.document import Document
from webbot.domain.http_response import HttpResponse
from webbot.ports.http_client import HTTPClientPort

LOG = logging.getLogger("fetch_bot")

_HAS_SCHEME = re.compile(r"^https?://", re.IGNORECASE)


def normalize_url(url: str, force_https: bool = False) -> str:
    """'www.site.com/page' -> 'http://www.site.com/page'. An explicit scheme is never overridden."""
    url = url.strip()
    if not _HAS_SCHEME.match(url):
        url = f"{'https' if force_https else 'http'}://{url}"
    return url


def fingerprint(url: str) -> str:
    return hashlib.md5(url.encode("utf-8")).hexdigest()


class RunState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"


# ==== DTOs ====


@dataclass(slots=True)
class DocumentSummary:
    id: str
    url: str
    fingerprint: str
    status: int
    status_message: str
    mime_type: str
    charset: str
    success: bool
    error: str | None


@dataclass(slots=True)
class FetchReport:
    success: bool
    last_error: str | None
    total_distinct: int
    total_succeeded: int
    total_failed: int
    trace: list[str]
    documents: list[DocumentSummary] = field(default_factory=list)


# ==== Bot ====


class FetchBot:
    """
    Sequential batch fetcher: one GET per distinct normalized URL, in target order.
    Failures are recorded on the bot (last_error, counters, trace), never raised.
    """

    def __init__(
        self,
        targets: Mapping[str, str],
        client: HTTPClientPort,
        *,
        settings: Settings,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        self.targets: dict[str, str] = dict(targets)
        self.client = client
        self.settings = settings
        self._sleep = sleep

        self.documents: dict[str, Document] = {}
        self.trace: list[str] = []
        self.last_error: str | None = None
        self.success = False
        self.total_distinct = 0
        self.total_succeeded = 0
        self.total_failed = 0
        self.state = RunState.IDLE
        self._report: FetchReport | None = None

        if not self.targets:
            self._fail("Invalid number of URLs (zero URLs)", "__init__")
        else:
            self._log(f"{len(self.targets)} URL(s) initialized", "__init__")

    # --- small helpers to keep run() simple ---

    def _log(self, message: str, method: str) -> None:
        self.trace.append(f"{message} ({type(self).__name__}.{method})")
        LOG.info(message, extra={"extra": {"method": method}})

    def _fail(self, message: str, method: str) -> None:
        self.last_error = message
        self.trace.append(f"{message} ({type(self).__name__}.{method})")
        LOG.warning(message, extra={"extra": {"method": method}})

    async def _fetch_one(self, target_id: str, url: str) -> None:
        normalized = normalize_url(url, self.settings.FORCE_HTTPS)
        key = fingerprint(normalized)
        if key in self.documents:
            LOG.info("fetch.duplicate", extra={"extra": {"id": target_id, "url": normalized}})
            return

        self.total_distinct += 1
        try:
            response = await self.client.get(normalized, self.settings.DEFAULT_TIMEOUT_SECONDS)
        except Exception as e:
            # client broke the never-raise contract; keep the run going
            reason = f"{type(e).__name__}: {e}"
            self._fail(f'Fetch raised for ID "{target_id}" ({reason})', "run")
            response = HttpResponse.failed(normalized, reason)
        document = Document(response, target_id)
        self.documents[key] = document

        if document.success:
            self.total_succeeded += 1
        else:
            self.total_failed += 1

    def _build_report(self) -> FetchReport:
        return FetchReport(
            success=self.success,
            last_error=self.last_error,
            total_distinct=self.total_distinct,
            total_succeeded=self.total_succeeded,
            total_failed=self.total_failed,
            trace=list(self.trace),
            documents=[
                DocumentSummary(
                    id=doc.id,
                    url=doc.url,
                    fingerprint=key,
                    status=doc.response.status_code,
                    status_message=doc.response.status_message,
                    mime_type=doc.response.mime_type,
                    charset=doc.response.charset,
                    success=doc.success,
                    error=doc.response.error,
                )
                for key, doc in self.documents.items()
            ],
        )

    def _complete(self) -> FetchReport:
        self._log(f"{self.total_distinct} total documents", "run")
        self._log(f"{self.total_succeeded} documents fetched successfully", "run")
        self._log(f"{self.total_failed} documents failed to fetch", "run")

        self.success = self.last_error is None
        self.state = RunState.COMPLETED
        self._report = self._build_report()
        return self._report

    # --- primary entrypoints ---

    async def run(self) -> FetchReport:
        if self.state is RunState.COMPLETED and self._report is not None:
            LOG.info("run.already_completed")
            return self._report
        if self.state is RunState.RUNNING:
            raise RuntimeError("FetchBot.run() is already in progress")

        self.state = RunState.RUNNING
        self._log("Executing bot URL fetches", "run")
        delay = float(self.settings.DELAY_BETWEEN_FETCHES_SECONDS or 0)

        try:
            for i, (target_id, url) in enumerate(self.targets.items()):
                if i > 0 and delay > 0:
                    await self._sleep(delay)

                if not url or not url.strip():
                    self._fail(f'Invalid URL detected (empty URL with ID "{target_id}")', "run")
                    continue

                await self._fetch_one(target_id, url)
        except BaseException:
            # cancelled (e.g. worker time limit): close the run with what was fetched
            self._fail("Run interrupted before all targets were fetched", "run")
            self._complete()
            raise

        return self._complete()

    def execute(self) -> FetchReport:
        """Blocking entrypoint for sync callers; closes the client when the run ends."""

        async def _run() -> FetchReport:
            try:
                return await self.run()
            finally:
                await self.client.close()

        return asyncio.run(_run())
