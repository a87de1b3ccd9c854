# /webbot/adapters/system/celery_app.py
from __future__ import annotations
import asyncio
import logging
from typing import Any

from celery import Celery

from webbot.config import settings
from webbot.adapters.http.aiohttp_client import AiohttpClient
from webbot.adapters.storage.file_store import FileStore
from webbot.adapters.system.logging_cfg import configure_logger
from webbot.adapters.system.redis_run_store import RedisRunStore
from webbot.domain.run_service import RunRequestDTO, perform_run, targets_from

LOG = logging.getLogger("adapter.celery")
configure_logger(settings.LOG_LEVEL)

celery_app = Celery("webbot", broker=settings.REDIS_URL, backend=settings.REDIS_URL)
celery_app.conf.update(
    worker_prefetch_multiplier=1,
    task_acks_late=True,
    # runs are sequential with an optional delay per target
    task_time_limit=3600,
)

_store = RedisRunStore(settings.REDIS_URL, ttl_seconds=settings.RESULT_TTL_SECONDS)


class CeleryRunQueue:
    def enqueue_run(self, run_id: str, payload: dict[str, Any]) -> str:
        job = celery_app.send_task("fetch_run", args=[run_id, payload], kwargs=None)
        return str(job.id)


def _request_from(payload: dict[str, Any]) -> RunRequestDTO:
    return RunRequestDTO(
        targets=targets_from(payload["targets"]),
        start=payload.get("start"),
        end=payload.get("end"),
        store=bool(payload.get("store", False)),
        extra_fields={k: (v[0], v[1]) for k, v in (payload.get("fields") or {}).items()},
    )


@celery_app.task(name="fetch_run", bind=True)
def fetch_run(self, run_id: str, payload: dict[str, Any]) -> str:
    """Execute one bot run and persist the report or the error."""
    try:
        LOG.info("run.job.accepted", extra={"extra": {"run_id": run_id}})
        req = _request_from(payload)

        async def _run() -> dict:
            # fresh client per task: asyncio.run() gives each task its own loop
            client = AiohttpClient(settings)
            try:
                return await perform_run(req, client, settings=settings, sink=FileStore(settings.STORE_DIR))
            finally:
                await client.close()

        result = asyncio.run(_run())
        _store.set_result(run_id, result)
        LOG.info("run.job.done", extra={"extra": {"run_id": run_id}})
        return "ok"

    except Exception as e:
        _store.set_error(run_id, str(e))
        LOG.exception("run.job.error", extra={"extra": {"run_id": run_id}})
        raise
