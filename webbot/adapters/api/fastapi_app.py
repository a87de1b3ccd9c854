# /webbot/adapters/api/fastapi_app.py
from __future__ import annotations
import logging
import uuid
from functools import lru_cache
from typing import Optional

from fastapi import Depends, FastAPI, Header, HTTPException
from pydantic import BaseModel

from webbot.config import settings
from webbot.adapters.system.logging_cfg import configure_logger
from webbot.ports.job_queue import RunQueuePort
from webbot.ports.run_store import RunStorePort

LOG = logging.getLogger("adapter.api")
app = FastAPI(title="webbot")
configure_logger(settings.LOG_LEVEL)


@lru_cache(maxsize=1)
def get_store() -> RunStorePort:
    from webbot.adapters.system.redis_run_store import RedisRunStore

    return RedisRunStore(settings.REDIS_URL, ttl_seconds=settings.RESULT_TTL_SECONDS)


@lru_cache(maxsize=1)
def get_queue() -> RunQueuePort:
    # importing celery_app wires the broker; keep it off the import path of the API module
    from webbot.adapters.system.celery_app import CeleryRunQueue

    return CeleryRunQueue()


def check_api_key(x_api_key: str | None = Header(default=None)) -> None:
    if settings.API_KEY and x_api_key != settings.API_KEY:
        raise HTTPException(status_code=401, detail="invalid api key")


class RunRequestModel(BaseModel):
    targets: dict[str, str] | list[str]
    start: Optional[str] = None
    end: Optional[str] = None
    store: bool = False
    fields: Optional[dict[str, tuple[str, str]]] = None

@app.get("/health")
def health() -> dict:
    return {"status": "ok"}

@app.post("/runs", dependencies=[Depends(check_api_key)])
def run_start(
    payload: RunRequestModel,
    store: RunStorePort = Depends(get_store),
    queue: RunQueuePort = Depends(get_queue),
) -> dict:
    if not payload.targets:
        raise HTTPException(status_code=400, detail="targets required")
    if (payload.start is None) != (payload.end is None):
        raise HTTPException(status_code=400, detail="start and end markers go together")

    run_id = str(uuid.uuid4())
    store.set_pending(run_id)

    job_id = queue.enqueue_run(run_id, payload.model_dump())
    LOG.info("run.enqueued", extra={"extra": {"run_id": run_id, "job_id": job_id}})
    return {"run_id": run_id, "status": "pending", "job_id": job_id}

@app.get("/runs/{run_id}", dependencies=[Depends(check_api_key)])
def run_result(run_id: str, store: RunStorePort = Depends(get_store)) -> dict:
    entry = store.get(run_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="run_id not found")
    return entry
