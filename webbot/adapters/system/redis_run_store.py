# /webbot/adapters/system/redis_run_store.py
from __future__ import annotations
import json
import logging
from typing import Any

import redis

LOG = logging.getLogger("adapter.run_store.redis")

class RedisRunStore:
    """Run status hashes at ``<prefix>:<run_id>``; finished runs expire after ``ttl_seconds``."""

    def __init__(self, redis_url: str, prefix: str = "run", ttl_seconds: int = 86400) -> None:
        self._r = redis.Redis.from_url(redis_url, decode_responses=True)
        self._prefix = prefix
        self._ttl = ttl_seconds

    def _key(self, run_id: str) -> str:
        return f"{self._prefix}:{run_id}"

    def _finish(self, run_id: str, mapping: dict[str, str]) -> None:
        key = self._key(run_id)
        self._r.hset(key, mapping=mapping)
        if self._ttl > 0:
            self._r.expire(key, self._ttl)

    def set_pending(self, run_id: str) -> None:
        self._r.hset(self._key(run_id), mapping={"status": "pending"})
        LOG.info("store.set_pending", extra={"extra": {"run_id": run_id}})

    def set_error(self, run_id: str, error: str) -> None:
        self._finish(run_id, {"status": "error", "error": error})
        LOG.warning("store.set_error", extra={"extra": {"run_id": run_id, "error": error}})

    def set_result(self, run_id: str, result: dict) -> None:
        self._finish(run_id, {"status": "done", "result": json.dumps(result, default=str)})
        LOG.info("store.set_result", extra={"extra": {"run_id": run_id, "success": result.get("success")}})

    def get(self, run_id: str) -> dict | None:
        data = self._r.hgetall(self._key(run_id))
        if not data:
            return None
        out: dict[str, Any] = {"status": data.get("status")}
        if "error" in data:
            out["error"] = data["error"]
        if data.get("result") is not None:
            try:
                out["result"] = json.loads(data["result"])
            except json.JSONDecodeError:
                LOG.warning("store.corrupt_result", extra={"extra": {"run_id": run_id}})
                out["result"] = None
        return out
