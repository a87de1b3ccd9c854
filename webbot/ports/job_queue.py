# /webbot/ports/job_queue.py
from __future__ import annotations

from typing import Any, Protocol


class RunQueuePort(Protocol):
    def enqueue_run(self, run_id: str, payload: dict[str, Any]) -> str:
        """Schedule a fetch run in the background; return the provider's job id."""
