# /webbot/ports/run_store.py
from __future__ import annotations

from typing import Protocol


class RunStorePort(Protocol):
    def set_pending(self, run_id: str) -> None: ...

    def set_error(self, run_id: str, error: str) -> None: ...

    def set_result(self, run_id: str, result: dict) -> None: ...

    def get(self, run_id: str) -> dict | None:
        """Return {"status": ..., "result"?: ..., "error"?: ...} or None if unknown."""
