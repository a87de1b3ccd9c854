# /webbot/ports/storage_sink.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class StoreResult:
    ok: bool
    path: str | None = None
    reason: str | None = None


class StorageSinkPort(Protocol):
    def store(self, filename: str, data: bytes | str) -> StoreResult:
        """Write data under filename, replacing any existing file. Never raises."""
