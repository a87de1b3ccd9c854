# /webbot/adapters/storage/file_store.py
from __future__ import annotations

import logging
import os
from pathlib import Path

from webbot.ports.storage_sink import StoreResult

LOG = logging.getLogger("adapter.storage.file")


class FileStore:
    """Writes payloads into a single directory, overwriting existing files."""

    def __init__(self, directory: str) -> None:
        self._dir = Path(directory)

    @property
    def directory(self) -> Path:
        return self._dir

    def _failed(self, reason: str) -> StoreResult:
        LOG.warning("store.failed", extra={"extra": {"dir": str(self._dir), "error": reason}})
        return StoreResult(ok=False, reason=reason)

    def store(self, filename: str, data: bytes | str) -> StoreResult:
        if not self._dir.is_dir():
            return self._failed(f'Invalid data storage directory "{self._dir}"')

        if not os.access(self._dir, os.W_OK):
            return self._failed(f'Data storage directory "{self._dir}" is not writable')

        path = self._dir / filename.rstrip("/\\")
        payload = data.encode("utf-8") if isinstance(data, str) else data

        try:
            if path.is_file():
                path.unlink()
            path.write_bytes(payload)
        except OSError as e:
            return self._failed(f'Failed to save data to data file "{path}": {e}')

        LOG.info("store.written", extra={"extra": {"path": str(path), "bytes": len(payload)}})
        return StoreResult(ok=True, path=str(path))
