"""
JSON file storage backend.

All keys live in one JSON object on disk. Every write rewrites the whole
document through a temporary file and os.replace(), so readers see either
the old document or the new one.
"""

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional

from core.errors import StorageUnavailableError
from core.logging import get_logger
from core.storage.base import BaseKeyValueStore


logger = get_logger(__name__)


class FileKeyValueStore(BaseKeyValueStore):
    """
    Key-value store persisted as a single JSON document.

    The document is a flat object mapping keys to string payloads.
    Every call holds the instance lock across its read-modify-write, so
    writers of different keys in one process never drop each other's
    changes. Separate processes sharing the file are not coordinated.
    """

    def __init__(self, path: str | Path):
        """
        Initialize file store.

        Args:
            path: Location of the JSON document (parent dirs are created on setup)
        """
        self._path = Path(path)
        self._lock = threading.RLock()

    @property
    def path(self) -> Path:
        return self._path

    def setup(self) -> None:
        """Create the parent directory and an empty document if missing."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._lock:
                if not self._path.exists():
                    self._write({})
        except OSError as e:
            raise StorageUnavailableError("setup", str(e)) from e

        logger.info("File store initialized", path=str(self._path))

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageUnavailableError("read", str(e)) from e

        if not isinstance(data, dict):
            raise StorageUnavailableError("read", "store document is not a JSON object")
        return data

    def _write(self, data: dict[str, str]) -> None:
        """Atomically save the document to disk."""
        try:
            temp_fd, temp_path = tempfile.mkstemp(
                dir=self._path.parent,
                suffix=".json.tmp",
            )
        except OSError as e:
            raise StorageUnavailableError("write", str(e)) from e

        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(temp_path, self._path)
        except OSError as e:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise StorageUnavailableError("write", str(e)) from e

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def remove(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if key in data:
                del data[key]
                self._write(data)

    def close(self) -> None:
        logger.info("File store closed", path=str(self._path))
