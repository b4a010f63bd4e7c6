"""
In-process storage backend.

Values live only as long as the process. Used by tests and throwaway
development servers.
"""

from typing import Optional

from core.logging import get_logger
from core.storage.base import BaseKeyValueStore


logger = get_logger(__name__)


class MemoryKeyValueStore(BaseKeyValueStore):
    """Dictionary-backed key-value store."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def setup(self) -> None:
        logger.info("Memory store initialized", keys=len(self._data))

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def close(self) -> None:
        self._data.clear()
