"""
Abstract base class for key-value storage backends.

This module defines the contract that all storage implementations must follow.
The account engine only needs string keys mapped to string payloads
(JSON documents encoded by the caller), so every backend implements the same
small get/set/remove surface.
"""

from abc import ABC, abstractmethod
from typing import Optional


class BaseKeyValueStore(ABC):
    """
    Abstract durable store with get/set/remove semantics.

    Implementations raise core.errors.StorageUnavailableError when the
    underlying medium cannot be read or written. A single set() call must be
    atomic: readers never observe a partially written value.
    """

    @abstractmethod
    def setup(self) -> None:
        """
        Initialize the storage backend (open files, create tables/indexes).

        This should be idempotent - safe to call multiple times.
        """
        pass

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the payload stored under key, or None."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store payload under key, replacing any previous value."""
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete key. Removing a missing key is a no-op."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Clean up resources (connections, pools)."""
        pass
