"""
Storage abstraction layer.

Provides pluggable key-value stores holding the account collection
and the current-session snapshot as JSON payloads.

Supported backends:
- Memory (tests)
- JSON file (default, local development)
- MongoDB
- PostgreSQL
"""

from core.storage.base import BaseKeyValueStore
from core.storage.factory import (
    create_store,
    get_storage_backend,
    StorageBackend,
)
from core.storage.memory import MemoryKeyValueStore

__all__ = [
    # Abstract interface
    "BaseKeyValueStore",
    "MemoryKeyValueStore",
    # Factory functions
    "create_store",
    "get_storage_backend",
    "StorageBackend",
]
