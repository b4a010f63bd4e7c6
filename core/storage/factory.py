"""
Storage factory for creating storage backend instances.

This module provides factory functions to create the appropriate
storage implementations based on configuration.
"""

from enum import Enum
from typing import TYPE_CHECKING

from core.logging import get_logger
from core.storage.base import BaseKeyValueStore


if TYPE_CHECKING:
    from core.config import Settings


logger = get_logger(__name__)


class StorageBackend(str, Enum):
    """Supported storage backends."""
    MEMORY = "memory"
    FILE = "file"
    MONGODB = "mongodb"
    POSTGRES = "postgres"


def get_storage_backend(settings: "Settings") -> StorageBackend:
    """
    Determine which storage backend to use based on settings.

    Args:
        settings: Application settings

    Returns:
        The configured storage backend
    """
    backend_str = settings.storage_backend.lower()

    try:
        return StorageBackend(backend_str)
    except ValueError:
        raise ValueError(
            f"Unsupported storage backend: {backend_str}. "
            f"Supported backends: {[b.value for b in StorageBackend]}"
        )


def create_store(settings: "Settings") -> BaseKeyValueStore:
    """
    Create a key-value store instance based on settings.

    Args:
        settings: Application settings

    Returns:
        Configured store instance (not yet initialized)
    """
    backend = get_storage_backend(settings)

    if backend == StorageBackend.MEMORY:
        from core.storage.memory import MemoryKeyValueStore

        logger.info("Creating in-memory store")
        return MemoryKeyValueStore()

    elif backend == StorageBackend.FILE:
        from core.storage.file import FileKeyValueStore

        logger.info("Creating file store", path=settings.storage_file_path)
        return FileKeyValueStore(settings.storage_file_path)

    elif backend == StorageBackend.MONGODB:
        from core.storage.mongodb import MongoDBKeyValueStore

        logger.info(
            "Creating MongoDB store",
            database=settings.mongodb_database,
        )
        return MongoDBKeyValueStore(
            connection_string=settings.mongodb_url,
            database_name=settings.mongodb_database,
            collection_name=settings.mongodb_collection,
        )

    elif backend == StorageBackend.POSTGRES:
        from core.storage.postgres import PostgresKeyValueStore

        logger.info("Creating PostgreSQL store")
        return PostgresKeyValueStore(
            connection_string=settings.postgres_sync_url,
            table_name=settings.postgres_table,
            echo=settings.debug,
        )

    else:
        raise ValueError(f"Unsupported backend: {backend}")
