"""
MongoDB storage backend implementation.

Each key is one document in a dedicated collection:
{"_id": <key>, "value": <payload>, "updated_at": <datetime>}.
"""

from typing import Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from core.errors import StorageUnavailableError
from core.logging import get_logger
from core.storage.base import BaseKeyValueStore
from core.timeutils import utc_now


logger = get_logger(__name__)


class MongoDBKeyValueStore(BaseKeyValueStore):
    """
    MongoDB-based key-value store.

    A single-document replace_one(upsert=True) keeps each set() atomic.
    """

    def __init__(
        self,
        connection_string: str,
        database_name: str = "saju_accounts",
        collection_name: str = "kv_store",
    ):
        """
        Initialize MongoDB store.

        Args:
            connection_string: MongoDB connection URI
            database_name: Database name
            collection_name: Collection holding the key documents
        """
        self._connection_string = connection_string
        self._database_name = database_name
        self._collection_name = collection_name
        self._client: Optional[MongoClient] = None
        self._collection_handle: Optional[Collection] = None

    def setup(self) -> None:
        """Initialize connection and verify the server is reachable."""
        try:
            self._client = MongoClient(self._connection_string)
            self._client.admin.command("ping")
            self._collection_handle = self._client[self._database_name][self._collection_name]
        except PyMongoError as e:
            raise StorageUnavailableError("setup", str(e)) from e

        logger.info(
            "MongoDB store initialized",
            database=self._database_name,
            collection=self._collection_name,
        )

    @property
    def _collection(self) -> Collection:
        if self._collection_handle is None:
            raise RuntimeError(
                "Store not initialized. Call setup() first."
            )
        return self._collection_handle

    def get(self, key: str) -> Optional[str]:
        try:
            doc = self._collection.find_one({"_id": key})
        except PyMongoError as e:
            raise StorageUnavailableError("read", str(e)) from e
        if doc is None:
            return None
        return doc["value"]

    def set(self, key: str, value: str) -> None:
        try:
            self._collection.replace_one(
                {"_id": key},
                {"_id": key, "value": value, "updated_at": utc_now()},
                upsert=True,
            )
        except PyMongoError as e:
            raise StorageUnavailableError("write", str(e)) from e

    def remove(self, key: str) -> None:
        try:
            self._collection.delete_one({"_id": key})
        except PyMongoError as e:
            raise StorageUnavailableError("remove", str(e)) from e

    def close(self) -> None:
        """Close MongoDB connection."""
        if self._client is not None:
            self._client.close()
            self._client = None
            self._collection_handle = None
        logger.info("MongoDB store closed")
