"""
PostgreSQL storage backend implementation.

Stores each key as one row of a small key/value table, using a
synchronous SQLAlchemy engine over psycopg.
"""

from typing import Optional

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.exc import SQLAlchemyError

from core.errors import StorageUnavailableError
from core.logging import get_logger
from core.storage.base import BaseKeyValueStore
from core.timeutils import utc_now


logger = get_logger(__name__)


class PostgresKeyValueStore(BaseKeyValueStore):
    """
    PostgreSQL-based key-value store.

    set() is a single INSERT ... ON CONFLICT statement inside its own
    transaction.
    """

    def __init__(
        self,
        connection_string: str,
        table_name: str = "kv_store",
        echo: bool = False,
    ):
        """
        Initialize PostgreSQL store.

        Args:
            connection_string: PostgreSQL sync connection URI (psycopg format)
            table_name: Table holding the key rows
            echo: Whether to echo SQL statements
        """
        self._connection_string = connection_string
        self._table = table_name
        self._echo = echo
        self._engine: Optional[Engine] = None

    def setup(self) -> None:
        """Initialize connection and create table if not exists."""
        try:
            self._engine = create_engine(
                self._connection_string,
                echo=self._echo,
                pool_pre_ping=True,
                pool_size=5,
                max_overflow=10,
            )
            with self._engine.begin() as conn:
                conn.execute(text(f"""
                    CREATE TABLE IF NOT EXISTS {self._table} (
                        key VARCHAR(255) PRIMARY KEY,
                        value TEXT NOT NULL,
                        updated_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP
                    )
                """))
        except SQLAlchemyError as e:
            raise StorageUnavailableError("setup", str(e)) from e

        logger.info("PostgreSQL store initialized", table=self._table)

    def _get_engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError(
                "Store not initialized. Call setup() first."
            )
        return self._engine

    def get(self, key: str) -> Optional[str]:
        try:
            with self._get_engine().connect() as conn:
                row = conn.execute(
                    text(f"SELECT value FROM {self._table} WHERE key = :key"),
                    {"key": key},
                ).first()
        except SQLAlchemyError as e:
            raise StorageUnavailableError("read", str(e)) from e
        return None if row is None else row[0]

    def set(self, key: str, value: str) -> None:
        try:
            with self._get_engine().begin() as conn:
                conn.execute(
                    text(f"""
                        INSERT INTO {self._table} (key, value, updated_at)
                        VALUES (:key, :value, :now)
                        ON CONFLICT (key) DO UPDATE SET
                            value = :value,
                            updated_at = :now
                    """),
                    {"key": key, "value": value, "now": utc_now()},
                )
        except SQLAlchemyError as e:
            raise StorageUnavailableError("write", str(e)) from e

    def remove(self, key: str) -> None:
        try:
            with self._get_engine().begin() as conn:
                conn.execute(
                    text(f"DELETE FROM {self._table} WHERE key = :key"),
                    {"key": key},
                )
        except SQLAlchemyError as e:
            raise StorageUnavailableError("remove", str(e)) from e

    def close(self) -> None:
        """Close database engine."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
        logger.info("PostgreSQL store closed")
