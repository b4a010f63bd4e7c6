"""
Account repository.

The whole account collection is one JSON array stored under a single key
of the durable store. Every upsert rewrites the array with one set() call,
so readers never see a half-applied change.

Read-modify-write sequences must hold exclusive(): the repository lock is
shared by every service built on this repository instance.
"""

import json
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from pydantic import ValidationError as ModelValidationError

from accounts.models import Account
from core.errors import StorageUnavailableError
from core.logging import get_logger
from core.storage.base import BaseKeyValueStore


logger = get_logger(__name__)


class AccountRepository:
    """
    Durable collection of Account records.

    Accounts are kept in insertion order. Lookups are linear scans.
    """

    def __init__(self, store: BaseKeyValueStore, key: str = "saju2026_users"):
        """
        Initialize the repository.

        Args:
            store: Durable key-value store (already set up)
            key: Store key holding the account collection
        """
        self._store = store
        self._key = key
        self._lock = threading.RLock()

    @contextmanager
    def exclusive(self) -> Iterator[None]:
        """Serialize a read-modify-write against this repository."""
        with self._lock:
            yield

    def setup(self) -> None:
        """
        First-ever initialization of the collection.

        A missing payload is written as an empty collection. A corrupted
        payload is logged and reset here, and only here.
        """
        with self._lock:
            payload = self._store.get(self._key)
            if payload is None:
                self._store.set(self._key, "[]")
                logger.info("Account collection created", key=self._key)
                return

            try:
                self._decode(payload)
            except StorageUnavailableError as e:
                logger.warning(
                    "Corrupted account collection reset",
                    key=self._key,
                    error=e.message,
                )
                self._store.set(self._key, "[]")

    def _decode(self, payload: str) -> list[Account]:
        try:
            raw = json.loads(payload)
        except json.JSONDecodeError as e:
            raise StorageUnavailableError("read", f"corrupted account collection: {e}") from e

        if not isinstance(raw, list):
            raise StorageUnavailableError("read", "account collection is not a JSON array")

        try:
            return [Account.model_validate(item) for item in raw]
        except ModelValidationError as e:
            raise StorageUnavailableError("read", f"invalid account record: {e}") from e

    def _encode(self, accounts: list[Account]) -> str:
        return json.dumps(
            [account.model_dump(mode="json") for account in accounts],
            ensure_ascii=False,
        )

    def list(self) -> list[Account]:
        """All accounts in insertion order."""
        with self._lock:
            payload = self._store.get(self._key)
            if payload is None:
                return []
            return self._decode(payload)

    def find_by_id(self, account_id: str) -> Optional[Account]:
        for account in self.list():
            if account.id == account_id:
                return account
        return None

    def find_by_email(self, email: str) -> Optional[Account]:
        for account in self.list():
            if account.email == email:
                return account
        return None

    def upsert(self, account: Account) -> None:
        """Replace the record with the same id, else append it."""
        with self._lock:
            accounts = self.list()
            for index, existing in enumerate(accounts):
                if existing.id == account.id:
                    accounts[index] = account
                    break
            else:
                accounts.append(account)

            self._store.set(self._key, self._encode(accounts))

        logger.debug("Account stored", account_id=account.id)
