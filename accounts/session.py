"""
Current-session tracking.

A SessionManager holds at most one redacted account: the one that last
logged in through it. The snapshot lives in the durable store under the
manager's own key, independent of the account collection, and is not
refreshed when the underlying account changes elsewhere. Callers that need
a fresh copy re-fetch by id.
"""

import json
from typing import Optional

from pydantic import ValidationError as ModelValidationError

from accounts.models import Account, AccountView
from core.errors import StorageUnavailableError
from core.storage.base import BaseKeyValueStore


class SessionManager:
    """Explicit holder of the currently authenticated account view."""

    def __init__(self, store: BaseKeyValueStore, key: str = "saju2026_current_user"):
        self._store = store
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def publish(self, account: AccountView) -> AccountView:
        """Store a redacted copy of account as current and return it."""
        view = account.redacted() if isinstance(account, Account) else account
        self._store.set(self._key, view.model_dump_json())
        return view

    def current(self) -> Optional[AccountView]:
        payload = self._store.get(self._key)
        if payload is None:
            return None
        try:
            return AccountView.model_validate(json.loads(payload))
        except (json.JSONDecodeError, ModelValidationError) as e:
            raise StorageUnavailableError("read", f"corrupted session payload: {e}") from e

    def clear(self) -> None:
        self._store.remove(self._key)

    def is_authenticated(self) -> bool:
        return self.current() is not None
