"""
Tests for the account repository.
"""

import json
import threading
from datetime import datetime, timezone

import pytest

from accounts.models import Account
from accounts.repository import AccountRepository
from core.errors import StorageUnavailableError
from core.storage.memory import MemoryKeyValueStore


NOW = datetime(2026, 10, 17, 3, 0, tzinfo=timezone.utc)


def make_account(account_id: str, email: str) -> Account:
    return Account(
        id=account_id,
        email=email,
        display_name=account_id,
        credential_verifier="verifier",
        created_at=NOW,
        last_login=NOW,
    )


class TestSetup:

    def test_first_setup_writes_empty_collection(self):
        store = MemoryKeyValueStore()

        AccountRepository(store).setup()

        assert store.get("saju2026_users") == "[]"

    def test_setup_keeps_existing_accounts(self, repository):
        repository.upsert(make_account("user_1", "a@example.com"))

        repository.setup()

        assert [a.id for a in repository.list()] == ["user_1"]

    def test_setup_resets_corrupted_payload(self):
        store = MemoryKeyValueStore({"saju2026_users": "{broken"})
        repo = AccountRepository(store)

        repo.setup()

        assert repo.list() == []

    def test_corruption_after_setup_is_reported(self, store, repository):
        store.set("saju2026_users", "{broken")

        with pytest.raises(StorageUnavailableError):
            repository.list()

    def test_invalid_record_is_reported(self, store, repository):
        store.set("saju2026_users", json.dumps([{"id": "user_1"}]))

        with pytest.raises(StorageUnavailableError):
            repository.find_by_id("user_1")


class TestUpsert:

    def test_insert_preserves_order(self, repository):
        for i in range(3):
            repository.upsert(make_account(f"user_{i}", f"u{i}@example.com"))

        assert [a.id for a in repository.list()] == ["user_0", "user_1", "user_2"]

    def test_replace_by_id(self, repository):
        repository.upsert(make_account("user_1", "a@example.com"))
        repository.upsert(make_account("user_2", "b@example.com"))

        changed = make_account("user_1", "new@example.com")
        repository.upsert(changed)

        accounts = repository.list()
        assert [a.id for a in accounts] == ["user_1", "user_2"]
        assert accounts[0].email == "new@example.com"

    def test_one_write_per_upsert(self, repository, store, monkeypatch):
        writes = []
        original = store.set
        monkeypatch.setattr(store, "set", lambda k, v: (writes.append(k), original(k, v)))

        repository.upsert(make_account("user_1", "a@example.com"))

        assert writes == ["saju2026_users"]

    def test_concurrent_upserts_do_not_lose_accounts(self, repository):
        def worker(n: int) -> None:
            repository.upsert(make_account(f"user_{n}", f"u{n}@example.com"))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(repository.list()) == 20


class TestLookup:

    def test_find_by_id_and_email(self, repository):
        repository.upsert(make_account("user_1", "alice@example.com"))

        assert repository.find_by_id("user_1").email == "alice@example.com"
        assert repository.find_by_email("alice@example.com").id == "user_1"
        assert repository.find_by_id("missing") is None

    def test_email_lookup_is_case_sensitive(self, repository):
        repository.upsert(make_account("user_1", "alice@example.com"))

        assert repository.find_by_email("Alice@example.com") is None

    def test_list_without_setup_is_empty(self):
        assert AccountRepository(MemoryKeyValueStore()).list() == []
