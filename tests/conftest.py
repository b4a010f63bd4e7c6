"""
Pytest configuration and fixtures.
"""

import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Set test environment
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("CREDENTIAL_CODEC", "legacy")
os.environ.setdefault("REFERENCE_TIMEZONE", "Asia/Seoul")

from accounts.credentials import LegacyCredentialCodec
from accounts.ledger import HistoryLedger
from accounts.membership import MembershipPolicy
from accounts.repository import AccountRepository
from accounts.service import AccountService
from accounts.session import SessionManager
from core.storage.memory import MemoryKeyValueStore
from tools.delivery.mock_client import MockDeliveryClient


class FrozenClock:
    """Manually advanced clock for deterministic timestamps."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    """Clock frozen at 2026-10-17 12:00 in Seoul."""
    return FrozenClock(datetime(2026, 10, 17, 3, 0, tzinfo=timezone.utc))


@pytest.fixture
def store():
    return MemoryKeyValueStore()


@pytest.fixture
def repository(store):
    repo = AccountRepository(store, key="saju2026_users")
    repo.setup()
    return repo


@pytest.fixture
def session(store):
    return SessionManager(store, key="saju2026_current_user")


@pytest.fixture
def delivery():
    return MockDeliveryClient()


@pytest.fixture
def service(repository, session, delivery, clock):
    """Account service over an in-memory store with the legacy codec."""
    policy = MembershipPolicy()
    return AccountService(
        repository=repository,
        codec=LegacyCredentialCodec("saju2026_salt"),
        session=session,
        delivery=delivery,
        policy=policy,
        ledger=HistoryLedger(policy, reference_timezone="Asia/Seoul"),
        clock=clock,
    )
