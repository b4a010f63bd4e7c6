"""
Factory for wiring an AccountService from settings.

Keeps the HTTP layer, scripts and tests from repeating the collaborator
graph: store -> repository -> codec/policy/ledger -> service.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Callable, Optional

from accounts.credentials import create_codec
from accounts.ledger import HistoryLedger
from accounts.membership import MembershipPolicy
from accounts.repository import AccountRepository
from accounts.service import AccountService
from accounts.session import SessionManager
from core.logging import get_logger
from core.storage.base import BaseKeyValueStore
from core.timeutils import utc_now
from tools.delivery.base import SecretDeliveryClient


if TYPE_CHECKING:
    from core.config import Settings


logger = get_logger(__name__)


def session_key(settings: "Settings", session_id: Optional[str] = None) -> str:
    """Store key of a session; the bare key is the default session."""
    if not session_id:
        return settings.current_user_storage_key
    return f"{settings.current_user_storage_key}:{session_id}"


def create_account_service(
    settings: "Settings",
    store: BaseKeyValueStore,
    delivery: SecretDeliveryClient,
    clock: Callable[[], datetime] = utc_now,
) -> AccountService:
    """
    Build an AccountService bound to the default session.

    The store must already be set up. The account collection is
    initialized here (idempotent).

    Args:
        settings: Application settings
        store: Durable key-value store
        delivery: Temporary password delivery client
        clock: Source of "now"

    Returns:
        Ready-to-use service
    """
    repository = AccountRepository(store, key=settings.users_storage_key)
    repository.setup()

    policy = MembershipPolicy()
    ledger = HistoryLedger(policy, reference_timezone=settings.reference_timezone)

    logger.info(
        "Account service created",
        storage_backend=settings.storage_backend,
        credential_codec=settings.credential_codec,
        reference_timezone=settings.reference_timezone,
    )

    return AccountService(
        repository=repository,
        codec=create_codec(settings),
        session=SessionManager(store, key=session_key(settings)),
        delivery=delivery,
        policy=policy,
        ledger=ledger,
        clock=clock,
        temporary_password_prefix=settings.temporary_password_prefix,
        temporary_password_length=settings.temporary_password_length,
    )
