"""
FastAPI dependencies for dependency injection.

Provides singleton instances of core services to route handlers.
"""

from typing import Optional

from fastapi import Header

from accounts.factory import session_key
from accounts.service import AccountService
from accounts.session import SessionManager
from core.config import settings
from core.storage.base import BaseKeyValueStore


# Global singletons (set during app lifespan)
_store: Optional[BaseKeyValueStore] = None
_account_service: Optional[AccountService] = None


def set_store(store: Optional[BaseKeyValueStore]) -> None:
    """Set the global store instance."""
    global _store
    _store = store


def set_account_service(service: Optional[AccountService]) -> None:
    """Set the global account service instance."""
    global _account_service
    _account_service = service


def get_store() -> BaseKeyValueStore:
    """Dependency that provides the durable store."""
    if _store is None:
        raise RuntimeError("Store not initialized")
    return _store


def get_account_service(
    x_session_id: Optional[str] = Header(default=None),
) -> AccountService:
    """
    Dependency that provides the account service.

    The X-Session-Id header selects which session the service publishes
    to; without it the default session is used.

    Usage:
        @router.post("/login")
        def login(
            request: LoginRequest,
            service: AccountService = Depends(get_account_service),
        ):
            ...
    """
    if _account_service is None:
        raise RuntimeError("Account service not initialized")
    if not x_session_id:
        return _account_service
    return _account_service.with_session(
        SessionManager(get_store(), key=session_key(settings, x_session_id))
    )
