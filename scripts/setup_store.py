"""
Storage setup script.

Initializes the configured store (file, table or collection) and the
account collection. Safe to run repeatedly.
Run this before starting the application.

Usage:
    python -m scripts.setup_store
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from accounts.repository import AccountRepository
from core.config import settings
from core.errors import StorageUnavailableError
from core.logging import configure_logging, get_logger
from core.storage import create_store


logger = get_logger(__name__)


def setup_store() -> int:
    """Create the store and account collection; return the account count."""
    store = create_store(settings)
    try:
        store.setup()
        repository = AccountRepository(store, key=settings.users_storage_key)
        repository.setup()
        count = len(repository.list())
    finally:
        store.close()

    logger.info(
        "Storage setup complete",
        storage_backend=settings.storage_backend,
        accounts=count,
    )
    return count


if __name__ == "__main__":
    configure_logging()
    try:
        setup_store()
    except StorageUnavailableError as e:
        logger.error("Storage setup failed", error=e.message)
        sys.exit(1)
