"""
Mock delivery client.

Stands in for the email gateway: messages are kept in an in-memory outbox
instead of being sent. Tests read the outbox to learn the temporary password.

Key features:
- Thread-safe outbox
- Controllable failure mode for testing error handling
"""

import threading
import uuid
from dataclasses import dataclass
from typing import Optional

from core.logging import get_logger
from tools.delivery.base import (
    DeliveryReceipt,
    SecretDeliveryClient,
    SecretDeliveryError,
    mask_email,
)


logger = get_logger(__name__)


@dataclass
class OutboxMessage:
    """A message the mock client would have sent."""
    receipt: DeliveryReceipt
    secret: str


class MockDeliveryClient(SecretDeliveryClient):
    """
    Mock implementation of SecretDeliveryClient.

    Usage:
        client = MockDeliveryClient()
        service.reset_password("alice@example.com")
        secret = client.last_secret_for("alice@example.com")
    """

    CHANNEL = "mock-email"

    def __init__(self):
        self._outbox: list[OutboxMessage] = []
        self._failure: Optional[str] = None
        self._lock = threading.Lock()

    def deliver_temporary_secret(self, email: str, secret: str) -> DeliveryReceipt:
        """Record the message in the outbox."""
        with self._lock:
            if self._failure is not None:
                logger.warning(
                    "Temporary password delivery failed",
                    recipient=mask_email(email),
                    error=self._failure,
                )
                raise SecretDeliveryError(email, self._failure)

            receipt = DeliveryReceipt(
                delivery_id=f"mock-{uuid.uuid4().hex[:8]}",
                recipient=email,
                channel=self.CHANNEL,
            )
            self._outbox.append(OutboxMessage(receipt=receipt, secret=secret))

        logger.info(
            "Temporary password delivered",
            recipient=mask_email(email),
            delivery_id=receipt.delivery_id,
            channel=self.CHANNEL,
        )
        return receipt

    # =========================================
    # Testing utilities
    # =========================================

    @property
    def outbox(self) -> list[OutboxMessage]:
        with self._lock:
            return list(self._outbox)

    def last_secret_for(self, email: str) -> Optional[str]:
        """Most recent temporary password sent to email."""
        with self._lock:
            for message in reversed(self._outbox):
                if message.receipt.recipient == email:
                    return message.secret
        return None

    def force_failure(self, error: Optional[str]) -> None:
        """Make subsequent deliveries fail with error (None restores delivery)."""
        with self._lock:
            self._failure = error

    def clear_outbox(self) -> None:
        with self._lock:
            self._outbox.clear()
