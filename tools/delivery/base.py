"""
Abstract base class for secret delivery clients.

Password reset hands the temporary password to one of these clients.
The transport (email, SMS, console) is the implementation's business;
the account engine only needs to know whether the hand-off was accepted.

Design principles:
- Fire-and-report: deliver once, return a receipt, never retry internally
- No persistence: clients must not store the plaintext anywhere durable
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime

from core.errors import AccountError
from core.timeutils import utc_now


@dataclass
class DeliveryReceipt:
    """
    Acknowledgement returned by a delivery client.

    Contains no secret material.
    """
    delivery_id: str
    recipient: str
    channel: str
    accepted_at: datetime = field(default_factory=utc_now)


class SecretDeliveryClient(ABC):
    """
    Abstract interface for out-of-band secret delivery.

    Usage:
        client = MockDeliveryClient()
        receipt = client.deliver_temporary_secret("alice@example.com", "tempab12cd34")
    """

    @abstractmethod
    def deliver_temporary_secret(self, email: str, secret: str) -> DeliveryReceipt:
        """
        Send a temporary password to the account owner.

        Args:
            email: Registered address of the account
            secret: Plaintext temporary password

        Returns:
            DeliveryReceipt for the accepted hand-off

        Raises:
            SecretDeliveryError: If the transport rejected the message
        """
        pass


class SecretDeliveryError(AccountError):
    """Delivery transport rejected the temporary password."""

    code = "DELIVERY_FAILED"
    http_status = 502

    def __init__(self, recipient: str, message: str):
        super().__init__(f"Could not deliver temporary password: {message}")
        self.recipient = recipient


def mask_email(email: str) -> str:
    """Mask the local part for logs: alice@example.com -> a***@example.com."""
    local, sep, domain = email.partition("@")
    if not sep:
        return "***"
    return f"{local[:1]}***@{domain}"
