"""
Secret delivery tools for handing temporary passwords to account owners.

Exports the abstract interface and implementations.
"""

from tools.delivery.base import DeliveryReceipt, SecretDeliveryClient, SecretDeliveryError
from tools.delivery.mock_client import MockDeliveryClient

__all__ = [
    "DeliveryReceipt",
    "SecretDeliveryClient",
    "SecretDeliveryError",
    "MockDeliveryClient",
]
