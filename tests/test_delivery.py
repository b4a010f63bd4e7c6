"""
Tests for MockDeliveryClient.

Verifies that the mock client behaves correctly for testing purposes.
"""

import pytest

from tools.delivery.base import SecretDeliveryError, mask_email
from tools.delivery.mock_client import MockDeliveryClient


@pytest.fixture
def mock_client():
    return MockDeliveryClient()


def test_deliver_records_outbox(mock_client):
    receipt = mock_client.deliver_temporary_secret("alice@example.com", "tempab12cd34")

    assert receipt.delivery_id.startswith("mock-")
    assert receipt.recipient == "alice@example.com"
    assert receipt.channel == "mock-email"
    assert len(mock_client.outbox) == 1


def test_last_secret_for(mock_client):
    mock_client.deliver_temporary_secret("alice@example.com", "tempfirst01")
    mock_client.deliver_temporary_secret("bob@example.com", "tempbob0001")
    mock_client.deliver_temporary_secret("alice@example.com", "tempsecond2")

    assert mock_client.last_secret_for("alice@example.com") == "tempsecond2"
    assert mock_client.last_secret_for("carol@example.com") is None


def test_forced_failure(mock_client):
    mock_client.force_failure("gateway down")

    with pytest.raises(SecretDeliveryError) as exc_info:
        mock_client.deliver_temporary_secret("alice@example.com", "tempab12cd34")

    assert exc_info.value.recipient == "alice@example.com"
    assert mock_client.outbox == []

    mock_client.force_failure(None)
    mock_client.deliver_temporary_secret("alice@example.com", "tempab12cd34")
    assert len(mock_client.outbox) == 1


def test_receipt_has_no_secret(mock_client):
    receipt = mock_client.deliver_temporary_secret("alice@example.com", "tempab12cd34")

    assert "tempab12cd34" not in repr(receipt)


def test_clear_outbox(mock_client):
    mock_client.deliver_temporary_secret("alice@example.com", "tempab12cd34")

    mock_client.clear_outbox()

    assert mock_client.outbox == []


@pytest.mark.parametrize(
    "email, masked",
    [
        ("alice@example.com", "a***@example.com"),
        ("not-an-email", "***"),
    ],
)
def test_mask_email(email, masked):
    assert mask_email(email) == masked
