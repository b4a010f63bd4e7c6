"""
Tests for the purchase and consultation ledger.
"""

from datetime import datetime, timedelta, timezone

import pytest

from accounts.ledger import HistoryLedger
from accounts.models import Account, MembershipType


NOW = datetime(2026, 10, 17, 3, 0, tzinfo=timezone.utc)  # 12:00 in Seoul


@pytest.fixture
def account() -> Account:
    return Account(
        id="user_1",
        email="alice@example.com",
        display_name="Alice",
        credential_verifier="verifier",
        created_at=NOW,
        last_login=NOW,
    )


@pytest.fixture
def ledger() -> HistoryLedger:
    return HistoryLedger(reference_timezone="Asia/Seoul")


class TestAppendPurchase:

    def test_assigns_id_and_date(self, ledger, account):
        record = ledger.append_purchase(account, {"type": "report_pdf", "amount": 5000}, NOW)

        assert record.id.startswith("purchase_")
        assert record.date == NOW
        assert record.type == "report_pdf"
        assert record.model_dump()["amount"] == 5000

    def test_caller_id_and_date_are_discarded(self, ledger, account):
        record = ledger.append_purchase(
            account,
            {"type": "report_pdf", "id": "forged", "date": "2000-01-01T00:00:00Z"},
            NOW,
        )

        assert record.id != "forged"
        assert record.date == NOW

    def test_prepends_most_recent_first(self, ledger, account):
        first = ledger.append_purchase(account, {"type": "a"}, NOW)
        second = ledger.append_purchase(account, {"type": "b"}, NOW + timedelta(minutes=1))

        assert [r.id for r in account.purchase_history] == [second.id, first.id]

    def test_premium_purchase_upgrades_same_account(self, ledger, account):
        ledger.append_purchase(account, {"type": "premium_yearly"}, NOW)

        assert account.membership_type == MembershipType.PREMIUM
        assert account.premium_expiry == datetime(2027, 10, 17, 3, 0, tzinfo=timezone.utc)

    def test_plain_purchase_keeps_membership(self, ledger, account):
        ledger.append_purchase(account, {"type": "report_pdf"}, NOW)

        assert account.membership_type == MembershipType.FREE
        assert account.premium_expiry is None

    def test_type_is_required(self, ledger, account):
        with pytest.raises(ValueError):
            ledger.append_purchase(account, {"amount": 1}, NOW)


class TestConsultations:

    def test_append_consultation(self, ledger, account):
        record = ledger.append_consultation(account, {"question": "career", "id": "x"}, NOW)

        assert record.id.startswith("consult_")
        assert record.date == NOW
        assert record.model_dump()["question"] == "career"
        assert account.consultation_history[0] is record

    def test_count_today(self, ledger, account):
        for hours in (0, 1, 2):
            ledger.append_consultation(account, {}, NOW - timedelta(hours=hours))
        for hours in (24, 30):
            ledger.append_consultation(account, {}, NOW - timedelta(hours=hours))

        assert ledger.count_today(account, NOW) == 3

    def test_day_boundary_uses_reference_zone(self, ledger, account):
        # 2026-10-16 15:30 UTC is 2026-10-17 00:30 in Seoul
        ledger.append_consultation(account, {}, datetime(2026, 10, 16, 15, 30, tzinfo=timezone.utc))
        # 2026-10-16 14:30 UTC is 2026-10-16 23:30 in Seoul
        ledger.append_consultation(account, {}, datetime(2026, 10, 16, 14, 30, tzinfo=timezone.utc))

        assert ledger.count_today(account, NOW) == 1
        assert HistoryLedger(reference_timezone="UTC").count_today(account, NOW) == 0

    def test_count_today_empty(self, ledger, account):
        assert ledger.count_today(account, NOW) == 0
