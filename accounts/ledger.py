"""
Purchase and consultation history.

The ledger mutates an Account in memory; persisting it is the caller's
job, so a purchase and the membership change it triggers land in the same
write. Record ids and dates always come from here, never from the caller.
"""

import uuid
from datetime import datetime
from typing import Any, Optional

from accounts.membership import MembershipPolicy
from accounts.models import Account, ConsultationRecord, PurchaseRecord, apply_patch
from core.timeutils import ensure_aware, local_date


RESERVED_FIELDS = ("id", "date")


def _caller_fields(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if k not in RESERVED_FIELDS}


class HistoryLedger:
    """Appends history records and counts today's consultations."""

    def __init__(
        self,
        policy: Optional[MembershipPolicy] = None,
        reference_timezone: str = "Asia/Seoul",
    ):
        """
        Initialize the ledger.

        Args:
            policy: Membership rules applied to purchases
            reference_timezone: IANA zone defining calendar days for count_today
        """
        self._policy = policy or MembershipPolicy()
        self._zone = reference_timezone

    def append_purchase(
        self,
        account: Account,
        purchase: dict[str, Any],
        now: datetime,
    ) -> PurchaseRecord:
        """
        Prepend a purchase record and apply its membership effect.

        Raises:
            ValueError: If purchase has no type
        """
        purchase_type = purchase.get("type")
        if not purchase_type:
            raise ValueError("Purchase requires a type")

        record = PurchaseRecord(
            **_caller_fields(purchase),
            id=f"purchase_{uuid.uuid4().hex}",
            date=ensure_aware(now),
        )
        account.purchase_history.insert(0, record)

        patch = self._policy.apply_purchase_effect(account, purchase_type, now)
        if patch is not None:
            apply_patch(account, patch)

        return record

    def append_consultation(
        self,
        account: Account,
        consultation: dict[str, Any],
        now: datetime,
    ) -> ConsultationRecord:
        record = ConsultationRecord(
            **_caller_fields(consultation),
            id=f"consult_{uuid.uuid4().hex}",
            date=ensure_aware(now),
        )
        account.consultation_history.insert(0, record)
        return record

    def count_today(self, account: Account, now: datetime) -> int:
        """Consultations dated on now's calendar day in the reference zone."""
        today = local_date(now, self._zone)
        return sum(
            1
            for record in account.consultation_history
            if local_date(record.date, self._zone) == today
        )
