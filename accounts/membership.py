"""
Membership entitlement rules.

Premium state is derived from the tier plus an optional expiry. A premium
account without expiry never lapses; a free account ignores any stale
expiry left on the record.
"""

from datetime import datetime
from typing import Optional

from accounts.models import AccountPatch, AccountView, MembershipType
from core.timeutils import add_months, ensure_aware


class MembershipPolicy:
    """
    Premium entitlement and purchase effects.

    PLAN_MONTHS maps purchase types that grant premium to the number of
    calendar months they add, counted from the purchase time.
    """

    PLAN_MONTHS: dict[str, int] = {
        "premium_monthly": 1,
        "premium_yearly": 12,
    }

    def is_premium_active(self, account: AccountView, now: datetime) -> bool:
        if account.membership_type != MembershipType.PREMIUM:
            return False
        if account.premium_expiry is None:
            return True
        return ensure_aware(account.premium_expiry) > ensure_aware(now)

    def apply_purchase_effect(
        self,
        account: AccountView,
        purchase_type: str,
        now: datetime,
    ) -> Optional[AccountPatch]:
        """
        Membership change implied by a purchase, or None.

        The new expiry is now plus the plan's calendar months, clamped to
        the last day of the target month.
        """
        months = self.PLAN_MONTHS.get(purchase_type)
        if months is None:
            return None

        return AccountPatch(
            membership_type=MembershipType.PREMIUM,
            premium_expiry=add_months(ensure_aware(now), months),
        )
