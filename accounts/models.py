"""
Account data model.

These Pydantic models are both the in-memory representation and the
persisted JSON shape (model_dump(mode="json")). They are designed to be:
- Serializable: the whole collection round-trips through one JSON payload
- Redactable: AccountView is everything a caller may see
- Explicit: updates go through AccountPatch, which enumerates every writable field
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class CalendarType(str, Enum):
    """Calendar the birth date is expressed in."""
    SOLAR = "solar"
    LUNAR = "lunar"


class MembershipType(str, Enum):
    """Membership tier."""
    FREE = "free"
    PREMIUM = "premium"


class PurchaseRecord(BaseModel):
    """
    One entry of an account's purchase history.

    id and date are assigned by the ledger; any other caller-supplied
    fields are kept as extra attributes.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    type: str
    date: datetime


class ConsultationRecord(BaseModel):
    """One entry of an account's consultation history."""

    model_config = ConfigDict(extra="allow")

    id: str
    date: datetime


class AccountView(BaseModel):
    """
    Redacted account: every field except the credential verifier.

    This is the only account shape returned by the service and the only
    shape stored as the current session.
    """

    model_config = ConfigDict(extra="ignore")

    # ========================================
    # Identity
    # ========================================
    id: str
    email: str
    display_name: str

    # ========================================
    # Profile
    # ========================================
    phone: Optional[str] = None
    birth_date: Optional[str] = None
    birth_time: Optional[str] = None
    gender: Optional[str] = None
    calendar_type: CalendarType = CalendarType.SOLAR

    # ========================================
    # Membership
    # ========================================
    membership_type: MembershipType = MembershipType.FREE
    premium_expiry: Optional[datetime] = None

    # ========================================
    # Timestamps
    # ========================================
    created_at: datetime
    last_login: datetime

    # ========================================
    # Derived profile (computed by an external engine)
    # ========================================
    profile_data: Optional[Any] = None
    profile_computed_at: Optional[datetime] = None

    # ========================================
    # History (most recent first)
    # ========================================
    purchase_history: list[PurchaseRecord] = Field(default_factory=list)
    consultation_history: list[ConsultationRecord] = Field(default_factory=list)


class Account(AccountView):
    """Stored account record, including the credential verifier."""

    credential_verifier: str

    def redacted(self) -> AccountView:
        """Copy of this account without the credential verifier."""
        return AccountView.model_validate(
            self.model_dump(exclude={"credential_verifier"})
        )


class RegistrationInput(BaseModel):
    """
    Registration form.

    Every field is optional at the type level: presence and shape are
    checked by AccountService.register in a fixed order so the first
    violation is the one reported.
    """

    email: Optional[str] = None
    password: Optional[str] = None
    display_name: Optional[str] = None
    phone: Optional[str] = None
    birth_date: Optional[str] = None
    birth_time: Optional[str] = None
    gender: Optional[str] = None
    calendar_type: Optional[CalendarType] = None


class AccountPatch(BaseModel):
    """
    Explicit set of fields an update may change.

    Unknown fields are rejected, so id, history and timestamps can never
    be overwritten through an update. Only fields that were explicitly set
    are applied (model_dump(exclude_unset=True)).
    """

    model_config = ConfigDict(extra="forbid")

    email: Optional[str] = None
    password: Optional[str] = None
    display_name: Optional[str] = None
    phone: Optional[str] = None
    birth_date: Optional[str] = None
    birth_time: Optional[str] = None
    gender: Optional[str] = None
    calendar_type: Optional[CalendarType] = None
    membership_type: Optional[MembershipType] = None
    premium_expiry: Optional[datetime] = None


def apply_patch(account: Account, patch: AccountPatch) -> Account:
    """
    Shallow-merge the explicitly set fields of patch into account.

    The password field is skipped: turning it into a verifier is the
    service's job.
    """
    for field, value in patch.model_dump(exclude_unset=True, exclude={"password"}).items():
        setattr(account, field, value)
    return account
