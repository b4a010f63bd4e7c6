"""
Account-related request and response schemas.

These Pydantic models define the API contract and provide
automatic validation and documentation. Registration and update bodies
reuse accounts.models.RegistrationInput and AccountPatch directly.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from accounts.models import AccountView, ConsultationRecord, PurchaseRecord


class LoginRequest(BaseModel):
    """Request body for logging in."""

    email: str = Field(
        default="",
        description="Registered email address",
        examples=["alice@example.com"],
    )
    password: str = Field(
        default="",
        description="Account password",
    )


class PasswordResetRequest(BaseModel):
    """Request body for issuing a temporary password."""

    email: str = Field(
        ...,
        description="Registered email address",
        examples=["alice@example.com"],
    )


class ProfileDataRequest(BaseModel):
    """Derived profile computed by the external engine."""

    data: Any = Field(
        ...,
        description="Opaque computed-result blob stored as-is",
    )


class PurchaseRequest(BaseModel):
    """
    Purchase to record.

    Any extra fields are stored on the record as given.
    """

    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={
            "examples": [
                {"type": "premium_yearly", "amount": 99000, "currency": "KRW"},
            ]
        },
    )

    type: str = Field(
        ...,
        description="Purchase type; premium_monthly and premium_yearly grant premium",
        examples=["premium_monthly", "premium_yearly"],
    )


class ConsultationRequest(BaseModel):
    """Consultation to record. All fields are caller-defined."""

    model_config = ConfigDict(extra="allow")


class AccountResponse(BaseModel):
    """Envelope carrying a redacted account."""

    success: bool = True
    message: str = Field(
        default="",
        description="Human-readable status message",
    )
    account: Optional[AccountView] = Field(
        default=None,
        description="Redacted account (no credential verifier)",
    )


class SessionResponse(BaseModel):
    """Current session state."""

    authenticated: bool
    premium: bool = False
    account: Optional[AccountView] = None


class MessageResponse(BaseModel):
    """Envelope without payload."""

    success: bool = True
    message: str


class PurchaseResponse(BaseModel):
    success: bool = True
    purchase: PurchaseRecord


class ConsultationResponse(BaseModel):
    success: bool = True
    consultation: ConsultationRecord


class ConsultationCountResponse(BaseModel):
    """Consultations recorded today for one account."""

    account_id: str
    count: int = Field(
        ...,
        description="Consultations dated today in the reference time zone",
    )
