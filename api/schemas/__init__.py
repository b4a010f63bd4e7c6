"""
Pydantic schemas for API request/response validation.
"""

from api.schemas.account import (
    AccountResponse,
    ConsultationCountResponse,
    ConsultationRequest,
    ConsultationResponse,
    LoginRequest,
    MessageResponse,
    PasswordResetRequest,
    ProfileDataRequest,
    PurchaseRequest,
    PurchaseResponse,
    SessionResponse,
)

__all__ = [
    "AccountResponse",
    "ConsultationCountResponse",
    "ConsultationRequest",
    "ConsultationResponse",
    "LoginRequest",
    "MessageResponse",
    "PasswordResetRequest",
    "ProfileDataRequest",
    "PurchaseRequest",
    "PurchaseResponse",
    "SessionResponse",
]
