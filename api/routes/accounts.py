"""
Account management endpoints.

- POST /api/v1/accounts/register - Create account
- POST /api/v1/accounts/login - Authenticate and open session
- POST /api/v1/accounts/logout - Close session
- GET /api/v1/accounts/me - Current session
- POST /api/v1/accounts/password-reset - Issue temporary password
- GET/PATCH /api/v1/accounts/{account_id} - Read or update account
- PUT /api/v1/accounts/{account_id}/profile-data - Store derived profile
- POST /api/v1/accounts/{account_id}/purchases - Record purchase
- POST /api/v1/accounts/{account_id}/consultations - Record consultation
- GET /api/v1/accounts/{account_id}/consultations/today - Daily counter

Handlers are sync: the service blocks on storage and serializes writers
with its own lock. AccountError subclasses are rendered by the
application's exception handler.
"""

from fastapi import APIRouter, Depends, status

from accounts.models import AccountPatch, RegistrationInput
from accounts.service import AccountService
from api.dependencies import get_account_service
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
from core.logging import get_logger


logger = get_logger(__name__)
router = APIRouter(prefix="/api/v1/accounts", tags=["Accounts"])


@router.post("/register", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
def register(
    request: RegistrationInput,
    service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    """
    Create a new free account.

    Does not log the new account in.
    """
    account = service.register(request)
    return AccountResponse(message="Registration complete", account=account)


@router.post("/login", response_model=AccountResponse)
def login(
    request: LoginRequest,
    service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    """Authenticate and publish the session selected by X-Session-Id."""
    account = service.login(request.email, request.password)
    return AccountResponse(message="Logged in", account=account)


@router.post("/logout", response_model=MessageResponse)
def logout(
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    """Clear the session. Always succeeds."""
    service.logout()
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=SessionResponse)
def current_session(
    service: AccountService = Depends(get_account_service),
) -> SessionResponse:
    """
    Current session snapshot.

    The snapshot may be stale; GET /{account_id} returns the stored record.
    """
    account = service.current_account()
    return SessionResponse(
        authenticated=account is not None,
        premium=service.is_current_premium(),
        account=account,
    )


@router.post("/password-reset", response_model=MessageResponse)
def reset_password(
    request: PasswordResetRequest,
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    """
    Issue a temporary password and hand it to the delivery client.

    The temporary password is never part of the response.
    """
    service.reset_password(request.email)
    return MessageResponse(message="A temporary password has been sent to your email")


@router.get("/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: str,
    service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    return AccountResponse(account=service.get(account_id))


@router.patch("/{account_id}", response_model=AccountResponse)
def update_account(
    account_id: str,
    patch: AccountPatch,
    service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    """Apply an explicit patch; unknown fields are rejected with 422."""
    account = service.update(account_id, patch)
    return AccountResponse(message="Account updated", account=account)


@router.put("/{account_id}/profile-data", response_model=AccountResponse)
def save_profile_data(
    account_id: str,
    request: ProfileDataRequest,
    service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    account = service.save_profile_data(account_id, request.data)
    return AccountResponse(message="Profile data saved", account=account)


@router.post(
    "/{account_id}/purchases",
    response_model=PurchaseResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_purchase(
    account_id: str,
    request: PurchaseRequest,
    service: AccountService = Depends(get_account_service),
) -> PurchaseResponse:
    """Record a purchase; premium plans upgrade the membership."""
    record = service.add_purchase(account_id, request.model_dump())
    return PurchaseResponse(purchase=record)


@router.post(
    "/{account_id}/consultations",
    response_model=ConsultationResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_consultation(
    account_id: str,
    request: ConsultationRequest,
    service: AccountService = Depends(get_account_service),
) -> ConsultationResponse:
    record = service.add_consultation(account_id, request.model_dump())
    return ConsultationResponse(consultation=record)


@router.get(
    "/{account_id}/consultations/today",
    response_model=ConsultationCountResponse,
)
def count_today_consultations(
    account_id: str,
    service: AccountService = Depends(get_account_service),
) -> ConsultationCountResponse:
    """Daily consultation counter used for quota checks."""
    return ConsultationCountResponse(
        account_id=account_id,
        count=service.count_today_consultations(account_id),
    )
