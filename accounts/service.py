"""
Account service - the single writer of account records.

Sits between callers (the HTTP layer, tests, scripts) and the repository,
credential codec, membership policy, history ledger, session manager and
secret delivery client. Each public method is one read-modify-write under
the repository lock and either returns a redacted result or raises an
AccountError subclass.
"""

import re
import secrets
import string
import uuid
from datetime import datetime
from typing import Any, Callable, Optional

from accounts.credentials import CredentialCodec
from accounts.ledger import HistoryLedger
from accounts.membership import MembershipPolicy
from accounts.models import (
    Account,
    AccountPatch,
    AccountView,
    CalendarType,
    ConsultationRecord,
    MembershipType,
    PurchaseRecord,
    RegistrationInput,
    apply_patch,
)
from accounts.repository import AccountRepository
from accounts.session import SessionManager
from core.errors import (
    EmailConflictError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from core.logging import get_logger
from core.timeutils import utc_now
from tools.delivery.base import SecretDeliveryClient, mask_email


logger = get_logger(__name__)


EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^01[0-9]-?[0-9]{4}-?[0-9]{4}$")
MIN_PASSWORD_LENGTH = 8

# Patch fields that may not be cleared
NON_NULLABLE_FIELDS = ("email", "password", "display_name", "calendar_type", "membership_type")

TEMP_PASSWORD_ALPHABET = string.ascii_lowercase + string.digits


def validate_email(email: str) -> None:
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("email", "invalid_format", "Email address is not valid")


def validate_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            "password",
            "too_short",
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
        )


def validate_phone(phone: str) -> None:
    if not PHONE_PATTERN.match(phone):
        raise ValidationError(
            "phone",
            "invalid_format",
            "Phone number is not valid (e.g. 010-1234-5678)",
        )


class AccountService:
    """
    Registration, login, updates and history for accounts.

    - Validates input and enforces email uniqueness
    - Encodes passwords through the credential codec
    - Publishes and clears the session it is bound to
    - Records purchases (with membership effects) and consultations

    Instances are cheap: with_session() returns a service sharing every
    collaborator except the session manager.
    """

    def __init__(
        self,
        repository: AccountRepository,
        codec: CredentialCodec,
        session: SessionManager,
        delivery: SecretDeliveryClient,
        policy: Optional[MembershipPolicy] = None,
        ledger: Optional[HistoryLedger] = None,
        clock: Callable[[], datetime] = utc_now,
        temporary_password_prefix: str = "temp",
        temporary_password_length: int = 8,
    ):
        """
        Initialize the service.

        Args:
            repository: Account collection
            codec: Password verifier codec
            session: Session this service publishes to
            delivery: Out-of-band channel for temporary passwords
            policy: Membership rules (default MembershipPolicy())
            ledger: History ledger (default built on policy)
            clock: Source of "now"; injectable for tests
            temporary_password_prefix: Prefix of reset passwords
            temporary_password_length: Random characters after the prefix
        """
        self._repository = repository
        self._codec = codec
        self._session = session
        self._delivery = delivery
        self._policy = policy or MembershipPolicy()
        self._ledger = ledger or HistoryLedger(self._policy)
        self._clock = clock
        self._temp_prefix = temporary_password_prefix
        self._temp_length = temporary_password_length

    @property
    def session(self) -> SessionManager:
        return self._session

    @property
    def policy(self) -> MembershipPolicy:
        return self._policy

    def with_session(self, session: SessionManager) -> "AccountService":
        """Same service, publishing to a different session."""
        return AccountService(
            repository=self._repository,
            codec=self._codec,
            session=session,
            delivery=self._delivery,
            policy=self._policy,
            ledger=self._ledger,
            clock=self._clock,
            temporary_password_prefix=self._temp_prefix,
            temporary_password_length=self._temp_length,
        )

    # =========================================
    # Internal helpers
    # =========================================

    def _require(self, account_id: str) -> Account:
        account = self._repository.find_by_id(account_id)
        if account is None:
            raise NotFoundError("Account", account_id)
        return account

    def _ensure_email_free(self, email: str, owner_id: Optional[str] = None) -> None:
        existing = self._repository.find_by_email(email)
        if existing is not None and existing.id != owner_id:
            raise EmailConflictError(email)

    def _refresh_session(self, account: Account) -> None:
        """Republish account if it is the one this session shows."""
        current = self._session.current()
        if current is not None and current.id == account.id:
            self._session.publish(account)

    def _generate_account_id(self, now: datetime) -> str:
        return f"user_{int(now.timestamp() * 1000)}_{uuid.uuid4().hex[:9]}"

    def _generate_temporary_password(self) -> str:
        suffix = "".join(secrets.choice(TEMP_PASSWORD_ALPHABET) for _ in range(self._temp_length))
        return self._temp_prefix + suffix

    # =========================================
    # Registration and authentication
    # =========================================

    def register(self, data: RegistrationInput) -> AccountView:
        """
        Create a new free account.

        Checks run in order and the first failure is raised:
        required fields, email shape, password length, phone shape,
        email uniqueness.

        Raises:
            ValidationError: Missing or malformed field
            EmailConflictError: Email already registered
        """
        for field in ("email", "password", "display_name"):
            if not getattr(data, field):
                raise ValidationError(field, "required", "Please fill in all required fields")

        validate_email(data.email)
        validate_password(data.password)
        if data.phone:
            validate_phone(data.phone)

        with self._repository.exclusive():
            self._ensure_email_free(data.email)

            now = self._clock()
            account = Account(
                id=self._generate_account_id(now),
                email=data.email,
                credential_verifier=self._codec.encode(data.password),
                display_name=data.display_name,
                phone=data.phone or None,
                birth_date=data.birth_date or None,
                birth_time=data.birth_time or None,
                gender=data.gender or None,
                calendar_type=data.calendar_type or CalendarType.SOLAR,
                membership_type=MembershipType.FREE,
                premium_expiry=None,
                created_at=now,
                last_login=now,
            )
            self._repository.upsert(account)

        logger.info("Account registered", account_id=account.id)
        return account.redacted()

    def login(self, email: str, password: str) -> AccountView:
        """
        Authenticate and publish the session.

        Raises:
            ValidationError: Email or password empty
            NotFoundError: No account with this email
            InvalidCredentialsError: Wrong password
        """
        if not email or not password:
            field = "email" if not email else "password"
            raise ValidationError(field, "required", "Please enter your email and password")

        with self._repository.exclusive():
            account = self._repository.find_by_email(email)
            if account is None:
                raise NotFoundError("Account", email)

            if not self._codec.matches(password, account.credential_verifier):
                logger.info("Login rejected", account_id=account.id)
                raise InvalidCredentialsError()

            account.last_login = self._clock()
            self._repository.upsert(account)
            view = self._session.publish(account)

        logger.info("Login succeeded", account_id=account.id)
        return view

    def logout(self) -> None:
        """Clear the session. Clearing an empty session is a no-op."""
        self._session.clear()

    def current_account(self) -> Optional[AccountView]:
        """Last published snapshot, possibly stale."""
        return self._session.current()

    def is_authenticated(self) -> bool:
        return self._session.is_authenticated()

    def is_current_premium(self) -> bool:
        """Premium entitlement of the session account, judged on its snapshot."""
        current = self._session.current()
        if current is None:
            return False
        return self._policy.is_premium_active(current, self._clock())

    # =========================================
    # Account maintenance
    # =========================================

    def get(self, account_id: str) -> AccountView:
        """
        Fresh redacted copy of an account.

        Raises:
            NotFoundError: Unknown id
        """
        return self._require(account_id).redacted()

    def update(self, account_id: str, patch: AccountPatch) -> AccountView:
        """
        Apply an explicit patch.

        A new password is encoded before storing. A changed email must be
        well-formed and not held by another account.

        Raises:
            NotFoundError: Unknown id
            ValidationError: Malformed or cleared field
            EmailConflictError: New email held by another account
        """
        changes = patch.model_dump(exclude_unset=True)
        for field in NON_NULLABLE_FIELDS:
            if field in changes and changes[field] in (None, ""):
                raise ValidationError(field, "required", f"{field} cannot be empty")
        if "email" in changes:
            validate_email(patch.email)
        if "password" in changes:
            validate_password(patch.password)
        if changes.get("phone"):
            validate_phone(patch.phone)

        with self._repository.exclusive():
            account = self._require(account_id)

            if "email" in changes and patch.email != account.email:
                self._ensure_email_free(patch.email, owner_id=account_id)

            if "password" in changes:
                account.credential_verifier = self._codec.encode(patch.password)

            apply_patch(account, patch)
            self._repository.upsert(account)
            self._refresh_session(account)

        logger.info(
            "Account updated",
            account_id=account_id,
            fields=sorted(changes),
        )
        return account.redacted()

    def reset_password(self, email: str) -> str:
        """
        Replace the password with a random temporary one.

        The plaintext goes to the delivery client and is returned for
        hand-off only; just its verifier is stored.

        Raises:
            NotFoundError: Unknown email
            SecretDeliveryError: Delivery client rejected the message
        """
        with self._repository.exclusive():
            account = self._repository.find_by_email(email)
            if account is None:
                raise NotFoundError("Account", email)

            temporary = self._generate_temporary_password()
            account.credential_verifier = self._codec.encode(temporary)
            self._repository.upsert(account)

        self._delivery.deliver_temporary_secret(email, temporary)
        logger.info("Temporary password issued", account_id=account.id, recipient=mask_email(email))
        return temporary

    def save_profile_data(self, account_id: str, data: Any) -> AccountView:
        """
        Store a derived profile computed by an external engine.

        Raises:
            NotFoundError: Unknown id
        """
        with self._repository.exclusive():
            account = self._require(account_id)
            account.profile_data = data
            account.profile_computed_at = self._clock()
            self._repository.upsert(account)
            self._refresh_session(account)

        logger.info("Profile data saved", account_id=account_id)
        return account.redacted()

    # =========================================
    # History
    # =========================================

    def add_purchase(self, account_id: str, purchase: dict[str, Any]) -> PurchaseRecord:
        """
        Record a purchase and apply its membership effect in one write.

        Raises:
            NotFoundError: Unknown id
            ValidationError: Purchase without a type
        """
        if not purchase.get("type"):
            raise ValidationError("type", "required", "Purchase type is required")

        with self._repository.exclusive():
            account = self._require(account_id)
            record = self._ledger.append_purchase(account, purchase, self._clock())
            self._repository.upsert(account)
            self._refresh_session(account)

        logger.info(
            "Purchase recorded",
            account_id=account_id,
            purchase_id=record.id,
            purchase_type=record.type,
            membership_type=account.membership_type.value,
        )
        return record

    def add_consultation(self, account_id: str, consultation: dict[str, Any]) -> ConsultationRecord:
        """
        Record a consultation.

        Raises:
            NotFoundError: Unknown id
        """
        with self._repository.exclusive():
            account = self._require(account_id)
            record = self._ledger.append_consultation(account, consultation, self._clock())
            self._repository.upsert(account)
            self._refresh_session(account)

        logger.info("Consultation recorded", account_id=account_id, consultation_id=record.id)
        return record

    def count_today_consultations(self, account_id: str) -> int:
        """Consultations recorded today; 0 for unknown accounts."""
        account = self._repository.find_by_id(account_id)
        if account is None:
            return 0
        return self._ledger.count_today(account, self._clock())
