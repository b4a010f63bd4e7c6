"""
Account error hierarchy.

Every failure an account operation can report is an AccountError subclass
carrying a stable code and an HTTP status. Service methods raise them;
callers decide whether to retry. to_response() renders the structured
failure envelope used by the HTTP layer.
"""

from typing import Any, Optional


class AccountError(Exception):
    """Base exception for all account engine errors."""

    code = "ACCOUNT_ERROR"
    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def details(self) -> dict[str, Any]:
        """Extra fields included in the error envelope."""
        return {}

    def to_response(self) -> dict[str, Any]:
        """Convert to standardized failure envelope."""
        return {
            "success": False,
            "message": self.message,
            "error": {
                "code": self.code,
                "message": self.message,
                **self.details(),
            },
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationError(AccountError):
    """Malformed or missing input; the caller corrects it and retries."""

    code = "VALIDATION_ERROR"
    http_status = 400

    def __init__(self, field: str, reason: str, message: Optional[str] = None):
        super().__init__(message or f"{field}: {reason}")
        self.field = field
        self.reason = reason

    def details(self) -> dict[str, Any]:
        return {"field": self.field, "reason": self.reason}


class NotFoundError(AccountError):
    """Referenced account id or email does not exist."""

    code = "NOT_FOUND"
    http_status = 404

    def __init__(self, resource: str, key: str):
        super().__init__(f"{resource} '{key}' not found")
        self.resource = resource
        self.key = key

    def details(self) -> dict[str, Any]:
        return {"resource": self.resource}


class InvalidCredentialsError(AccountError):
    """Supplied password does not match the stored verifier."""

    code = "INVALID_CREDENTIALS"
    http_status = 401

    def __init__(self):
        super().__init__("Password is incorrect")


class EmailConflictError(AccountError):
    """Email already belongs to another account."""

    code = "EMAIL_CONFLICT"
    http_status = 409

    def __init__(self, email: str):
        super().__init__(f"Email '{email}' is already registered")
        self.email = email


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StorageUnavailableError(AccountError):
    """Durable store could not be read or written. Not retried automatically."""

    code = "STORAGE_UNAVAILABLE"
    http_status = 503

    def __init__(self, operation: str, message: str):
        super().__init__(f"Storage {operation} failed: {message}")
        self.operation = operation

    def details(self) -> dict[str, Any]:
        return {"operation": self.operation}
