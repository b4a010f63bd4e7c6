"""
Credential codecs.

A codec turns a plaintext password into the verifier stored on the account
and checks a plaintext password against it.

LegacyCredentialCodec reproduces the verifier format of the Saju 2026 web
client: base64 of the password followed by one system-wide salt. It is
reversible by anyone who can read the code and offers no protection if the
store leaks. It exists so accounts created by that client keep working.

BcryptCredentialCodec is the per-account salted alternative. Switching
codecs is a stored-data migration: verifiers written by one codec do not
match under the other.

Example:
    >>> codec = LegacyCredentialCodec("saju2026_salt")
    >>> verifier = codec.encode("demo1234")
    >>> codec.matches("demo1234", verifier)
    True
"""

import base64
import binascii
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import bcrypt

from core.logging import get_logger


if TYPE_CHECKING:
    from core.config import Settings


logger = get_logger(__name__)


class CredentialCodec(ABC):
    """Contract shared by all credential codecs."""

    @abstractmethod
    def encode(self, secret: str) -> str:
        """Produce the stored verifier for secret."""
        pass

    @abstractmethod
    def matches(self, secret: str, verifier: str) -> bool:
        """True iff secret is the password behind verifier."""
        pass


class LegacyCredentialCodec(CredentialCodec):
    """
    Deterministic base64(secret + salt) verifier.

    Not a hash. encode() is pure and reproducible, and matches() is plain
    equality of encodings.
    """

    def __init__(self, salt: str = "saju2026_salt"):
        self._salt = salt

    def encode(self, secret: str) -> str:
        raw = (secret + self._salt).encode("utf-8")
        return base64.b64encode(raw).decode("ascii")

    def matches(self, secret: str, verifier: str) -> bool:
        return self.encode(secret) == verifier

    def decode(self, verifier: str) -> str:
        """
        Recover the plaintext behind a verifier.

        Only useful for migrating legacy accounts to another codec.
        """
        try:
            raw = base64.b64decode(verifier.encode("ascii"), validate=True).decode("utf-8")
        except (binascii.Error, UnicodeError) as e:
            raise ValueError("Not a legacy verifier") from e
        if not raw.endswith(self._salt):
            raise ValueError("Not a legacy verifier")
        return raw[: len(raw) - len(self._salt)]


class BcryptCredentialCodec(CredentialCodec):
    """
    Secure password hashing using bcrypt.

    Uses bcrypt for secure password hashing with automatic salt generation.
    Encoding the same password twice yields different verifiers.
    """

    def __init__(self, rounds: int = 12):
        """
        Initialize the hasher.

        Args:
            rounds: Number of bcrypt rounds. Higher is more secure but slower.
        """
        self._rounds = rounds

    def encode(self, secret: str) -> str:
        if not secret:
            raise ValueError("Password cannot be empty")

        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(secret.encode("utf-8"), salt).decode("utf-8")

    def matches(self, secret: str, verifier: str) -> bool:
        if not secret or not verifier:
            return False

        try:
            return bcrypt.checkpw(secret.encode("utf-8"), verifier.encode("utf-8"))
        except ValueError as e:
            logger.warning("Password verification failed", error=str(e))
            return False


def create_codec(settings: "Settings") -> CredentialCodec:
    """
    Create the configured credential codec.

    Args:
        settings: Application settings

    Returns:
        Codec instance
    """
    if settings.credential_codec == "bcrypt":
        logger.info("Using bcrypt credential codec", rounds=settings.bcrypt_rounds)
        return BcryptCredentialCodec(rounds=settings.bcrypt_rounds)

    logger.info("Using legacy credential codec")
    return LegacyCredentialCodec(salt=settings.credential_salt)
