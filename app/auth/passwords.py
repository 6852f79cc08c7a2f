"""
AuthNotes - Password hashing.

Bcrypt via passlib. Verification goes through the scheme's own routine and
fails closed: anything that goes wrong while checking counts as a mismatch.
"""
import logging
from typing import Any, Dict, Optional

from passlib.context import CryptContext

from ..config import settings

logger = logging.getLogger("authnotes.auth")

MIN_BCRYPT_ROUNDS = 10


class PasswordHasher:
    """Salted, deliberately slow one-way password hashing."""

    def __init__(self, rounds: Optional[int] = None):
        rounds = rounds or settings.auth.bcrypt_rounds
        if rounds < MIN_BCRYPT_ROUNDS:
            raise ValueError(f"bcrypt rounds must be at least {MIN_BCRYPT_ROUNDS}")
        self._pwd_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        """Hash a password with a fresh random salt."""
        return self._pwd_context.hash(password)

    def verify(self, plain_password: str, hashed_password: Optional[str]) -> bool:
        """
        Verify a password against its hash.

        Returns False for a wrong password, a missing hash, or a hash
        the context cannot parse.
        """
        if not hashed_password:
            return False
        try:
            return self._pwd_context.verify(plain_password, hashed_password)
        except Exception as e:
            logger.error("Password verification failed: %s", type(e).__name__)
            return False


def check_password_strength(password: str) -> Dict[str, Any]:
    """
    Check password strength and return feedback.

    Returns:
        Dict with 'valid' bool and 'errors' list
    """
    errors = []

    if len(password) < 8:
        errors.append("Password must be at least 8 characters")
    if len(password) > 128:
        errors.append("Password must be less than 128 characters")
    if not any(c.isupper() for c in password):
        errors.append("Password should contain at least one uppercase letter")
    if not any(c.islower() for c in password):
        errors.append("Password should contain at least one lowercase letter")
    if not any(c.isdigit() for c in password):
        errors.append("Password should contain at least one number")

    return {
        "valid": len(errors) == 0,
        "errors": errors,
    }
