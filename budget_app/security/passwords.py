import logging
from typing import Tuple

from passlib.context import CryptContext

from budget_app.core.settings import settings


logger = logging.getLogger(__name__)

INCORRECT_CREDENTIALS = "Email or password is incorrect"

_password_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
    pbkdf2_sha256__rounds=settings.password_hash_rounds,
)


class PasswordHashError(Exception):
    """Raised when the password transform itself fails."""


def hash_password(plain_password: str) -> str:
    try:
        return _password_context.hash(plain_password)
    except (TypeError, ValueError) as exc:
        logger.error("Password hashing failed: %s", exc)
        raise PasswordHashError("Could not hash password") from exc


def verify_password(plain_password: str, hashed_password: str) -> Tuple[bool, str]:
    """Check a candidate against a stored hash.

    Returns ``(True, "")`` on a match and ``(False, INCORRECT_CREDENTIALS)``
    otherwise, including when the stored hash cannot be parsed.
    """
    try:
        matched = _password_context.verify(plain_password, hashed_password)
    except (TypeError, ValueError):
        matched = False
    if not matched:
        return False, INCORRECT_CREDENTIALS
    return True, ""
