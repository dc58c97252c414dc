import datetime as dt
import logging
import secrets
from typing import Any, Dict, Tuple

import jwt
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from budget_app.core.settings import settings
from budget_app.models.user import User


logger = logging.getLogger(__name__)


class TokenError(Exception):
    """Raised when a token cannot be signed, decoded, or persisted."""


def _utc_now() -> dt.datetime:
    return dt.datetime.now(tz=dt.timezone.utc)


def _identity_claims(email: str, name: str, user_type: str, user_id: str) -> Dict[str, Any]:
    return {
        "email": email,
        "name": name,
        "user_type": user_type,
        "uid": user_id,
        "iat": _utc_now(),
        "jti": secrets.token_hex(8),
    }


def create_access_token(email: str, name: str, user_type: str, user_id: str) -> str:
    payload = _identity_claims(email, name, user_type, user_id)
    payload["type"] = "access"
    payload["exp"] = _utc_now() + dt.timedelta(minutes=settings.access_token_expires_minutes)
    return jwt.encode(payload, settings.access_token_secret, algorithm=settings.jwt_algorithm)


def create_refresh_token(email: str, name: str, user_type: str, user_id: str) -> str:
    payload = _identity_claims(email, name, user_type, user_id)
    payload["type"] = "refresh"
    payload["exp"] = _utc_now() + dt.timedelta(days=settings.refresh_token_expires_days)
    return jwt.encode(payload, settings.refresh_token_secret, algorithm=settings.jwt_algorithm)


def generate_all_tokens(email: str, name: str, user_type: str, user_id: str) -> Tuple[str, str]:
    """Mint the access/refresh pair for a user.

    Signing failures surface as ``TokenError`` so handlers can answer 500.
    """
    try:
        access = create_access_token(email, name, user_type, user_id)
        refresh = create_refresh_token(email, name, user_type, user_id)
    except (jwt.PyJWTError, TypeError, ValueError, NotImplementedError) as exc:
        logger.error("Token signing failed for user %s: %s", user_id, exc)
        raise TokenError("Could not sign tokens") from exc
    return access, refresh


def update_all_tokens(db: Session, token: str, refresh_token: str, user_id: str) -> None:
    """Persist a freshly issued pair onto the user record, superseding the old one."""
    try:
        updated = (
            db.query(User)
            .filter(User.user_id == user_id)
            .update(
                {
                    User.token: token,
                    User.refresh_token: refresh_token,
                    User.updated_at: _utc_now(),
                },
                synchronize_session=False,
            )
        )
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Persisting tokens failed for user %s: %s", user_id, exc)
        raise TokenError("Could not store tokens") from exc
    if updated == 0:
        raise TokenError("Could not store tokens")


def _decode(token: str, secret: str, expected_type: str) -> Dict[str, Any]:
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.jwt_algorithm])
    except jwt.PyJWTError as exc:
        raise TokenError("Invalid token") from exc
    if payload.get("type") != expected_type or "uid" not in payload:
        raise TokenError("Invalid token")
    return payload


def decode_access_token(token: str) -> Dict[str, Any]:
    return _decode(token, settings.access_token_secret, "access")


def decode_refresh_token(token: str) -> Dict[str, Any]:
    return _decode(token, settings.refresh_token_secret, "refresh")
