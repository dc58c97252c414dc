import secrets
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Text

from budget_app.db.session import Base


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def new_user_id() -> str:
    """Return a 24 character hex identifier, the same shape as a document object id."""
    return secrets.token_hex(12)


class User(Base):
    __tablename__ = "users"

    user_id = Column(String(24), primary_key=True, default=new_user_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(100), nullable=False)
    user_type = Column(String(20), nullable=False, server_default="USER")
    password = Column(String(255), nullable=False)
    token = Column(Text, nullable=True)
    refresh_token = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
