import logging
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from budget_app.models.user import User


logger = logging.getLogger(__name__)


class DuplicateEmailError(Exception):
    pass


class UserStoreError(Exception):
    pass


def count_by_email(db: Session, email: str) -> int:
    return db.query(func.count(User.user_id)).filter(User.email == email).scalar() or 0


def insert_user(db: Session, user: User) -> str:
    """Insert a new user and return its id.

    The unique constraint on ``email`` is the authority on duplicates, so two
    concurrent signups for one address cannot both succeed.
    """
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateEmailError(user.email) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Inserting user failed: %s", exc)
        raise UserStoreError("User item was not created") from exc
    return user.user_id


def find_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def find_by_user_id(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.user_id == user_id).first()


def list_page(db: Session, start_index: int, page_size: int) -> Tuple[int, List[User]]:
    total_count = db.query(func.count(User.user_id)).scalar() or 0
    users = (
        db.query(User)
        .order_by(User.created_at.asc(), User.user_id.asc())
        .offset(start_index)
        .limit(page_size)
        .all()
    )
    return total_count, users
