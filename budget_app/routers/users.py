import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from budget_app.core.settings import settings
from budget_app.db.session import get_db
from budget_app.models.user import User, new_user_id
from budget_app.schemas.user import (
    InsertResult,
    RefreshRequest,
    SignInRequest,
    SignUpRequest,
    TokenClaims,
    UserOut,
    UserPage,
    UserSession,
)
from budget_app.security.deps import get_current_claims, match_user_type_to_uid, require_admin
from budget_app.security.jwt_tokens import (
    TokenError,
    decode_refresh_token,
    generate_all_tokens,
    update_all_tokens,
)
from budget_app.security.passwords import PasswordHashError, hash_password, verify_password
from budget_app.services.users import (
    DuplicateEmailError,
    UserStoreError,
    count_by_email,
    find_by_email,
    find_by_user_id,
    insert_user,
    list_page,
)


logger = logging.getLogger(__name__)

router = APIRouter()

DUPLICATE_EMAIL = "This email already exists"
USER_NOT_FOUND = "User not found"


# storage OFFSET/LIMIT take signed 64-bit integers
MAX_QUERY_INT = 2 ** 63 - 1


def _parse_positive(raw: Optional[str], default: int) -> int:
    try:
        value = int(raw) if raw is not None else default
    except ValueError:
        return default
    return value if 1 <= value <= MAX_QUERY_INT else default


def _parse_start_index(raw: Optional[str], page: int, page_size: int) -> int:
    derived = min((page - 1) * page_size, MAX_QUERY_INT)
    if raw is None:
        return derived
    try:
        value = int(raw)
    except ValueError:
        return derived
    return value if 0 <= value <= MAX_QUERY_INT else derived


def _issue_and_store(db: Session, user: User) -> User:
    """Mint a new pair for ``user``, persist it, and return the re-read record."""
    try:
        token, refresh = generate_all_tokens(user.email, user.name, user.user_type, user.user_id)
        update_all_tokens(db, token, refresh, user.user_id)
    except TokenError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
    stored = find_by_user_id(db, user.user_id)
    if stored is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=USER_NOT_FOUND)
    return stored


@router.post("/users/signup", response_model=InsertResult)
def sign_up(payload: SignUpRequest, db: Session = Depends(get_db)) -> InsertResult:
    try:
        hashed = hash_password(payload.password)
    except PasswordHashError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error whilst signing up"
        )

    if count_by_email(db, payload.email) > 0:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_EMAIL)

    user_id = new_user_id()
    try:
        token, refresh = generate_all_tokens(payload.email, payload.name, payload.user_type, user_id)
    except TokenError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))

    user = User(
        user_id=user_id,
        email=payload.email,
        name=payload.name,
        user_type=payload.user_type,
        password=hashed,
        token=token,
        refresh_token=refresh,
    )
    try:
        inserted_id = insert_user(db, user)
    except DuplicateEmailError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_EMAIL)
    except UserStoreError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))

    logger.info("User %s signed up as %s", inserted_id, payload.user_type)
    return InsertResult(inserted_id=inserted_id)


@router.post("/users/login", response_model=UserSession)
def sign_in(payload: SignInRequest, db: Session = Depends(get_db)) -> UserSession:
    found = find_by_email(db, payload.email)
    if found is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Email or password is incorrect"
        )

    password_is_valid, msg = verify_password(payload.password, found.password)
    if not password_is_valid:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=msg)

    user = _issue_and_store(db, found)
    logger.info("User %s signed in", user.user_id)
    return user


@router.post("/users/refresh", response_model=UserSession)
def refresh_tokens(payload: RefreshRequest, db: Session = Depends(get_db)) -> UserSession:
    try:
        claims = decode_refresh_token(payload.refresh_token)
    except TokenError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")

    found = find_by_user_id(db, claims["uid"])
    # only the most recently issued refresh token is accepted
    if found is None or found.refresh_token != payload.refresh_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")

    user = _issue_and_store(db, found)
    logger.info("Tokens rotated for user %s", user.user_id)
    return user


@router.get("/users", response_model=UserPage)
def get_users(
    _: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
    record_per_page: Optional[str] = Query(default=None, alias="recordPerPage"),
    page: Optional[str] = Query(default=None),
    start_index: Optional[str] = Query(default=None, alias="startIndex"),
) -> UserPage:
    page_size = _parse_positive(record_per_page, settings.default_page_size)
    page_number = _parse_positive(page, 1)
    offset = _parse_start_index(start_index, page_number, page_size)

    total_count, users = list_page(db, offset, page_size)
    return UserPage(
        total_count=total_count,
        user_items=[UserOut.model_validate(u) for u in users],
    )


@router.get("/users/{user_id}", response_model=UserOut)
def get_user(
    user_id: str,
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
) -> UserOut:
    match_user_type_to_uid(claims, user_id)

    user = find_by_user_id(db, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=USER_NOT_FOUND)
    return user
