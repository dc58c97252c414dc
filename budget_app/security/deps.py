from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError

from budget_app.schemas.user import TokenClaims
from budget_app.security.jwt_tokens import TokenError, decode_access_token


UNAUTHORIZED_RESOURCE = "Unauthorized to access this resource"

_bearer_scheme = HTTPBearer(auto_error=False)


def get_current_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
) -> TokenClaims:
    """Resolve the caller's identity from the access token alone; no database lookup."""
    if not credentials or not credentials.scheme.lower() == "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    try:
        payload = decode_access_token(credentials.credentials)
        return TokenClaims.model_validate(payload)
    except (TokenError, ValidationError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")


def check_user_type(claims: TokenClaims, role: str) -> None:
    if claims.user_type != role:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=UNAUTHORIZED_RESOURCE)


def match_user_type_to_uid(claims: TokenClaims, user_id: str) -> None:
    # a regular user may only address their own record
    if claims.user_type == "USER" and claims.uid != user_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=UNAUTHORIZED_RESOURCE)


def require_admin(claims: TokenClaims = Depends(get_current_claims)) -> TokenClaims:
    check_user_type(claims, "ADMIN")
    return claims
