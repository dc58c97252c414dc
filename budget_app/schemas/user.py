from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator


UserType = Literal["ADMIN", "USER"]


class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    name: str = Field(min_length=2, max_length=100)
    user_type: UserType

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        # accounts are unique per address regardless of case
        return value.lower()


class SignInRequest(BaseModel):
    email: EmailStr
    password: str

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.lower()


class RefreshRequest(BaseModel):
    refresh_token: str = Field(min_length=1)


class InsertResult(BaseModel):
    inserted_id: str


class UserOut(BaseModel):
    user_id: str
    email: str
    name: str
    user_type: UserType
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class UserSession(UserOut):
    token: Optional[str]
    refresh_token: Optional[str]


class UserPage(BaseModel):
    total_count: int
    user_items: List[UserOut]


class TokenClaims(BaseModel):
    email: str
    name: str
    user_type: UserType
    uid: str
