"""User and authentication schemas."""

import re
from datetime import datetime
from typing import Annotated, Literal, Optional

from pydantic import AfterValidator, EmailStr, Field, model_validator

from .base import CamelModel

Role = Literal["student", "teacher", "admin", "superadmin", "staff"]

PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


def check_password_strength(value: str) -> str:
    if not PASSWORD_PATTERN.match(value):
        raise ValueError("Password must contain upper-case, lower-case letters and a digit")
    return value


StrongPassword = Annotated[str, Field(min_length=8), AfterValidator(check_password_strength)]


class User(CamelModel):
    """Signed-in user as seen by route handlers (no password hash)."""

    id: str
    email: str
    name: Optional[str] = None
    school: Optional[str] = None
    region: Optional[str] = None
    role: Optional[str] = None
    email_verified: Optional[datetime] = None
    created_at: Optional[datetime] = None


class RegisterRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: StrongPassword
    confirm_password: str = Field(..., min_length=1)
    school: str = Field(..., min_length=1, max_length=100)
    role: Literal["student", "teacher"]

    @model_validator(mode="after")
    def _passwords_match(self) -> "RegisterRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class RegisteredUser(CamelModel):
    id: str
    email: str
    name: Optional[str] = None


class RegisterResponse(CamelModel):
    message: str
    user: RegisteredUser


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginResponse(CamelModel):
    user: User
    token: str
    expires_in: int


class CurrentUserResponse(CamelModel):
    user: User


class PasswordResetRequest(CamelModel):
    email: EmailStr


class PasswordResetConfirmRequest(CamelModel):
    token: str = Field(..., min_length=1)
    password: StrongPassword
    confirm_password: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def _passwords_match(self) -> "PasswordResetConfirmRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class VerifyEmailRequest(CamelModel):
    token: str = Field(..., min_length=1)


class AdminUserUpdateRequest(CamelModel):
    """Partial update of any account by a school admin."""

    email: Optional[EmailStr] = None
    name: Optional[str] = Field(default=None, max_length=50)
    school: Optional[str] = Field(default=None, max_length=100)
    role: Optional[Literal["student", "teacher", "admin"]] = None
    student_id: Optional[str] = Field(default=None, max_length=50)
    grade: Optional[str] = Field(default=None, max_length=10)
    class_name: Optional[str] = Field(default=None, max_length=50)


class UserListItem(User):
    student_id: Optional[str] = None
    grade: Optional[str] = None
    class_label: Optional[str] = None
