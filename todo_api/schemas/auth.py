"""Authentication schemas."""

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")

# Bcrypt ignores everything past 72 bytes of the secret.
MAX_PASSWORD_BYTES = 72


def check_password_bytes(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must not exceed {MAX_PASSWORD_BYTES} bytes")
    return value


class UserRegister(BaseModel):
    """User registration request."""

    username: str = Field(..., min_length=3, max_length=20)
    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=6)

    @field_validator("username")
    @classmethod
    def username_characters(cls, value: str) -> str:
        if not USERNAME_PATTERN.match(value):
            raise ValueError("Username can only contain letters, numbers, and underscores")
        return value

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("password")
    @classmethod
    def password_bytes(cls, value: str) -> str:
        return check_password_bytes(value)


class UserLogin(BaseModel):
    """User login request."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("password")
    @classmethod
    def password_bytes(cls, value: str) -> str:
        return check_password_bytes(value)


class UserResponse(BaseModel):
    """User information response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    email: str
    created_at: datetime
    updated_at: datetime


class AuthData(BaseModel):
    """Payload of register and login responses."""

    user: UserResponse
    token: str


class UserData(BaseModel):
    """Payload of the token verification response."""

    user: UserResponse
