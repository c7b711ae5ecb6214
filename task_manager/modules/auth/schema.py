from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime


def _normalize_email(value):
    if isinstance(value, str):
        value = value.strip().lower()
        if not value:
            raise ValueError("Email is required")
    return value


# ---------------- Request Schemas ----------------
class RegisterRequest(BaseModel):
    name: str = Field(..., description="Display name, 2-50 characters")
    email: EmailStr
    password: str = Field(..., description="At least 6 characters")

    @field_validator("name", mode="before")
    @classmethod
    def name_length(cls, v):
        if not isinstance(v, str) or not v.strip():
            raise ValueError("Name is required")
        v = v.strip()
        if not 2 <= len(v) <= 50:
            raise ValueError("Name must be between 2 and 50 characters")
        return v

    @field_validator("email", mode="before")
    @classmethod
    def email_normalized(cls, v):
        return _normalize_email(v)

    @field_validator("password", mode="before")
    @classmethod
    def password_length(cls, v):
        if not isinstance(v, str) or not v:
            raise ValueError("Password is required")
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters long")
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str

    @field_validator("email", mode="before")
    @classmethod
    def email_normalized(cls, v):
        return _normalize_email(v)

    @field_validator("password", mode="before")
    @classmethod
    def password_present(cls, v):
        if not isinstance(v, str) or not v:
            raise ValueError("Password is required")
        return v


# ---------------- Response Schemas ----------------
class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    createdAt: Optional[datetime] = None


class AuthResponse(BaseModel):
    user: UserResponse
    token: str
