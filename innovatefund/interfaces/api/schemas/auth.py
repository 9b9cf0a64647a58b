"""Authentication related schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import EmailStr, Field

from .base import CamelModel


class RegisterRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)
    user_type: Literal["innovator", "investor"]


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserRead(CamelModel):
    id: str
    name: str
    email: str
    user_type: str
    profile_picture: str = ""
    notifications_enabled: bool = True
    last_active: datetime | None = None
    created_at: datetime | None = None


class AuthResponse(CamelModel):
    token: str
    user: UserRead


class NotificationPreferenceRequest(CamelModel):
    enabled: bool


class NotificationPreferenceResponse(CamelModel):
    message: str
    user: UserRead
