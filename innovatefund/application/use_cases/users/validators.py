"""Validation helpers shared by the user use cases."""

from __future__ import annotations

from innovatefund.domain.entities import USER_TYPES
from innovatefund.domain.exceptions import ValidationError

MIN_PASSWORD_LENGTH = 6
MAX_NAME_LENGTH = 100


def normalize_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Name is required")
    if len(cleaned) > MAX_NAME_LENGTH:
        raise ValidationError(f"Name must be at most {MAX_NAME_LENGTH} characters")
    return cleaned


def normalize_email(email: str) -> str:
    cleaned = (email or "").strip().lower()
    if "@" not in cleaned:
        raise ValidationError("A valid email address is required")
    return cleaned


def ensure_password(password: str) -> str:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )
    return password


def ensure_user_type(user_type: str) -> str:
    normalized = (user_type or "").strip().lower()
    if normalized not in USER_TYPES:
        raise ValidationError("userType must be one of: " + ", ".join(USER_TYPES))
    return normalized


__all__ = [
    "MAX_NAME_LENGTH",
    "MIN_PASSWORD_LENGTH",
    "ensure_password",
    "ensure_user_type",
    "normalize_email",
    "normalize_name",
]
