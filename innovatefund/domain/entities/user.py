"""Domain entity representing a user."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

USER_TYPE_INNOVATOR = "innovator"
USER_TYPE_INVESTOR = "investor"
USER_TYPES: tuple[str, ...] = (USER_TYPE_INNOVATOR, USER_TYPE_INVESTOR)


@dataclass
class User:
    """Core attributes describing a principal of the marketplace."""

    id: str | None
    name: str
    email: str
    password: str
    user_type: str
    profile_picture: str = ""
    push_token: str | None = None
    notifications_enabled: bool = True
    is_active: bool = True
    last_active: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_investor(self) -> bool:
        """Return ``True`` when the user provides capital."""

        return self.user_type == USER_TYPE_INVESTOR

    def summary(self) -> "UserSummary":
        return UserSummary(
            id=self.id or "", name=self.name, profile_picture=self.profile_picture
        )


@dataclass(frozen=True)
class UserSummary:
    """Display fields attached to notifications and chat messages."""

    id: str
    name: str
    profile_picture: str = ""


__all__ = [
    "USER_TYPES",
    "USER_TYPE_INNOVATOR",
    "USER_TYPE_INVESTOR",
    "User",
    "UserSummary",
]
