"""Use cases for managing users."""

from .authenticate_user import AuthenticationStatus, authenticate_user
from .notification_preferences import set_notifications_enabled
from .register_push_token import register_push_token
from .register_user import register_user

__all__ = [
    "AuthenticationStatus",
    "authenticate_user",
    "register_push_token",
    "register_user",
    "set_notifications_enabled",
]
