"""Repository implementations for persistence operations."""

from .chat_repository import ChatRepository
from .idea_repository import IdeaRepository
from .notification_repository import NotificationRepository
from .user_repository import UserRepository

__all__ = [
    "ChatRepository",
    "IdeaRepository",
    "NotificationRepository",
    "UserRepository",
]
