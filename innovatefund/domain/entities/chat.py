"""Domain entities for chat threads and their messages."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .user import UserSummary

MESSAGE_CONTENT_MAX_LENGTH = 2000


class MessageKind(str, Enum):
    TEXT = "text"
    FILE = "file"
    IMAGE = "image"


@dataclass(frozen=True)
class ReadReceipt:
    reader_id: str
    read_at: datetime


@dataclass
class ChatThread:
    """Conversation between two or more principals."""

    id: str | None
    participant_ids: list[str]
    name: str | None = None
    is_group: bool = False
    last_message_id: str | None = None
    last_activity: datetime | None = None
    created_at: datetime | None = None
    participants: list[UserSummary] = field(default_factory=list)

    def has_participant(self, principal_id: str | None) -> bool:
        return bool(principal_id) and principal_id in self.participant_ids


@dataclass
class ChatMessage:
    """Single message posted to a :class:`ChatThread`."""

    id: str | None
    thread_id: str
    sender_id: str
    content: str
    kind: MessageKind = MessageKind.TEXT
    read_by: list[ReadReceipt] = field(default_factory=list)
    created_at: datetime | None = None
    sender: UserSummary | None = None


__all__ = [
    "ChatMessage",
    "ChatThread",
    "MESSAGE_CONTENT_MAX_LENGTH",
    "MessageKind",
    "ReadReceipt",
]
