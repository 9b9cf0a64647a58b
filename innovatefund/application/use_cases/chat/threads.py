"""Use cases for listing and opening chat threads."""

from __future__ import annotations

from dataclasses import dataclass
from math import ceil

from sqlalchemy.orm import Session

from innovatefund.domain.entities import ChatMessage, ChatThread
from innovatefund.domain.exceptions import AccessDeniedError, NotFoundError, ValidationError
from innovatefund.infrastructure.repositories import ChatRepository, UserRepository

MAX_MESSAGES_PAGE_SIZE = 100


@dataclass(frozen=True)
class MessagePage:
    messages: list[ChatMessage]
    current_page: int
    total_pages: int
    total_items: int


def list_threads(session: Session, *, user_id: str) -> list[ChatThread]:
    return list(ChatRepository(session).list_threads_for(user_id))


def get_or_create_direct_thread(
    session: Session, *, user_id: str, participant_id: str
) -> tuple[ChatThread, bool]:
    """Return the 1:1 thread between both principals, creating it if needed.

    The boolean is ``True`` when a new thread was created.
    """

    if not participant_id:
        raise ValidationError("participantId is required")
    if participant_id == user_id:
        raise ValidationError("You cannot start a chat with yourself")
    if UserRepository(session).get(participant_id) is None:
        raise NotFoundError("User not found")

    repository = ChatRepository(session)
    existing = repository.find_direct_thread(user_id, participant_id)
    if existing is not None:
        return existing, False
    return repository.create_thread([user_id, participant_id]), True


def list_messages(
    session: Session,
    *,
    thread_id: str,
    user_id: str,
    page: int = 1,
    limit: int = 50,
) -> MessagePage:
    if page < 1:
        raise ValidationError("page must be greater than zero")
    if not 1 <= limit <= MAX_MESSAGES_PAGE_SIZE:
        raise ValidationError(f"limit must be between 1 and {MAX_MESSAGES_PAGE_SIZE}")

    repository = ChatRepository(session)
    participants = repository.get_participant_ids(thread_id)
    if participants is None:
        raise NotFoundError("Chat not found")
    if user_id not in participants:
        raise AccessDeniedError()

    total = repository.count_messages(thread_id)
    messages = repository.list_messages(thread_id, offset=(page - 1) * limit, limit=limit)
    return MessagePage(
        messages=list(messages),
        current_page=page,
        total_pages=ceil(total / limit) if total else 0,
        total_items=total,
    )


__all__ = [
    "MAX_MESSAGES_PAGE_SIZE",
    "MessagePage",
    "get_or_create_direct_thread",
    "list_messages",
    "list_threads",
]
