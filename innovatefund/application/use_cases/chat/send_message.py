"""Use case for posting a message to a chat thread."""

from __future__ import annotations

import logging
from collections.abc import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from innovatefund.domain.entities import (
    MESSAGE_CONTENT_MAX_LENGTH,
    ChatMessage,
    ChatThread,
    MessageKind,
    ReadReceipt,
)
from innovatefund.domain.exceptions import (
    AccessDeniedError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from innovatefund.infrastructure.repositories import ChatRepository
from innovatefund.utils import now_in_app_timezone

logger = logging.getLogger(__name__)

MessagePublisher = Callable[[ChatThread, ChatMessage], object]


def _validate_content(content: str, kind: MessageKind | str) -> tuple[str, MessageKind]:
    try:
        message_kind = MessageKind(kind)
    except ValueError as exc:
        raise ValidationError(
            "messageType must be one of: " + ", ".join(item.value for item in MessageKind)
        ) from exc

    cleaned = (content or "").strip()
    if not cleaned:
        raise ValidationError("Message content is required")
    if len(cleaned) > MESSAGE_CONTENT_MAX_LENGTH:
        raise ValidationError(
            f"Message content must be at most {MESSAGE_CONTENT_MAX_LENGTH} characters"
        )
    return cleaned, message_kind


def send_message(
    session: Session,
    *,
    thread_id: str,
    sender_id: str,
    content: str,
    kind: MessageKind | str = MessageKind.TEXT,
    publish: MessagePublisher | None = None,
) -> ChatMessage:
    """Persist a message from a participant and broadcast it live.

    The sender's own read receipt is stored with the message. Live delivery
    is best effort: a failed broadcast never undoes the stored message.
    """

    cleaned, message_kind = _validate_content(content, kind)

    repository = ChatRepository(session)
    thread = repository.get_thread(thread_id)
    if thread is None:
        raise NotFoundError("Chat not found")
    if not thread.has_participant(sender_id):
        raise AccessDeniedError()

    now = now_in_app_timezone()
    try:
        saved = repository.add_message(
            ChatMessage(
                id=None,
                thread_id=thread_id,
                sender_id=sender_id,
                content=cleaned,
                kind=message_kind,
                read_by=[ReadReceipt(reader_id=sender_id, read_at=now)],
                created_at=now,
            )
        )
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("Could not store message in chat %s", thread_id)
        raise PersistenceError("Could not save the message") from exc

    if publish is not None:
        try:
            publish(thread, saved)
        except Exception:
            logger.warning("Live delivery of message %s failed", saved.id, exc_info=True)
    return saved


__all__ = ["MessagePublisher", "send_message"]
