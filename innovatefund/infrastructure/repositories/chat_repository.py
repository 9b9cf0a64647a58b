"""Persistence helpers for chat threads and messages."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import and_, exists
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from innovatefund.domain.entities import (
    ChatMessage,
    ChatThread,
    MessageKind,
    ReadReceipt,
    UserSummary,
)
from innovatefund.infrastructure.models import (
    ChatMessageModel,
    ChatParticipantModel,
    ChatReadReceiptModel,
    ChatThreadModel,
    UserModel,
)
from innovatefund.utils import (
    ensure_app_timezone,
    ensure_utc_naive_datetime,
    now_utc_naive_datetime,
)


class ChatRepository:
    """Provide persistence operations for :class:`ChatThread` and :class:`ChatMessage`."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_thread(self, thread_id: str) -> ChatThread | None:
        model = self.session.get(ChatThreadModel, thread_id)
        return self._thread_to_entity(model) if model else None

    def get_participant_ids(self, thread_id: str) -> list[str] | None:
        """Return the participant ids of ``thread_id`` or ``None`` when missing."""

        model = self.session.get(ChatThreadModel, thread_id)
        if model is None:
            return None
        return [participant.user_id for participant in model.participants]

    def find_direct_thread(self, first_id: str, second_id: str) -> ChatThread | None:
        query = (
            self.session.query(ChatThreadModel)
            .join(ChatParticipantModel)
            .filter(ChatParticipantModel.user_id == first_id)
            .filter(ChatThreadModel.is_group.is_(False))
        )
        for model in query.all():
            member_ids = {participant.user_id for participant in model.participants}
            if member_ids == {first_id, second_id}:
                return self._thread_to_entity(model)
        return None

    def create_thread(
        self,
        participant_ids: Sequence[str],
        *,
        name: str | None = None,
        is_group: bool = False,
    ) -> ChatThread:
        now = now_utc_naive_datetime()
        model = ChatThreadModel(
            name=name,
            is_group=is_group,
            last_activity=now,
            created_at=now,
        )
        model.participants = [
            ChatParticipantModel(user_id=user_id, position=position)
            for position, user_id in enumerate(participant_ids)
        ]
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._thread_to_entity(model)

    def list_threads_for(self, user_id: str) -> Sequence[ChatThread]:
        query = (
            self.session.query(ChatThreadModel)
            .join(ChatParticipantModel)
            .filter(ChatParticipantModel.user_id == user_id)
            .order_by(ChatThreadModel.last_activity.desc(), ChatThreadModel.id.desc())
        )
        return [self._thread_to_entity(model) for model in query.all()]

    def add_message(self, message: ChatMessage) -> ChatMessage:
        """Persist ``message`` and advance the thread's last-message pointer."""

        thread = self.session.get(ChatThreadModel, message.thread_id)
        if thread is None:
            msg = f"Chat thread with id {message.thread_id} not found"
            raise ValueError(msg)

        created_at = ensure_utc_naive_datetime(message.created_at) or now_utc_naive_datetime()
        model = ChatMessageModel(
            thread_id=message.thread_id,
            sender_id=message.sender_id,
            content=message.content,
            kind=MessageKind(message.kind).value,
            created_at=created_at,
        )
        model.receipts = [
            ChatReadReceiptModel(
                reader_id=receipt.reader_id,
                read_at=ensure_utc_naive_datetime(receipt.read_at) or created_at,
            )
            for receipt in message.read_by
        ]
        self.session.add(model)
        self.session.flush()

        thread.last_message_id = model.id
        thread.last_activity = created_at
        self.session.commit()
        self.session.refresh(model)
        return self._message_to_entity(model)

    def list_messages(
        self, thread_id: str, *, offset: int = 0, limit: int = 50
    ) -> Sequence[ChatMessage]:
        """Return a page of messages, newest page first, each page oldest-first."""

        query = (
            self.session.query(ChatMessageModel)
            .filter(ChatMessageModel.thread_id == thread_id)
            .order_by(ChatMessageModel.created_at.desc(), ChatMessageModel.id.desc())
            .offset(offset)
            .limit(limit)
        )
        messages = [self._message_to_entity(model) for model in query.all()]
        messages.reverse()
        return messages

    def count_messages(self, thread_id: str) -> int:
        return (
            self.session.query(ChatMessageModel)
            .filter(ChatMessageModel.thread_id == thread_id)
            .count()
        )

    def mark_thread_read(self, thread_id: str, reader_id: str, *, read_at: datetime) -> int:
        """Add a receipt for ``reader_id`` to every message that still lacks one."""

        stamp = ensure_utc_naive_datetime(read_at)
        for attempt in range(2):
            already_read = exists().where(
                and_(
                    ChatReadReceiptModel.message_id == ChatMessageModel.id,
                    ChatReadReceiptModel.reader_id == reader_id,
                )
            )
            pending_ids = [
                row[0]
                for row in self.session.query(ChatMessageModel.id)
                .filter(ChatMessageModel.thread_id == thread_id)
                .filter(~already_read)
                .all()
            ]
            if not pending_ids:
                return 0
            self.session.add_all(
                ChatReadReceiptModel(message_id=message_id, reader_id=reader_id, read_at=stamp)
                for message_id in pending_ids
            )
            try:
                self.session.commit()
            except IntegrityError:
                # A concurrent reader inserted some of the same receipts.
                self.session.rollback()
                if attempt:
                    raise
                continue
            return len(pending_ids)
        return 0

    @staticmethod
    def _summary(model: UserModel | None) -> UserSummary | None:
        if model is None:
            return None
        return UserSummary(
            id=model.id, name=model.name, profile_picture=model.profile_picture or ""
        )

    @classmethod
    def _thread_to_entity(cls, model: ChatThreadModel) -> ChatThread:
        participants = [
            summary
            for summary in (cls._summary(participant.user) for participant in model.participants)
            if summary is not None
        ]
        return ChatThread(
            id=model.id,
            participant_ids=[participant.user_id for participant in model.participants],
            name=model.name,
            is_group=bool(model.is_group),
            last_message_id=model.last_message_id,
            last_activity=ensure_app_timezone(model.last_activity),
            created_at=ensure_app_timezone(model.created_at),
            participants=participants,
        )

    @classmethod
    def _message_to_entity(cls, model: ChatMessageModel) -> ChatMessage:
        return ChatMessage(
            id=model.id,
            thread_id=model.thread_id,
            sender_id=model.sender_id,
            content=model.content,
            kind=MessageKind(model.kind),
            read_by=[
                ReadReceipt(
                    reader_id=receipt.reader_id,
                    read_at=ensure_app_timezone(receipt.read_at),
                )
                for receipt in model.receipts
            ],
            created_at=ensure_app_timezone(model.created_at),
            sender=cls._summary(model.sender),
        )


__all__ = ["ChatRepository"]
