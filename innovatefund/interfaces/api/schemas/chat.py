"""Schemas for chat threads and messages."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .base import CamelModel, Pagination, SummaryRead


class ReadReceiptRead(CamelModel):
    user: str
    read_at: datetime


class ChatMessageRead(CamelModel):
    id: str
    chat: str
    sender: SummaryRead
    content: str
    message_type: str
    read_by: list[ReadReceiptRead] = Field(default_factory=list)
    created_at: datetime | None = None


class ChatThreadRead(CamelModel):
    id: str
    participants: list[SummaryRead]
    name: str | None = None
    is_group: bool = False
    last_message_id: str | None = None
    last_activity: datetime | None = None
    created_at: datetime | None = None


class CreateChatRequest(CamelModel):
    participant_id: str = Field(..., min_length=1)


class SendMessageRequest(CamelModel):
    content: str
    message_type: str = "text"


class MessageListResponse(CamelModel):
    messages: list[ChatMessageRead]
    pagination: Pagination


class MarkChatReadResponse(CamelModel):
    message: str
    updated: int
