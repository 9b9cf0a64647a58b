"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .base import CamelModel, Pagination, SummaryRead


class RelatedItemRead(CamelModel):
    item_type: str
    item_id: str | None = None


class NotificationRead(CamelModel):
    """Representation of a notification delivered to the client."""

    id: str
    recipient: str
    sender: SummaryRead | None = None
    type: str
    title: str
    message: str
    related_item: RelatedItemRead | None = None
    read: bool = False
    read_at: datetime | None = None
    action_url: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None


class NotificationListResponse(CamelModel):
    notifications: list[NotificationRead]
    unread_count: int
    pagination: Pagination


class UnreadCountResponse(CamelModel):
    unread_count: int


class MarkAllReadResponse(CamelModel):
    message: str
    updated: int


class PushTokenRequest(CamelModel):
    token: str = Field(..., description="Device registration token")
