"""Use cases for reading the notification inbox."""

from __future__ import annotations

from dataclasses import dataclass
from math import ceil

from sqlalchemy.orm import Session

from innovatefund.domain.entities import Notification
from innovatefund.domain.exceptions import ValidationError
from innovatefund.infrastructure.repositories import NotificationRepository

MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class NotificationPage:
    notifications: list[Notification]
    unread_count: int
    current_page: int
    total_pages: int
    total_items: int


def list_notifications(
    session: Session,
    *,
    recipient_id: str,
    page: int = 1,
    limit: int = 20,
    unread_only: bool = False,
) -> NotificationPage:
    """Return one page of the recipient's notifications, newest first."""

    if page < 1:
        raise ValidationError("page must be greater than zero")
    if not 1 <= limit <= MAX_PAGE_SIZE:
        raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}")

    repository = NotificationRepository(session)
    notifications = repository.list_for_recipient(
        recipient_id,
        offset=(page - 1) * limit,
        limit=limit,
        unread_only=unread_only,
    )
    total = repository.count_for_recipient(recipient_id, unread_only=unread_only)
    unread = repository.count_for_recipient(recipient_id, unread_only=True)
    return NotificationPage(
        notifications=list(notifications),
        unread_count=unread,
        current_page=page,
        total_pages=ceil(total / limit) if total else 0,
        total_items=total,
    )


def count_unread_notifications(session: Session, *, recipient_id: str) -> int:
    return NotificationRepository(session).count_for_recipient(recipient_id, unread_only=True)


__all__ = [
    "MAX_PAGE_SIZE",
    "NotificationPage",
    "count_unread_notifications",
    "list_notifications",
]
