"""Use cases for flipping notifications to read."""

from __future__ import annotations

from sqlalchemy.orm import Session

from innovatefund.domain.entities import Notification
from innovatefund.domain.exceptions import NotFoundError
from innovatefund.infrastructure.repositories import NotificationRepository
from innovatefund.utils import now_in_app_timezone


def mark_notification_read(
    session: Session, *, notification_id: str, recipient_id: str
) -> Notification:
    """Mark one record read.

    Repeated calls are no-ops and keep the original ``read_at``.
    """

    repository = NotificationRepository(session)
    notification = repository.get_for_recipient(notification_id, recipient_id)
    if notification is None:
        raise NotFoundError("Notification not found")
    if not notification.mark_read(now_in_app_timezone()):
        return notification
    return repository.save_read_state(notification)


def mark_all_notifications_read(session: Session, *, recipient_id: str) -> int:
    """Mark every unread record read and return how many changed."""

    return NotificationRepository(session).mark_all_read(
        recipient_id, read_at=now_in_app_timezone()
    )


__all__ = ["mark_all_notifications_read", "mark_notification_read"]
