"""Use case for deleting a notification."""

from sqlalchemy.orm import Session

from innovatefund.domain.exceptions import NotFoundError
from innovatefund.infrastructure.repositories import NotificationRepository


def delete_notification(session: Session, *, notification_id: str, recipient_id: str) -> None:
    """Delete the caller's record or raise :class:`NotFoundError`."""

    if not NotificationRepository(session).delete_for_recipient(notification_id, recipient_id):
        raise NotFoundError("Notification not found")
