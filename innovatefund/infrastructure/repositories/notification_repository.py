"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy.orm import Session

from innovatefund.domain.entities import (
    Notification,
    NotificationKind,
    RelatedItem,
    RelatedItemType,
    UserSummary,
)
from innovatefund.infrastructure.models import NotificationModel
from innovatefund.utils import (
    ensure_app_timezone,
    ensure_utc_naive_datetime,
    now_utc_naive_datetime,
)


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        model.created_at = (
            ensure_utc_naive_datetime(notification.created_at) or now_utc_naive_datetime()
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def get(self, notification_id: str) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def get_for_recipient(
        self, notification_id: str, recipient_id: str
    ) -> Notification | None:
        model = self._get_owned_model(notification_id, recipient_id)
        return self._to_entity(model) if model else None

    def list_for_recipient(
        self,
        recipient_id: str,
        *,
        offset: int = 0,
        limit: int | None = 20,
        unread_only: bool = False,
    ) -> Sequence[Notification]:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.recipient_id == recipient_id
        )
        if unread_only:
            query = query.filter(NotificationModel.read.is_(False))
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def count_for_recipient(self, recipient_id: str, *, unread_only: bool = False) -> int:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.recipient_id == recipient_id
        )
        if unread_only:
            query = query.filter(NotificationModel.read.is_(False))
        return query.count()

    def save_read_state(self, notification: Notification) -> Notification:
        model = self._get_owned_model(notification.id, notification.recipient_id)
        if model is None:
            msg = f"Notification with id {notification.id} not found"
            raise ValueError(msg)
        model.read = notification.read
        model.read_at = ensure_utc_naive_datetime(notification.read_at)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def mark_all_read(self, recipient_id: str, *, read_at: datetime) -> int:
        """Mark every unread record of ``recipient_id`` as read in one statement."""

        updated = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.recipient_id == recipient_id)
            .filter(NotificationModel.read.is_(False))
            .update(
                {
                    NotificationModel.read: True,
                    NotificationModel.read_at: ensure_utc_naive_datetime(read_at),
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return int(updated or 0)

    def delete_for_recipient(self, notification_id: str, recipient_id: str) -> bool:
        model = self._get_owned_model(notification_id, recipient_id)
        if model is None:
            return False
        self.session.delete(model)
        self.session.commit()
        return True

    def _get_owned_model(
        self, notification_id: str | None, recipient_id: str
    ) -> NotificationModel | None:
        if not notification_id:
            return None
        return (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id == notification_id)
            .filter(NotificationModel.recipient_id == recipient_id)
            .one_or_none()
        )

    @staticmethod
    def _apply_entity_to_model(model: NotificationModel, notification: Notification) -> None:
        related = notification.related_item
        model.recipient_id = notification.recipient_id
        model.sender_id = notification.sender_id
        model.kind = NotificationKind(notification.kind).value
        model.title = notification.title
        model.body = notification.body
        model.related_item_type = related.item_type.value if related else None
        model.related_item_id = related.item_id if related else None
        model.read = notification.read
        model.read_at = ensure_utc_naive_datetime(notification.read_at)
        model.action_url = notification.action_url or ""

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        related = None
        if model.related_item_type:
            related = RelatedItem(
                item_type=RelatedItemType(model.related_item_type),
                item_id=model.related_item_id,
            )
        sender = None
        if model.sender is not None:
            sender = UserSummary(
                id=model.sender.id,
                name=model.sender.name,
                profile_picture=model.sender.profile_picture or "",
            )
        return Notification(
            id=model.id,
            recipient_id=model.recipient_id,
            sender_id=model.sender_id,
            kind=NotificationKind(model.kind),
            title=model.title,
            body=model.body,
            related_item=related,
            read=bool(model.read),
            read_at=ensure_app_timezone(model.read_at),
            action_url=model.action_url or "",
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
            sender=sender,
        )


__all__ = ["NotificationRepository"]
