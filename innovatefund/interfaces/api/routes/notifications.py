"""Endpoints for the persisted notification inbox and device tokens."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from innovatefund.application.use_cases.notifications import (
    MAX_PAGE_SIZE,
    count_unread_notifications,
    delete_notification,
    list_notifications,
    mark_all_notifications_read,
    mark_notification_read,
)
from innovatefund.application.use_cases.users import register_push_token
from innovatefund.domain.entities import Notification, User
from innovatefund.infrastructure.database import get_db
from innovatefund.interfaces.api.dependencies import get_current_active_user
from innovatefund.interfaces.api.routes_helpers import DOMAIN_ERRORS, http_error_from
from innovatefund.interfaces.api.schemas import (
    MarkAllReadResponse,
    MessageResponse,
    NotificationListResponse,
    NotificationRead,
    Pagination,
    PushTokenRequest,
    RelatedItemRead,
    SummaryRead,
    UnreadCountResponse,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _notification_to_schema(notification: Notification) -> NotificationRead:
    sender = notification.sender
    related = notification.related_item
    return NotificationRead(
        id=notification.id,
        recipient=notification.recipient_id,
        sender=(
            SummaryRead(id=sender.id, name=sender.name, profile_picture=sender.profile_picture)
            if sender
            else None
        ),
        type=notification.kind.value,
        title=notification.title,
        message=notification.body,
        related_item=(
            RelatedItemRead(item_type=related.item_type.value, item_id=related.item_id)
            if related
            else None
        ),
        read=notification.read,
        read_at=notification.read_at,
        action_url=notification.action_url,
        created_at=notification.created_at,
        updated_at=notification.updated_at,
    )


@router.get("", response_model=NotificationListResponse)
def read_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=MAX_PAGE_SIZE),
    unread: bool = Query(False, description="Only return unread notifications"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationListResponse:
    """Return a page of the caller's notifications, newest first."""

    try:
        result = list_notifications(
            db, recipient_id=current_user.id, page=page, limit=limit, unread_only=unread
        )
    except DOMAIN_ERRORS as exc:
        raise http_error_from(exc) from exc
    return NotificationListResponse(
        notifications=[_notification_to_schema(item) for item in result.notifications],
        unread_count=result.unread_count,
        pagination=Pagination(
            current_page=result.current_page,
            total_pages=result.total_pages,
            total_items=result.total_items,
        ),
    )


@router.get("/unread-count", response_model=UnreadCountResponse)
def read_unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> UnreadCountResponse:
    return UnreadCountResponse(
        unread_count=count_unread_notifications(db, recipient_id=current_user.id)
    )


@router.patch("/read-all", response_model=MarkAllReadResponse)
def mark_all_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MarkAllReadResponse:
    updated = mark_all_notifications_read(db, recipient_id=current_user.id)
    return MarkAllReadResponse(message="All notifications marked as read", updated=updated)


@router.patch("/{notification_id}/read", response_model=NotificationRead)
def mark_read(
    notification_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationRead:
    try:
        notification = mark_notification_read(
            db, notification_id=notification_id, recipient_id=current_user.id
        )
    except DOMAIN_ERRORS as exc:
        raise http_error_from(exc) from exc
    return _notification_to_schema(notification)


@router.delete("/{notification_id}", response_model=MessageResponse)
def remove_notification(
    notification_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MessageResponse:
    try:
        delete_notification(db, notification_id=notification_id, recipient_id=current_user.id)
    except DOMAIN_ERRORS as exc:
        raise http_error_from(exc) from exc
    return MessageResponse(message="Notification deleted")


@router.post("/fcm-token", response_model=MessageResponse)
def store_push_token(
    payload: PushTokenRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MessageResponse:
    """Register the device token used for push delivery."""

    try:
        register_push_token(db, user_id=current_user.id, token=payload.token)
    except DOMAIN_ERRORS as exc:
        raise http_error_from(exc) from exc
    return MessageResponse(message="FCM token updated successfully")
