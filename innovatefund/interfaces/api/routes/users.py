"""Endpoints for the caller's account preferences."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from innovatefund.application.use_cases.users import set_notifications_enabled
from innovatefund.domain.entities import User
from innovatefund.infrastructure.database import get_db
from innovatefund.interfaces.api.dependencies import get_current_active_user
from innovatefund.interfaces.api.routes_helpers import DOMAIN_ERRORS, http_error_from
from innovatefund.interfaces.api.schemas import (
    NotificationPreferenceRequest,
    NotificationPreferenceResponse,
)

from .auth import to_user_read

router = APIRouter(prefix="/users", tags=["users"])


@router.put("/notifications", response_model=NotificationPreferenceResponse)
def update_notification_preference(
    payload: NotificationPreferenceRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationPreferenceResponse:
    """Turn push and email delivery on or off for the caller."""

    try:
        user = set_notifications_enabled(db, user_id=current_user.id, enabled=payload.enabled)
    except DOMAIN_ERRORS as exc:
        raise http_error_from(exc) from exc
    return NotificationPreferenceResponse(
        message="Notification preferences updated.", user=to_user_read(user)
    )
