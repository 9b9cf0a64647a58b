"""Use case for storing the device token used for push delivery."""

from sqlalchemy.orm import Session

from innovatefund.domain.exceptions import NotFoundError, ValidationError
from innovatefund.infrastructure.repositories import UserRepository


def register_push_token(session: Session, *, user_id: str, token: str) -> None:
    cleaned = (token or "").strip()
    if not cleaned:
        raise ValidationError("FCM token is required")
    try:
        UserRepository(session).set_push_token(user_id, cleaned)
    except ValueError as exc:
        raise NotFoundError("User not found") from exc
