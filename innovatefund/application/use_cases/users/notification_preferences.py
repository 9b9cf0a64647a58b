"""Use case for toggling push and email notifications."""

from sqlalchemy.orm import Session

from innovatefund.domain.entities import User
from innovatefund.domain.exceptions import NotFoundError
from innovatefund.infrastructure.repositories import UserRepository


def set_notifications_enabled(session: Session, *, user_id: str, enabled: bool) -> User:
    """Persist the preference; live in-app delivery is not affected by it."""

    try:
        return UserRepository(session).set_notifications_enabled(user_id, bool(enabled))
    except ValueError as exc:
        raise NotFoundError("User not found") from exc
