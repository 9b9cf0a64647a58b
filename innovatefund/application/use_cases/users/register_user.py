"""Use case for registering a new principal."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from innovatefund.domain.entities import User
from innovatefund.domain.exceptions import ValidationError
from innovatefund.infrastructure.email import send_welcome_email
from innovatefund.infrastructure.repositories import UserRepository
from innovatefund.infrastructure.security import get_password_hash

from .validators import ensure_password, ensure_user_type, normalize_email, normalize_name

logger = logging.getLogger(__name__)


def register_user(
    session: Session,
    *,
    name: str,
    email: str,
    password: str,
    user_type: str,
) -> User:
    """Create a principal with a unique email and send the welcome email."""

    repository = UserRepository(session)
    normalized_email = normalize_email(email)
    if repository.get_by_email(normalized_email):
        raise ValidationError("User already exists with this email")

    user = repository.create(
        User(
            id=None,
            name=normalize_name(name),
            email=normalized_email,
            password=get_password_hash(ensure_password(password)),
            user_type=ensure_user_type(user_type),
        )
    )

    if not send_welcome_email(user.email, user.name, user.user_type):
        logger.info("Welcome email was not sent to %s", user.email)
    return user
