"""FastAPI dependency utilities."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from innovatefund.application.use_cases.chat import MessagePublisher
from innovatefund.application.use_cases.notifications import Notifier
from innovatefund.domain.entities import User
from innovatefund.infrastructure.database import get_db
from innovatefund.infrastructure.openai_client import (
    AssistantService,
    OpenAIConfigurationError,
)
from innovatefund.infrastructure.repositories import UserRepository
from innovatefund.infrastructure.security import decode_access_token
from innovatefund.runtime import Runtime

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_current_user(token: str, db: Session) -> User:
    """Resolve the authenticated user for the provided token."""

    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise _unauthorized("Invalid credentials") from exc

    user = UserRepository(db).get(payload["sub"])
    if user is None:
        raise _unauthorized("User not found")
    return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Return the authenticated user from the provided token."""

    return resolve_current_user(token, db)


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """Ensure the authenticated user is active."""

    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is deactivated",
        )
    return current_user


def get_runtime(request: Request) -> Runtime:
    """Return the process runtime created by the application factory."""

    return request.app.state.runtime


def get_notifier(runtime: Runtime = Depends(get_runtime)) -> Notifier:
    """Return a notifier usable from synchronous route handlers."""

    return runtime.dispatcher.notify_from_thread


def get_message_publisher(runtime: Runtime = Depends(get_runtime)) -> MessagePublisher:
    return runtime.chat_publisher.publish_message_from_thread


def get_assistant_service() -> AssistantService:
    """Return a configured instance of :class:`AssistantService`."""

    try:
        return AssistantService()
    except OpenAIConfigurationError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc
