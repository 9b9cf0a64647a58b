"""Endpoints for registration, login and the current profile."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from innovatefund.application.use_cases.users import (
    AuthenticationStatus,
    authenticate_user,
    register_user,
)
from innovatefund.domain.entities import User
from innovatefund.infrastructure.database import get_db
from innovatefund.infrastructure.security import create_access_token
from innovatefund.interfaces.api.dependencies import get_current_active_user
from innovatefund.interfaces.api.routes_helpers import DOMAIN_ERRORS, http_error_from
from innovatefund.interfaces.api.schemas import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserRead,
)

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


def to_user_read(user: User) -> UserRead:
    return UserRead(
        id=user.id,
        name=user.name,
        email=user.email,
        user_type=user.user_type,
        profile_picture=user.profile_picture,
        notifications_enabled=user.notifications_enabled,
        last_active=user.last_active,
        created_at=user.created_at,
    )


def _auth_response(user: User) -> AuthResponse:
    return AuthResponse(
        token=create_access_token(user.id, user.user_type),
        user=to_user_read(user),
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)) -> AuthResponse:
    """Create an account and return its token."""

    try:
        user = register_user(
            db,
            name=payload.name,
            email=payload.email,
            password=payload.password,
            user_type=payload.user_type,
        )
    except DOMAIN_ERRORS as exc:
        raise http_error_from(exc) from exc
    logger.info("Registered %s %s", user.user_type, user.id)
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)) -> AuthResponse:
    user, auth_status = authenticate_user(db, payload.email, payload.password)

    if auth_status is AuthenticationStatus.INVALID_CREDENTIALS:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if auth_status is AuthenticationStatus.INACTIVE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is deactivated",
        )

    return _auth_response(user)


@router.get("/me", response_model=UserRead)
def read_me(current_user: User = Depends(get_current_active_user)) -> UserRead:
    return to_user_read(current_user)
