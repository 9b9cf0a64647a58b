"""Persistence layer for user data."""

from __future__ import annotations

from sqlalchemy.orm import Session

from innovatefund.domain.entities import RecipientPreferences, User
from innovatefund.infrastructure.models import UserModel
from innovatefund.utils import (
    ensure_app_timezone,
    ensure_utc_naive_datetime,
    now_utc_naive_datetime,
)


class UserRepository:
    """Provide CRUD operations for user entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: str) -> User | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def get_by_email(self, email: str) -> User | None:
        model = (
            self.session.query(UserModel)
            .filter(UserModel.email == email.strip().lower())
            .one_or_none()
        )
        return self._to_entity(model) if model else None

    def create(self, user: User) -> User:
        model = UserModel()
        self._apply_entity_to_model(model, user)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, user: User) -> User:
        model = self.session.get(UserModel, user.id) if user.id else None
        if model is None:
            msg = f"User with id {user.id} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, user)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def get_preferences(self, user_id: str) -> RecipientPreferences | None:
        """Return the delivery preferences for ``user_id`` if the user exists."""

        model = self.session.get(UserModel, user_id)
        if model is None:
            return None
        return RecipientPreferences(
            recipient_id=model.id,
            name=model.name,
            push_token=model.push_token or None,
            email=model.email or None,
            notifications_enabled=bool(model.notifications_enabled),
        )

    def set_notifications_enabled(self, user_id: str, enabled: bool) -> User:
        model = self.session.get(UserModel, user_id)
        if model is None:
            msg = f"User with id {user_id} not found"
            raise ValueError(msg)
        model.notifications_enabled = enabled
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def set_push_token(self, user_id: str, token: str) -> None:
        model = self.session.get(UserModel, user_id)
        if model is None:
            msg = f"User with id {user_id} not found"
            raise ValueError(msg)
        model.push_token = token
        self.session.commit()

    def clear_push_token(self, user_id: str, *, token: str | None = None) -> bool:
        """Remove the stored push token.

        When ``token`` is given the stored value is only cleared if it still
        matches, so a device that re-registered in the meantime keeps its token.
        """

        query = self.session.query(UserModel).filter(UserModel.id == user_id)
        if token is not None:
            query = query.filter(UserModel.push_token == token)
        updated = query.update({UserModel.push_token: None}, synchronize_session=False)
        self.session.commit()
        return bool(updated)

    def touch_last_active(self, user_id: str) -> None:
        self.session.query(UserModel).filter(UserModel.id == user_id).update(
            {UserModel.last_active: now_utc_naive_datetime()},
            synchronize_session=False,
        )
        self.session.commit()

    @staticmethod
    def _apply_entity_to_model(model: UserModel, user: User) -> None:
        model.name = user.name
        model.email = user.email.strip().lower()
        model.password = user.password
        model.user_type = user.user_type
        model.profile_picture = user.profile_picture or ""
        model.push_token = user.push_token
        model.notifications_enabled = user.notifications_enabled
        model.is_active = user.is_active
        model.last_active = ensure_utc_naive_datetime(user.last_active)

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            name=model.name,
            email=model.email,
            password=model.password,
            user_type=model.user_type,
            profile_picture=model.profile_picture or "",
            push_token=model.push_token,
            notifications_enabled=bool(model.notifications_enabled),
            is_active=bool(model.is_active),
            last_active=ensure_app_timezone(model.last_active),
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["UserRepository"]
