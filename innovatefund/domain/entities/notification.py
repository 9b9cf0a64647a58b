"""Domain entities describing user notifications."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from innovatefund.domain.exceptions import ValidationError

from .user import UserSummary

TITLE_MAX_LENGTH = 100
BODY_MAX_LENGTH = 300


class NotificationKind(str, Enum):
    """Closed set of domain events that produce notifications."""

    NEW_INVESTMENT = "new_investment"
    IDEA_LIKED = "idea_liked"
    IDEA_COMMENTED = "idea_commented"
    COLLABORATION_REQUEST = "collaboration_request"
    COLLABORATION_ACCEPTED = "collaboration_accepted"
    MESSAGE_RECEIVED = "message_received"
    MILESTONE_ACHIEVED = "milestone_achieved"
    FUNDING_GOAL_REACHED = "funding_goal_reached"


class RelatedItemType(str, Enum):
    IDEA = "idea"
    INVESTMENT = "investment"
    CHAT = "chat"
    USER = "user"


# Kinds important enough to also reach the recipient's inbox.
EMAIL_NOTIFICATION_KINDS: frozenset[NotificationKind] = frozenset(
    {
        NotificationKind.NEW_INVESTMENT,
        NotificationKind.COLLABORATION_REQUEST,
        NotificationKind.MILESTONE_ACHIEVED,
        NotificationKind.FUNDING_GOAL_REACHED,
    }
)


@dataclass(frozen=True)
class RelatedItem:
    """Tagged reference to the object a notification talks about."""

    item_type: RelatedItemType
    item_id: str | None = None


@dataclass
class Notification:
    """Persisted message delivered to a specific principal."""

    id: str | None
    recipient_id: str
    kind: NotificationKind
    title: str
    body: str
    sender_id: str | None = None
    related_item: RelatedItem | None = None
    read: bool = False
    read_at: datetime | None = None
    action_url: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    sender: UserSummary | None = None

    def mark_read(self, now: datetime) -> bool:
        """Flip the record to read; return ``False`` when it already was.

        ``read_at`` is only ever written on the first transition.
        """

        if self.read:
            return False
        self.read = True
        self.read_at = now
        return True


@dataclass
class NotificationInput:
    """Data required to emit a notification through the dispatcher."""

    recipient_id: str
    kind: NotificationKind | str
    title: str
    body: str
    sender_id: str | None = None
    related_item: RelatedItem | None = None
    action_url: str = ""

    def validated(self) -> "NotificationInput":
        """Return a normalized copy or raise :class:`ValidationError`."""

        if not self.recipient_id:
            raise ValidationError("Notification recipient is required")
        try:
            kind = NotificationKind(self.kind)
        except ValueError as exc:
            raise ValidationError(f"Unknown notification kind '{self.kind}'") from exc

        title = (self.title or "").strip()
        body = (self.body or "").strip()
        if not title:
            raise ValidationError("Notification title is required")
        if len(title) > TITLE_MAX_LENGTH:
            raise ValidationError(
                f"Notification title must be at most {TITLE_MAX_LENGTH} characters"
            )
        if not body:
            raise ValidationError("Notification body is required")
        if len(body) > BODY_MAX_LENGTH:
            raise ValidationError(
                f"Notification body must be at most {BODY_MAX_LENGTH} characters"
            )

        return NotificationInput(
            recipient_id=self.recipient_id,
            kind=kind,
            title=title,
            body=body,
            sender_id=self.sender_id,
            related_item=self.related_item,
            action_url=self.action_url or "",
        )


@dataclass(frozen=True)
class RecipientPreferences:
    """Delivery preferences resolved for the recipient of a notification.

    ``push_token`` and ``email`` are ``None`` when that channel is unavailable.
    """

    recipient_id: str
    name: str
    push_token: str | None
    email: str | None
    notifications_enabled: bool = True


__all__ = [
    "BODY_MAX_LENGTH",
    "EMAIL_NOTIFICATION_KINDS",
    "Notification",
    "NotificationInput",
    "NotificationKind",
    "RecipientPreferences",
    "RelatedItem",
    "RelatedItemType",
    "TITLE_MAX_LENGTH",
]
