"""Domain entities for the InnovateFund service."""

from .chat import (
    MESSAGE_CONTENT_MAX_LENGTH,
    ChatMessage,
    ChatThread,
    MessageKind,
    ReadReceipt,
)
from .idea import (
    IDEA_CATEGORIES,
    IDEA_STAGES,
    MIN_FUNDING_GOAL,
    Idea,
    IdeaComment,
    IdeaInvestment,
)
from .notification import (
    BODY_MAX_LENGTH,
    EMAIL_NOTIFICATION_KINDS,
    TITLE_MAX_LENGTH,
    Notification,
    NotificationInput,
    NotificationKind,
    RecipientPreferences,
    RelatedItem,
    RelatedItemType,
)
from .user import (
    USER_TYPE_INNOVATOR,
    USER_TYPE_INVESTOR,
    USER_TYPES,
    User,
    UserSummary,
)

__all__ = [
    "BODY_MAX_LENGTH",
    "ChatMessage",
    "ChatThread",
    "EMAIL_NOTIFICATION_KINDS",
    "IDEA_CATEGORIES",
    "IDEA_STAGES",
    "Idea",
    "IdeaComment",
    "IdeaInvestment",
    "MESSAGE_CONTENT_MAX_LENGTH",
    "MIN_FUNDING_GOAL",
    "MessageKind",
    "Notification",
    "NotificationInput",
    "NotificationKind",
    "ReadReceipt",
    "RecipientPreferences",
    "RelatedItem",
    "RelatedItemType",
    "TITLE_MAX_LENGTH",
    "USER_TYPES",
    "USER_TYPE_INNOVATOR",
    "USER_TYPE_INVESTOR",
    "User",
    "UserSummary",
]
