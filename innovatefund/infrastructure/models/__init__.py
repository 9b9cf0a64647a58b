"""ORM models used by the application infrastructure."""

from .chat import (
    ChatMessageModel,
    ChatParticipantModel,
    ChatReadReceiptModel,
    ChatThreadModel,
)
from .idea import (
    IdeaCollaboratorModel,
    IdeaCommentModel,
    IdeaInvestmentModel,
    IdeaLikeModel,
    IdeaModel,
)
from .notification import NotificationModel
from .user import UserModel

__all__ = [
    "ChatMessageModel",
    "ChatParticipantModel",
    "ChatReadReceiptModel",
    "ChatThreadModel",
    "IdeaCollaboratorModel",
    "IdeaCommentModel",
    "IdeaInvestmentModel",
    "IdeaLikeModel",
    "IdeaModel",
    "NotificationModel",
    "UserModel",
]
