from .ai import (
    AIChatMessage,
    AIChatRequest,
    AIChatResponse,
    ImpactScoreRequest,
    ImpactScoreResponse,
)
from .auth import (
    AuthResponse,
    LoginRequest,
    NotificationPreferenceRequest,
    NotificationPreferenceResponse,
    RegisterRequest,
    UserRead,
)
from .base import CamelModel, MessageResponse, Pagination, SummaryRead
from .chat import (
    ChatMessageRead,
    ChatThreadRead,
    CreateChatRequest,
    MarkChatReadResponse,
    MessageListResponse,
    ReadReceiptRead,
    SendMessageRequest,
)
from .idea import (
    CommentCreate,
    CommentRead,
    CommentResponse,
    IdeaCreate,
    IdeaRead,
    InvestmentRead,
    InvestmentRequest,
    InvestmentResponse,
    LikeResponse,
)
from .notification import (
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationRead,
    PushTokenRequest,
    RelatedItemRead,
    UnreadCountResponse,
)

__all__ = [
    "AIChatMessage",
    "AIChatRequest",
    "AIChatResponse",
    "AuthResponse",
    "CamelModel",
    "ChatMessageRead",
    "ChatThreadRead",
    "CommentCreate",
    "CommentRead",
    "CommentResponse",
    "CreateChatRequest",
    "IdeaCreate",
    "IdeaRead",
    "ImpactScoreRequest",
    "ImpactScoreResponse",
    "InvestmentRead",
    "InvestmentRequest",
    "InvestmentResponse",
    "LikeResponse",
    "LoginRequest",
    "MarkAllReadResponse",
    "MarkChatReadResponse",
    "MessageListResponse",
    "MessageResponse",
    "NotificationListResponse",
    "NotificationPreferenceRequest",
    "NotificationPreferenceResponse",
    "NotificationRead",
    "Pagination",
    "PushTokenRequest",
    "ReadReceiptRead",
    "RegisterRequest",
    "RelatedItemRead",
    "SendMessageRequest",
    "SummaryRead",
    "UnreadCountResponse",
    "UserRead",
]
