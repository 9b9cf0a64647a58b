"""Public helpers for emitting and managing notifications."""

from .delete_notification import delete_notification
from .events import (
    Notifier,
    notify_collaboration_accepted,
    notify_collaboration_request,
    notify_funding_goal_reached,
    notify_idea_commented,
    notify_idea_liked,
    notify_new_investment,
)
from .list_notifications import (
    MAX_PAGE_SIZE,
    NotificationPage,
    count_unread_notifications,
    list_notifications,
)
from .mark_read import mark_all_notifications_read, mark_notification_read

__all__ = [
    "MAX_PAGE_SIZE",
    "NotificationPage",
    "Notifier",
    "count_unread_notifications",
    "delete_notification",
    "list_notifications",
    "mark_all_notifications_read",
    "mark_notification_read",
    "notify_collaboration_accepted",
    "notify_collaboration_request",
    "notify_funding_goal_reached",
    "notify_idea_commented",
    "notify_idea_liked",
    "notify_new_investment",
]
