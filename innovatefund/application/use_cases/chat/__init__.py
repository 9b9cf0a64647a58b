"""Use cases for chat threads and messages."""

from .mark_thread_read import mark_thread_read
from .send_message import MessagePublisher, send_message
from .threads import (
    MAX_MESSAGES_PAGE_SIZE,
    MessagePage,
    get_or_create_direct_thread,
    list_messages,
    list_threads,
)

__all__ = [
    "MAX_MESSAGES_PAGE_SIZE",
    "MessagePage",
    "MessagePublisher",
    "get_or_create_direct_thread",
    "list_messages",
    "list_threads",
    "mark_thread_read",
    "send_message",
]
