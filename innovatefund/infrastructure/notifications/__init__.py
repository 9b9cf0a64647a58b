"""Notification fan-out and realtime serialization helpers."""

from .dispatcher import (
    DeliveryWarning,
    EmailSender,
    NotificationDispatcher,
    PushSender,
)
from .publisher import ChatPublisher, serialize_message, serialize_notification

__all__ = [
    "ChatPublisher",
    "DeliveryWarning",
    "EmailSender",
    "NotificationDispatcher",
    "PushSender",
    "serialize_message",
    "serialize_notification",
]
