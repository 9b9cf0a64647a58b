"""Serialize domain records for realtime delivery and publish chat messages."""

from __future__ import annotations

from typing import Any

import anyio

from innovatefund.domain.entities import ChatMessage, ChatThread, Notification, UserSummary
from innovatefund.infrastructure.realtime import ChannelManager, chat_channel, personal_channel
from innovatefund.utils import iso_or_none


def _serialize_summary(summary: UserSummary | None) -> dict[str, Any] | None:
    if summary is None:
        return None
    return {
        "id": summary.id,
        "name": summary.name,
        "profilePicture": summary.profile_picture,
    }


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the ``new_notification`` payload for ``notification``."""

    related = notification.related_item
    return {
        "id": notification.id,
        "recipient": notification.recipient_id,
        "sender": _serialize_summary(notification.sender),
        "type": notification.kind.value,
        "title": notification.title,
        "message": notification.body,
        "relatedItem": (
            {"itemType": related.item_type.value, "itemId": related.item_id}
            if related
            else None
        ),
        "read": notification.read,
        "readAt": iso_or_none(notification.read_at),
        "actionUrl": notification.action_url,
        "createdAt": iso_or_none(notification.created_at),
        "updatedAt": iso_or_none(notification.updated_at),
    }


def serialize_message(message: ChatMessage) -> dict[str, Any]:
    return {
        "id": message.id,
        "chat": message.thread_id,
        "sender": _serialize_summary(message.sender) or {"id": message.sender_id},
        "content": message.content,
        "messageType": message.kind.value,
        "readBy": [
            {"user": receipt.reader_id, "readAt": iso_or_none(receipt.read_at)}
            for receipt in message.read_by
        ],
        "createdAt": iso_or_none(message.created_at),
    }


class ChatPublisher:
    """Broadcast new chat messages to every connection of every participant."""

    def __init__(self, channels: ChannelManager) -> None:
        self._channels = channels

    async def publish_message(self, thread: ChatThread, message: ChatMessage) -> int:
        channels = [chat_channel(thread.id or message.thread_id)]
        channels.extend(personal_channel(participant) for participant in thread.participant_ids)
        payload = {"chatId": message.thread_id, "message": serialize_message(message)}
        return await self._channels.broadcast_many(channels, "new_message", payload)

    def publish_message_from_thread(self, thread: ChatThread, message: ChatMessage) -> int:
        """Publish from a worker thread started by the event loop."""

        return anyio.from_thread.run(self.publish_message, thread, message)


__all__ = [
    "ChatPublisher",
    "serialize_message",
    "serialize_notification",
]
