"""Realtime connection tracking, channels and the Socket.IO gateway."""

from .channels import ChannelManager, SocketIOTransport, Transport
from .gateway import PRESENCE_STATUSES, RealtimeGateway
from .registry import ConnectionContext, ConnectionRegistry, chat_channel, personal_channel

__all__ = [
    "ChannelManager",
    "ConnectionContext",
    "ConnectionRegistry",
    "PRESENCE_STATUSES",
    "RealtimeGateway",
    "SocketIOTransport",
    "Transport",
    "chat_channel",
    "personal_channel",
]
