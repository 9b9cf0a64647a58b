"""In-memory registry of authenticated realtime connections."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import DefaultDict, Set

from innovatefund.utils import now_in_app_timezone

logger = logging.getLogger(__name__)


def personal_channel(principal_id: str) -> str:
    return f"user_{principal_id}"


def chat_channel(thread_id: str) -> str:
    return f"chat_{thread_id}"


@dataclass
class ConnectionContext:
    """State kept for one live connection handle."""

    sid: str
    principal_id: str
    user_type: str | None = None
    channels: set[str] = field(default_factory=set)
    connected_at: datetime | None = None

    @property
    def personal_channel(self) -> str:
        return personal_channel(self.principal_id)


class ConnectionRegistry:
    """Track which principal owns which connection and which channels it joined.

    The registry is owned by the process runtime and only accepts connections
    between :meth:`start` and :meth:`shutdown`.
    """

    def __init__(self) -> None:
        self._connections: dict[str, ConnectionContext] = {}
        self._by_principal: DefaultDict[str, Set[str]] = defaultdict(set)
        self._by_channel: DefaultDict[str, Set[str]] = defaultdict(set)
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        self._running = True

    def shutdown(self) -> None:
        self._running = False
        self._connections.clear()
        self._by_principal.clear()
        self._by_channel.clear()

    def register(
        self, principal_id: str, sid: str, *, user_type: str | None = None
    ) -> ConnectionContext:
        """Admit ``sid`` for ``principal_id`` and join it to the personal channel."""

        if not self._running:
            raise RuntimeError("Connection registry is not running")
        if sid in self._connections:
            self.unregister(sid)

        context = ConnectionContext(
            sid=sid,
            principal_id=principal_id,
            user_type=user_type,
            connected_at=now_in_app_timezone(),
        )
        self._connections[sid] = context
        self._by_principal[principal_id].add(sid)
        self.add_channel(sid, context.personal_channel)
        logger.debug("Registered connection %s for principal %s", sid, principal_id)
        return context

    def unregister(self, sid: str) -> ConnectionContext | None:
        """Drop ``sid`` and its channel memberships; return its last context."""

        context = self._connections.pop(sid, None)
        if context is None:
            return None

        for channel in context.channels:
            members = self._by_channel.get(channel)
            if members is None:
                continue
            members.discard(sid)
            if not members:
                self._by_channel.pop(channel, None)

        owned = self._by_principal.get(context.principal_id)
        if owned is not None:
            owned.discard(sid)
            if not owned:
                self._by_principal.pop(context.principal_id, None)
        logger.debug("Unregistered connection %s for principal %s", sid, context.principal_id)
        return context

    def get(self, sid: str) -> ConnectionContext | None:
        return self._connections.get(sid)

    def connections_for(self, principal_id: str) -> frozenset[str]:
        return frozenset(self._by_principal.get(principal_id, ()))

    def is_online(self, principal_id: str) -> bool:
        return bool(self._by_principal.get(principal_id))

    def online_principals(self) -> list[str]:
        return sorted(self._by_principal)

    def add_channel(self, sid: str, channel: str) -> bool:
        context = self._connections.get(sid)
        if context is None:
            return False
        context.channels.add(channel)
        self._by_channel[channel].add(sid)
        return True

    def remove_channel(self, sid: str, channel: str) -> bool:
        context = self._connections.get(sid)
        if context is None or channel not in context.channels:
            return False
        context.channels.discard(channel)
        members = self._by_channel.get(channel)
        if members is not None:
            members.discard(sid)
            if not members:
                self._by_channel.pop(channel, None)
        return True

    def members(self, channel: str) -> frozenset[str]:
        return frozenset(self._by_channel.get(channel, ()))

    def all_connections(self) -> frozenset[str]:
        return frozenset(self._connections)

    def __len__(self) -> int:
        return len(self._connections)


__all__ = [
    "ConnectionContext",
    "ConnectionRegistry",
    "chat_channel",
    "personal_channel",
]
