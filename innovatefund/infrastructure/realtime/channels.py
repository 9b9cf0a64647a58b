"""Channel membership and fan-out over the realtime transport."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Protocol

import socketio

from .registry import ConnectionRegistry

logger = logging.getLogger(__name__)


class Transport(Protocol):
    async def emit(self, event: str, data: Any, *, to: str) -> None: ...


class SocketIOTransport:
    """Deliver events to individual Socket.IO sessions."""

    def __init__(self, server: socketio.AsyncServer) -> None:
        self._server = server

    async def emit(self, event: str, data: Any, *, to: str) -> None:
        await self._server.emit(event, data, to=to)


class ChannelManager:
    """Group connections into channels and broadcast events to them.

    Recipients are resolved per connection from the registry, so a principal
    with several tabs receives one copy per tab and never more.
    """

    def __init__(self, registry: ConnectionRegistry, transport: Transport | None = None) -> None:
        self._registry = registry
        self._transport = transport

    @property
    def registry(self) -> ConnectionRegistry:
        return self._registry

    def bind_transport(self, transport: Transport) -> None:
        self._transport = transport

    def join(self, sid: str, channel: str) -> bool:
        joined = self._registry.add_channel(sid, channel)
        if joined:
            logger.debug("Connection %s joined %s", sid, channel)
        return joined

    def leave(self, sid: str, channel: str) -> None:
        if self._registry.remove_channel(sid, channel):
            logger.debug("Connection %s left %s", sid, channel)

    def is_member(self, sid: str, channel: str) -> bool:
        return sid in self._registry.members(channel)

    async def broadcast(
        self,
        channel: str,
        event: str,
        payload: Any,
        *,
        exclude: str | None = None,
    ) -> int:
        return await self._deliver(self._registry.members(channel), event, payload, exclude)

    async def broadcast_many(
        self,
        channels: Iterable[str],
        event: str,
        payload: Any,
        *,
        exclude: str | None = None,
    ) -> int:
        """Broadcast to the union of ``channels``, once per connection."""

        recipients: set[str] = set()
        for channel in channels:
            recipients.update(self._registry.members(channel))
        return await self._deliver(recipients, event, payload, exclude)

    async def broadcast_all(
        self, event: str, payload: Any, *, exclude: str | None = None
    ) -> int:
        return await self._deliver(self._registry.all_connections(), event, payload, exclude)

    async def emit_to(self, sid: str, event: str, payload: Any) -> bool:
        return bool(await self._deliver((sid,), event, payload, None))

    async def _deliver(
        self,
        sids: Iterable[str],
        event: str,
        payload: Any,
        exclude: str | None,
    ) -> int:
        if self._transport is None:
            logger.debug("No realtime transport bound; dropping %s", event)
            return 0

        delivered = 0
        for sid in sorted(sids):
            if sid == exclude:
                continue
            # Membership may have changed while a previous emit was awaited.
            if self._registry.get(sid) is None:
                continue
            try:
                await self._transport.emit(event, payload, to=sid)
            except Exception:
                logger.warning("Failed to emit %s to connection %s", event, sid, exc_info=True)
                continue
            delivered += 1
        return delivered


__all__ = ["ChannelManager", "SocketIOTransport", "Transport"]
