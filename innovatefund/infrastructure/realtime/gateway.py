"""Socket.IO gateway: handshake authentication and the client event table."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

import anyio
import socketio
from socketio.exceptions import ConnectionRefusedError as SocketConnectionRefusedError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from innovatefund.domain.entities import User
from innovatefund.domain.exceptions import (
    AccessDeniedError,
    AuthenticationError,
    NotFoundError,
    ValidationError,
)
from innovatefund.infrastructure.repositories import ChatRepository, UserRepository
from innovatefund.infrastructure.security import decode_access_token
from innovatefund.utils import now_in_app_timezone

from .channels import ChannelManager, SocketIOTransport
from .registry import ConnectionContext, ConnectionRegistry, chat_channel, personal_channel

logger = logging.getLogger(__name__)

Handler = Callable[[ConnectionContext, Any], Awaitable[None]]

PRESENCE_STATUSES = frozenset({"online", "offline", "away"})


def _extract_token(auth: Any) -> str | None:
    if isinstance(auth, dict):
        token = auth.get("token")
        if isinstance(token, str) and token.strip():
            return token.strip()
    return None


def _extract_chat_id(payload: Any) -> str:
    """Accept either a bare chat id or a ``{chatId}`` object."""

    if isinstance(payload, dict):
        payload = payload.get("chatId")
    if isinstance(payload, str) and payload.strip():
        return payload.strip()
    raise ValidationError("chatId is required")


class RealtimeGateway:
    """Translate transport callbacks into handler calls on the registry.

    Client events are routed through an explicit table of
    ``(connection_context, payload)`` handlers. Domain errors raised by a
    handler are reported back to the requesting connection as an ``error``
    event; the connection itself stays open.
    """

    def __init__(
        self,
        registry: ConnectionRegistry,
        channels: ChannelManager,
        *,
        session_factory: Callable[[], Session],
    ) -> None:
        self._registry = registry
        self._channels = channels
        self._session_factory = session_factory
        self._handlers: dict[str, Handler] = {
            "join_chat": self._requires_thread_access(self._join_chat),
            "leave_chat": self._leave_chat,
            "typing_start": self._relay_typing("user_typing"),
            "typing_stop": self._relay_typing("user_stop_typing"),
            "message_delivered": self._message_delivered,
            "update_status": self._update_status,
        }

    @property
    def events(self) -> tuple[str, ...]:
        return tuple(self._handlers)

    def attach(self, server: socketio.AsyncServer) -> None:
        """Register the gateway callbacks on ``server``."""

        self._channels.bind_transport(SocketIOTransport(server))

        async def on_connect(sid: str, environ: dict[str, Any], auth: Any = None) -> bool:
            try:
                await self.connect(sid, auth)
            except AuthenticationError as exc:
                raise SocketConnectionRefusedError(str(exc)) from exc
            return True

        async def on_disconnect(sid: str, *_args: Any) -> None:
            await self.disconnect(sid)

        server.on("connect", on_connect)
        server.on("disconnect", on_disconnect)
        for event in self._handlers:
            server.on(event, self._transport_handler(event))

    def _transport_handler(self, event: str) -> Callable[..., Awaitable[None]]:
        async def handle(sid: str, data: Any = None) -> None:
            await self.dispatch(sid, event, data)

        return handle

    async def connect(self, sid: str, auth: Any) -> ConnectionContext:
        """Authenticate the handshake and admit the connection."""

        token = _extract_token(auth)
        if token is None:
            raise AuthenticationError()
        try:
            claims = decode_access_token(token)
        except ValueError as exc:
            raise AuthenticationError() from exc

        principal_id = claims["sub"]
        try:
            user = await anyio.to_thread.run_sync(self._load_active_user, principal_id)
        except SQLAlchemyError as exc:
            logger.exception("Could not load principal %s during handshake", principal_id)
            raise AuthenticationError() from exc
        if user is None:
            raise AuthenticationError()

        context = self._registry.register(
            principal_id, sid, user_type=claims.get("userType") or user.user_type
        )
        logger.info("Principal %s connected (%s)", principal_id, sid)
        return context

    async def disconnect(self, sid: str) -> None:
        context = self._registry.unregister(sid)
        if context is None:
            return
        logger.info("Principal %s disconnected (%s)", context.principal_id, sid)
        if self._registry.is_online(context.principal_id):
            return

        last_seen = now_in_app_timezone()
        try:
            await anyio.to_thread.run_sync(self._touch_last_active, context.principal_id)
        except SQLAlchemyError:
            logger.warning(
                "Could not record last activity for %s", context.principal_id, exc_info=True
            )
        # A new tab may have connected while the write was running.
        if self._registry.is_online(context.principal_id):
            return
        await self._channels.broadcast_all(
            "user_status_update",
            {
                "userId": context.principal_id,
                "status": "offline",
                "lastSeen": last_seen.isoformat(),
            },
        )

    async def dispatch(self, sid: str, event: str, payload: Any) -> None:
        context = self._registry.get(sid)
        if context is None:
            logger.debug("Ignoring %s from unknown connection %s", event, sid)
            return
        handler = self._handlers.get(event)
        if handler is None:
            logger.debug("Ignoring unsupported event %s", event)
            return

        try:
            await handler(context, payload)
        except (ValidationError, NotFoundError, AccessDeniedError) as exc:
            await self._channels.emit_to(sid, "error", {"message": str(exc)})
        except SQLAlchemyError:
            logger.exception("Database error while handling %s for %s", event, sid)
            await self._channels.emit_to(sid, "error", {"message": "Server error"})

    def _requires_thread_access(
        self, handler: Callable[[ConnectionContext, str], Awaitable[None]]
    ) -> Handler:
        async def guarded(context: ConnectionContext, payload: Any) -> None:
            chat_id = _extract_chat_id(payload)
            participants = await anyio.to_thread.run_sync(self._load_participants, chat_id)
            if participants is None or context.principal_id not in participants:
                raise AccessDeniedError()
            if self._registry.get(context.sid) is None:
                return
            await handler(context, chat_id)

        return guarded

    async def _join_chat(self, context: ConnectionContext, chat_id: str) -> None:
        self._channels.join(context.sid, chat_channel(chat_id))
        await self._channels.emit_to(context.sid, "joined_chat", {"chatId": chat_id})

    async def _leave_chat(self, context: ConnectionContext, payload: Any) -> None:
        chat_id = _extract_chat_id(payload)
        self._channels.leave(context.sid, chat_channel(chat_id))
        await self._channels.emit_to(context.sid, "left_chat", {"chatId": chat_id})

    def _relay_typing(self, outgoing_event: str) -> Handler:
        async def relay(context: ConnectionContext, payload: Any) -> None:
            chat_id = _extract_chat_id(payload)
            channel = chat_channel(chat_id)
            if not self._channels.is_member(context.sid, channel):
                raise AccessDeniedError()
            await self._channels.broadcast(
                channel,
                outgoing_event,
                {"userId": context.principal_id, "chatId": chat_id},
                exclude=context.sid,
            )

        return relay

    async def _message_delivered(self, context: ConnectionContext, payload: Any) -> None:
        if not isinstance(payload, dict):
            raise ValidationError("messageId and senderId are required")
        message_id = payload.get("messageId")
        sender_id = payload.get("senderId")
        if not message_id or not sender_id:
            raise ValidationError("messageId and senderId are required")
        await self._channels.broadcast(
            personal_channel(str(sender_id)),
            "message_status_update",
            {"messageId": message_id, "status": "delivered"},
        )

    async def _update_status(self, context: ConnectionContext, payload: Any) -> None:
        status = payload.get("status") if isinstance(payload, dict) else payload
        if status not in PRESENCE_STATUSES:
            raise ValidationError(
                "status must be one of: " + ", ".join(sorted(PRESENCE_STATUSES))
            )
        await self._channels.broadcast_all(
            "user_status_update",
            {
                "userId": context.principal_id,
                "status": status,
                "lastSeen": now_in_app_timezone().isoformat(),
            },
            exclude=context.sid,
        )

    def _load_active_user(self, principal_id: str) -> User | None:
        with self._session_factory() as session:
            user = UserRepository(session).get(principal_id)
        if user is None or not user.is_active:
            return None
        return user

    def _load_participants(self, chat_id: str) -> list[str] | None:
        with self._session_factory() as session:
            return ChatRepository(session).get_participant_ids(chat_id)

    def _touch_last_active(self, principal_id: str) -> None:
        with self._session_factory() as session:
            UserRepository(session).touch_last_active(principal_id)


__all__ = ["PRESENCE_STATUSES", "RealtimeGateway"]
