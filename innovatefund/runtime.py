"""Process-scoped owner of the realtime and notification components."""

from __future__ import annotations

import logging
from collections.abc import Callable

import socketio
from sqlalchemy.orm import Session

from innovatefund.config import Settings, get_settings
from innovatefund.infrastructure import database
from innovatefund.infrastructure.email import SendGridEmailSender
from innovatefund.infrastructure.notifications import (
    ChatPublisher,
    EmailSender,
    NotificationDispatcher,
    PushSender,
)
from innovatefund.infrastructure.push import FirebasePushSender
from innovatefund.infrastructure.realtime import (
    ChannelManager,
    ConnectionRegistry,
    RealtimeGateway,
    Transport,
)

logger = logging.getLogger(__name__)


class Runtime:
    """Wire one registry, channel manager, dispatcher and gateway together.

    A single instance lives on ``app.state.runtime``. Nothing is accepted
    before :meth:`start` and pending deliveries are drained by
    :meth:`shutdown`.
    """

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        session_factory: Callable[[], Session] | None = None,
        push_sender: PushSender | None = None,
        email_sender: EmailSender | None = None,
        transport: Transport | None = None,
    ) -> None:
        settings = settings or get_settings()
        session_factory = session_factory or database.SessionLocal

        self.shutdown_grace = settings.shutdown_grace_seconds
        self.registry = ConnectionRegistry()
        self.channels = ChannelManager(self.registry, transport)
        self.dispatcher = NotificationDispatcher(
            self.channels,
            session_factory=session_factory,
            push_sender=push_sender or FirebasePushSender(),
            email_sender=email_sender or SendGridEmailSender(),
            delivery_timeout=settings.delivery_timeout_seconds,
            persistence_timeout=settings.persistence_timeout_seconds,
        )
        self.chat_publisher = ChatPublisher(self.channels)
        self.gateway = RealtimeGateway(
            self.registry, self.channels, session_factory=session_factory
        )
        self.sio = socketio.AsyncServer(
            async_mode="asgi",
            cors_allowed_origins=settings.allowed_origins,
        )
        self.gateway.attach(self.sio)
        if transport is not None:
            # Keep an explicitly injected transport over the Socket.IO one.
            self.channels.bind_transport(transport)

    @property
    def running(self) -> bool:
        return self.registry.running and self.dispatcher.running

    def start(self) -> None:
        self.registry.start()
        self.dispatcher.start()
        logger.info("Realtime runtime started")

    async def shutdown(self, grace_period: float | None = None) -> None:
        if grace_period is None:
            grace_period = self.shutdown_grace
        await self.dispatcher.shutdown(grace_period)
        self.registry.shutdown()
        logger.info("Realtime runtime stopped")


__all__ = ["Runtime"]
