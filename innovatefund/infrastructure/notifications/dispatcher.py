"""Notification fan-out: persist once, then deliver over live, push and email legs."""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime
from functools import partial
from typing import Any, Protocol

import anyio
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from innovatefund.domain.entities import (
    EMAIL_NOTIFICATION_KINDS,
    Notification,
    NotificationInput,
    RecipientPreferences,
)
from innovatefund.domain.exceptions import PersistenceError
from innovatefund.infrastructure.email import NOTIFICATION_TEMPLATE
from innovatefund.infrastructure.push import InvalidPushTokenError
from innovatefund.infrastructure.realtime import ChannelManager, personal_channel
from innovatefund.infrastructure.repositories import NotificationRepository, UserRepository
from innovatefund.utils import now_in_app_timezone

from .publisher import serialize_notification

logger = logging.getLogger(__name__)

LEG_RESOLVE = "resolve"
LEG_LIVE = "live"
LEG_PUSH = "push"
LEG_EMAIL = "email"


class PushSender(Protocol):
    @property
    def enabled(self) -> bool: ...

    def send(self, *, token: str, title: str, body: str, data: Mapping[str, Any]) -> Any: ...


class EmailSender(Protocol):
    @property
    def enabled(self) -> bool: ...

    def send(
        self, *, to: str, subject: str, template_id: str, data: Mapping[str, Any]
    ) -> bool: ...


@dataclass(frozen=True)
class DeliveryWarning:
    """Record of one failed best-effort delivery leg."""

    leg: str
    notification_id: str
    recipient_id: str
    reason: str
    occurred_at: datetime


class NotificationDispatcher:
    """Persist notifications and fan them out to the recipient.

    :meth:`notify` returns as soon as the record is stored. Delivery runs in a
    background task supervised by the dispatcher; failures of the live, push
    or email legs become :class:`DeliveryWarning` entries and never reach the
    caller.
    """

    def __init__(
        self,
        channels: ChannelManager,
        *,
        session_factory: Callable[[], Session],
        push_sender: PushSender,
        email_sender: EmailSender,
        delivery_timeout: float = 10.0,
        persistence_timeout: float = 10.0,
        max_warnings: int = 200,
    ) -> None:
        self._channels = channels
        self._session_factory = session_factory
        self._push_sender = push_sender
        self._email_sender = email_sender
        self._delivery_timeout = delivery_timeout
        self._persistence_timeout = persistence_timeout
        self._warnings: deque[DeliveryWarning] = deque(maxlen=max_warnings)
        self._tasks: set[asyncio.Task[None]] = set()
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def warnings(self) -> list[DeliveryWarning]:
        return list(self._warnings)

    @property
    def pending_tasks(self) -> int:
        return len(self._tasks)

    def start(self) -> None:
        self._running = True

    async def shutdown(self, grace_period: float = 5.0) -> None:
        """Stop accepting work, wait for pending deliveries, then cancel the rest."""

        self._running = False
        pending = [task for task in self._tasks if not task.done()]
        if not pending:
            return
        _, unfinished = await asyncio.wait(pending, timeout=grace_period)
        for task in unfinished:
            task.cancel()
        if unfinished:
            logger.warning("Cancelled %s pending notification deliveries", len(unfinished))
            await asyncio.gather(*unfinished, return_exceptions=True)

    async def drain(self) -> None:
        """Wait until every spawned delivery task has finished."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def notify(self, notification: NotificationInput) -> Notification:
        """Persist ``notification`` and schedule its delivery.

        Raises :class:`~innovatefund.domain.exceptions.ValidationError` for bad
        input and :class:`~innovatefund.domain.exceptions.PersistenceError` when
        the record cannot be stored in time.
        """

        if not self._running:
            raise RuntimeError("Notification dispatcher is not running")

        payload = notification.validated()
        try:
            with anyio.fail_after(self._persistence_timeout):
                record = await anyio.to_thread.run_sync(
                    self._persist, payload, abandon_on_cancel=True
                )
        except TimeoutError as exc:
            logger.error("Timed out persisting notification for %s", payload.recipient_id)
            raise PersistenceError("Timed out while saving the notification") from exc
        except SQLAlchemyError as exc:
            logger.exception("Could not persist notification for %s", payload.recipient_id)
            raise PersistenceError("Could not save the notification") from exc

        task = asyncio.get_running_loop().create_task(self._deliver(record))
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return record

    def notify_from_thread(self, notification: NotificationInput) -> Notification:
        """Run :meth:`notify` from a worker thread started by the event loop."""

        return anyio.from_thread.run(self.notify, notification)

    def _on_task_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Notification delivery task failed", exc_info=exc)

    def _persist(self, payload: NotificationInput) -> Notification:
        notification = Notification(
            id=None,
            recipient_id=payload.recipient_id,
            sender_id=payload.sender_id,
            kind=payload.kind,
            title=payload.title,
            body=payload.body,
            related_item=payload.related_item,
            action_url=payload.action_url,
            created_at=now_in_app_timezone(),
        )
        with self._session_factory() as session:
            return NotificationRepository(session).create(notification)

    def _resolve_recipient(self, recipient_id: str) -> RecipientPreferences | None:
        with self._session_factory() as session:
            return UserRepository(session).get_preferences(recipient_id)

    def _clear_push_token(self, recipient_id: str, token: str) -> bool:
        with self._session_factory() as session:
            return UserRepository(session).clear_push_token(recipient_id, token=token)

    async def _deliver(self, record: Notification) -> None:
        try:
            preferences = await anyio.to_thread.run_sync(
                self._resolve_recipient, record.recipient_id
            )
        except SQLAlchemyError as exc:
            self._warn(LEG_RESOLVE, record, f"recipient lookup failed: {exc}")
            return

        if preferences is None:
            logger.warning(
                "Recipient %s not found for notification %s", record.recipient_id, record.id
            )
            return

        async with anyio.create_task_group() as task_group:
            task_group.start_soon(self._deliver_live, record)
            task_group.start_soon(self._deliver_push, record, preferences)
            task_group.start_soon(self._deliver_email, record, preferences)

    async def _deliver_live(self, record: Notification) -> None:
        try:
            await self._channels.broadcast(
                personal_channel(record.recipient_id),
                "new_notification",
                serialize_notification(record),
            )
        except Exception as exc:
            self._warn(LEG_LIVE, record, str(exc) or exc.__class__.__name__)

    async def _deliver_push(self, record: Notification, preferences: RecipientPreferences) -> None:
        match preferences:
            case RecipientPreferences(notifications_enabled=False):
                return
            case RecipientPreferences(push_token=str(token)) if token:
                pass
            case _:
                return

        if not self._push_sender.enabled:
            logger.debug("Push delivery disabled; skipping notification %s", record.id)
            return

        send = partial(
            self._push_sender.send,
            token=token,
            title=record.title,
            body=record.body,
            data={
                "type": record.kind.value,
                "actionUrl": record.action_url or "",
                "notificationId": record.id or "",
            },
        )
        try:
            with anyio.fail_after(self._delivery_timeout):
                await anyio.to_thread.run_sync(send, abandon_on_cancel=True)
        except InvalidPushTokenError as exc:
            self._warn(LEG_PUSH, record, f"invalid push token: {exc}")
            await self._self_heal_token(record, token)
        except TimeoutError:
            self._warn(LEG_PUSH, record, "timed out")
        except Exception as exc:
            self._warn(LEG_PUSH, record, str(exc) or exc.__class__.__name__)

    async def _self_heal_token(self, record: Notification, token: str) -> None:
        try:
            cleared = await anyio.to_thread.run_sync(
                self._clear_push_token, record.recipient_id, token
            )
        except SQLAlchemyError:
            logger.warning(
                "Could not clear push token for %s", record.recipient_id, exc_info=True
            )
            return
        if cleared:
            logger.info("Cleared invalid push token for %s", record.recipient_id)

    async def _deliver_email(self, record: Notification, preferences: RecipientPreferences) -> None:
        if record.kind not in EMAIL_NOTIFICATION_KINDS:
            return
        match preferences:
            case RecipientPreferences(notifications_enabled=False):
                return
            case RecipientPreferences(email=str(address)) if address:
                pass
            case _:
                return

        if not self._email_sender.enabled:
            logger.debug("Email delivery disabled; skipping notification %s", record.id)
            return

        send = partial(
            self._email_sender.send,
            to=address,
            subject=record.title,
            template_id=NOTIFICATION_TEMPLATE,
            data={
                "recipientName": preferences.name,
                "title": record.title,
                "message": record.body,
                "actionUrl": record.action_url,
                "senderName": record.sender.name if record.sender else None,
            },
        )
        try:
            with anyio.fail_after(self._delivery_timeout):
                accepted = await anyio.to_thread.run_sync(send, abandon_on_cancel=True)
        except TimeoutError:
            self._warn(LEG_EMAIL, record, "timed out")
            return
        except Exception as exc:
            self._warn(LEG_EMAIL, record, str(exc) or exc.__class__.__name__)
            return
        if not accepted:
            self._warn(LEG_EMAIL, record, "email relay did not accept the message")

    def _warn(self, leg: str, record: Notification, reason: str) -> None:
        warning = DeliveryWarning(
            leg=leg,
            notification_id=record.id or "",
            recipient_id=record.recipient_id,
            reason=reason,
            occurred_at=now_in_app_timezone(),
        )
        self._warnings.append(warning)
        logger.warning(
            "Delivery leg %s failed for notification %s (recipient %s): %s",
            leg,
            warning.notification_id,
            warning.recipient_id,
            reason,
        )


__all__ = [
    "DeliveryWarning",
    "EmailSender",
    "LEG_EMAIL",
    "LEG_LIVE",
    "LEG_PUSH",
    "LEG_RESOLVE",
    "NotificationDispatcher",
    "PushSender",
]
