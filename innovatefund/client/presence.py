"""Best-effort view of which principals are online, built from server events."""

from __future__ import annotations

import logging
from typing import Any

import socketio

logger = logging.getLogger(__name__)


class PresenceTracker:
    """Set of principal ids believed online.

    The view is only as fresh as the ``user_status_update`` events received
    since the last :meth:`reset`; it is never reconciled against the server.
    """

    def __init__(self) -> None:
        self._online: set[str] = set()
        self._last_seen: dict[str, str] = {}
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    @property
    def online(self) -> frozenset[str]:
        return frozenset(self._online)

    def is_online(self, user_id: str) -> bool:
        return user_id in self._online

    def last_seen(self, user_id: str) -> str | None:
        return self._last_seen.get(user_id)

    def reset(self) -> None:
        """Start from an empty view, e.g. after (re)connecting."""

        self._online.clear()
        self._last_seen.clear()
        self._active = True

    def apply(self, payload: Any) -> None:
        """Apply one ``user_status_update`` payload.

        Only ``online`` marks a principal present; any other status removes it.
        """

        if not self._active or not isinstance(payload, dict):
            return
        user_id = payload.get("userId")
        if not user_id:
            logger.debug("Ignoring status update without userId: %r", payload)
            return
        if payload.get("lastSeen"):
            self._last_seen[user_id] = payload["lastSeen"]
        if payload.get("status") == "online":
            self._online.add(user_id)
        else:
            self._online.discard(user_id)

    def discard(self) -> None:
        """Drop everything when the principal's own session ends."""

        self._online.clear()
        self._last_seen.clear()
        self._active = False


def attach_presence_tracker(
    client: socketio.AsyncClient, tracker: PresenceTracker | None = None
) -> PresenceTracker:
    """Keep ``tracker`` in sync with the events received by ``client``."""

    tracker = tracker or PresenceTracker()
    client.on("connect", tracker.reset)
    client.on("user_status_update", tracker.apply)
    return tracker


async def end_session(client: socketio.AsyncClient, tracker: PresenceTracker) -> None:
    """Disconnect ``client`` and forget the presence view."""

    await client.disconnect()
    tracker.discard()
