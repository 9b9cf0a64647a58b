"""Client-side helpers for consumers of the realtime endpoint."""

from .presence import PresenceTracker, attach_presence_tracker, end_session

__all__ = ["PresenceTracker", "attach_presence_tracker", "end_session"]
