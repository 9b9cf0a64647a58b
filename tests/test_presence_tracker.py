import pytest
import socketio

from innovatefund.client import PresenceTracker, attach_presence_tracker, end_session


def test_updates_are_ignored_before_connecting():
    tracker = PresenceTracker()

    tracker.apply({"userId": "u1", "status": "online"})

    assert tracker.online == frozenset()


def test_online_and_offline_updates():
    tracker = PresenceTracker()
    tracker.reset()

    tracker.apply({"userId": "u1", "status": "online"})
    tracker.apply({"userId": "u2", "status": "online"})
    tracker.apply({"userId": "u2", "status": "offline", "lastSeen": "2024-05-01T10:00:00+00:00"})

    assert tracker.online == frozenset({"u1"})
    assert tracker.is_online("u1")
    assert tracker.last_seen("u2") == "2024-05-01T10:00:00+00:00"


def test_any_status_other_than_online_removes_the_user():
    tracker = PresenceTracker()
    tracker.reset()
    tracker.apply({"userId": "u1", "status": "online"})

    tracker.apply({"userId": "u1", "status": "away"})

    assert not tracker.is_online("u1")


def test_malformed_updates_are_ignored():
    tracker = PresenceTracker()
    tracker.reset()

    tracker.apply({"status": "online"})
    tracker.apply("online")

    assert tracker.online == frozenset()


def test_reconnect_starts_from_an_empty_view():
    tracker = PresenceTracker()
    tracker.reset()
    tracker.apply({"userId": "u1", "status": "online"})

    tracker.reset()

    assert tracker.online == frozenset()
    assert tracker.active


def test_attach_registers_client_handlers():
    client = socketio.AsyncClient()

    tracker = attach_presence_tracker(client)

    assert client.handlers["/"]["connect"] == tracker.reset
    assert client.handlers["/"]["user_status_update"] == tracker.apply


class _Client:
    def __init__(self):
        self.disconnected = False

    async def disconnect(self):
        self.disconnected = True


@pytest.mark.anyio
async def test_end_session_discards_the_view():
    client = _Client()
    tracker = PresenceTracker()
    tracker.reset()
    tracker.apply({"userId": "u1", "status": "online"})

    await end_session(client, tracker)

    assert client.disconnected
    assert tracker.online == frozenset()
    assert not tracker.active
    tracker.apply({"userId": "u1", "status": "online"})
    assert tracker.online == frozenset()
