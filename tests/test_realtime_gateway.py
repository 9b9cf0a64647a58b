from datetime import timedelta

import anyio
import pytest
import socketio
from socketio.exceptions import ConnectionRefusedError as SocketConnectionRefusedError

from innovatefund.application.use_cases.chat import send_message
from innovatefund.domain.exceptions import AuthenticationError
from innovatefund.infrastructure import database
from innovatefund.infrastructure.notifications import ChatPublisher
from innovatefund.infrastructure.realtime import RealtimeGateway, chat_channel
from innovatefund.infrastructure.repositories import ChatRepository, UserRepository
from innovatefund.infrastructure.security import create_access_token

pytestmark = pytest.mark.anyio


@pytest.fixture
def gateway(registry, channels):
    return RealtimeGateway(registry, channels, session_factory=database.SessionLocal)


def _auth(user):
    return {"token": create_access_token(user.id, user.user_type)}


def _thread(*participants):
    with database.SessionLocal() as session:
        return ChatRepository(session).create_thread([user.id for user in participants])


async def test_handshake_without_valid_token_is_refused(gateway, registry, make_user):
    user = make_user("Ana")
    expired = create_access_token(user.id, user.user_type, timedelta(minutes=-1))

    for auth in (None, {}, {"token": ""}, {"token": "not-a-jwt"}, {"token": expired}):
        with pytest.raises(AuthenticationError):
            await gateway.connect("sid-1", auth)

    assert len(registry) == 0


async def test_handshake_refuses_unknown_or_inactive_principal(gateway, registry, make_user):
    inactive = make_user("Ana", is_active=False)

    with pytest.raises(AuthenticationError):
        await gateway.connect("sid-1", {"token": create_access_token("ghost", "innovator")})
    with pytest.raises(AuthenticationError):
        await gateway.connect("sid-2", _auth(inactive))

    assert len(registry) == 0


async def test_connection_joins_personal_channel(gateway, registry, make_user):
    user = make_user("Ana", user_type="investor")

    context = await gateway.connect("sid-1", _auth(user))

    assert context.principal_id == user.id
    assert context.user_type == "investor"
    assert registry.members(f"user_{user.id}") == frozenset({"sid-1"})
    assert registry.is_online(user.id)


async def test_attach_registers_every_client_event(gateway, channels):
    server = socketio.AsyncServer(async_mode="asgi")

    gateway.attach(server)

    handlers = server.handlers["/"]
    for event in ("connect", "disconnect", *gateway.events):
        assert event in handlers


async def test_attached_connect_refuses_bad_handshake(gateway):
    server = socketio.AsyncServer(async_mode="asgi")
    gateway.attach(server)

    with pytest.raises(SocketConnectionRefusedError):
        await server.handlers["/"]["connect"]("sid-1", {}, {"token": "nope"})


async def test_outsider_cannot_join_a_thread(gateway, registry, transport, make_user):
    ana, ben, eve = make_user("Ana"), make_user("Ben"), make_user("Eve")
    thread = _thread(ana, ben)
    await gateway.connect("sid-eve", _auth(eve))

    await gateway.dispatch("sid-eve", "join_chat", thread.id)
    await gateway.dispatch("sid-eve", "join_chat", {"chatId": "missing-thread"})

    assert transport.events("error", "sid-eve") == [
        {"message": "Access denied"},
        {"message": "Access denied"},
    ]
    assert "sid-eve" not in registry.members(chat_channel(thread.id))


async def test_join_and_leave_chat(gateway, registry, transport, make_user):
    ana, ben = make_user("Ana"), make_user("Ben")
    thread = _thread(ana, ben)
    await gateway.connect("sid-ben", _auth(ben))

    await gateway.dispatch("sid-ben", "join_chat", {"chatId": thread.id})
    assert transport.events("joined_chat", "sid-ben") == [{"chatId": thread.id}]
    assert registry.members(chat_channel(thread.id)) == frozenset({"sid-ben"})

    await gateway.dispatch("sid-ben", "leave_chat", thread.id)
    await gateway.dispatch("sid-ben", "leave_chat", thread.id)
    assert registry.members(chat_channel(thread.id)) == frozenset()
    assert transport.events("error", "sid-ben") == []


async def test_missing_chat_id_reports_validation_error(gateway, transport, make_user):
    ana = make_user("Ana")
    await gateway.connect("sid-ana", _auth(ana))

    await gateway.dispatch("sid-ana", "join_chat", {})

    assert transport.events("error", "sid-ana") == [{"message": "chatId is required"}]


async def test_new_message_reaches_every_participant_connection_once(
    gateway, channels, transport, make_user
):
    ana, ben, eve = make_user("Ana"), make_user("Ben"), make_user("Eve")
    thread = _thread(ana, ben)
    await gateway.connect("sid-ana", _auth(ana))
    await gateway.connect("sid-ben-1", _auth(ben))
    await gateway.connect("sid-ben-2", _auth(ben))
    await gateway.connect("sid-eve", _auth(eve))
    await gateway.dispatch("sid-ben-1", "join_chat", thread.id)
    publisher = ChatPublisher(channels)

    def post():
        with database.SessionLocal() as session:
            return send_message(
                session,
                thread_id=thread.id,
                sender_id=ana.id,
                content="Hi Ben!",
                publish=publisher.publish_message_from_thread,
            )

    message = await anyio.to_thread.run_sync(post)

    for sid in ("sid-ana", "sid-ben-1", "sid-ben-2"):
        [payload] = transport.events("new_message", sid)
        assert payload["chatId"] == thread.id
        assert payload["message"]["id"] == message.id
        assert payload["message"]["content"] == "Hi Ben!"
        assert payload["message"]["readBy"][0]["user"] == ana.id
    assert transport.events("new_message", "sid-eve") == []


async def test_typing_is_relayed_to_other_members_only(gateway, transport, make_user):
    ana, ben = make_user("Ana"), make_user("Ben")
    thread = _thread(ana, ben)
    await gateway.connect("sid-ana", _auth(ana))
    await gateway.connect("sid-ben", _auth(ben))
    await gateway.dispatch("sid-ana", "join_chat", thread.id)
    await gateway.dispatch("sid-ben", "join_chat", thread.id)

    await gateway.dispatch("sid-ana", "typing_start", {"chatId": thread.id})
    await gateway.dispatch("sid-ana", "typing_stop", {"chatId": thread.id})

    expected = {"userId": ana.id, "chatId": thread.id}
    assert transport.events("user_typing", "sid-ben") == [expected]
    assert transport.events("user_stop_typing", "sid-ben") == [expected]
    assert transport.events("user_typing", "sid-ana") == []


async def test_typing_requires_joined_thread(gateway, transport, make_user):
    ana, ben = make_user("Ana"), make_user("Ben")
    thread = _thread(ana, ben)
    await gateway.connect("sid-ana", _auth(ana))
    await gateway.connect("sid-ben", _auth(ben))
    await gateway.dispatch("sid-ben", "join_chat", thread.id)

    await gateway.dispatch("sid-ana", "typing_start", thread.id)

    assert transport.events("error", "sid-ana") == [{"message": "Access denied"}]
    assert transport.events("user_typing") == []


async def test_delivery_receipt_goes_to_the_sender(gateway, transport, make_user):
    ana, ben = make_user("Ana"), make_user("Ben")
    await gateway.connect("sid-ana", _auth(ana))
    await gateway.connect("sid-ben", _auth(ben))

    await gateway.dispatch("sid-ben", "message_delivered", {"messageId": "m1", "senderId": ana.id})
    await gateway.dispatch("sid-ben", "message_delivered", {"messageId": "m2"})

    assert transport.events("message_status_update", "sid-ana") == [
        {"messageId": "m1", "status": "delivered"}
    ]
    assert transport.events("error", "sid-ben") == [
        {"message": "messageId and senderId are required"}
    ]


async def test_status_update_is_broadcast_to_others(gateway, transport, make_user):
    ana, ben = make_user("Ana"), make_user("Ben")
    await gateway.connect("sid-ana", _auth(ana))
    await gateway.connect("sid-ben", _auth(ben))

    await gateway.dispatch("sid-ana", "update_status", {"status": "away"})
    await gateway.dispatch("sid-ana", "update_status", {"status": "busy"})

    [update] = transport.events("user_status_update", "sid-ben")
    assert update["userId"] == ana.id
    assert update["status"] == "away"
    assert transport.events("user_status_update", "sid-ana") == []
    [error] = transport.events("error", "sid-ana")
    assert error["message"].startswith("status must be one of")


async def test_offline_is_announced_when_last_tab_closes(
    gateway, registry, transport, make_user
):
    ana, ben = make_user("Ana"), make_user("Ben")
    await gateway.connect("sid-ana-1", _auth(ana))
    await gateway.connect("sid-ana-2", _auth(ana))
    await gateway.connect("sid-ben", _auth(ben))

    await gateway.disconnect("sid-ana-1")
    assert transport.events("user_status_update") == []
    assert registry.is_online(ana.id)

    await gateway.disconnect("sid-ana-2")
    [update] = transport.events("user_status_update", "sid-ben")
    assert update["userId"] == ana.id
    assert update["status"] == "offline"
    assert update["lastSeen"]
    assert not registry.is_online(ana.id)
    with database.SessionLocal() as session:
        assert UserRepository(session).get(ana.id).last_active is not None


async def test_reconnect_during_last_active_write_suppresses_offline(
    gateway, registry, transport, make_user, monkeypatch
):
    ana, ben = make_user("Ana"), make_user("Ben")
    await gateway.connect("sid-ana-1", _auth(ana))
    await gateway.connect("sid-ben", _auth(ben))
    touch = gateway._touch_last_active

    def touch_then_reconnect(principal_id):
        touch(principal_id)
        registry.register(ana.id, "sid-ana-2", user_type=ana.user_type)

    monkeypatch.setattr(gateway, "_touch_last_active", touch_then_reconnect)

    await gateway.disconnect("sid-ana-1")

    assert registry.is_online(ana.id)
    assert transport.events("user_status_update") == []


async def test_events_from_unknown_connections_are_ignored(gateway, transport):
    await gateway.dispatch("sid-unknown", "join_chat", "anything")
    await gateway.disconnect("sid-unknown")

    assert transport.emitted == []
