import pytest

from innovatefund.infrastructure.realtime import ConnectionRegistry, chat_channel, personal_channel


def test_register_requires_running_registry():
    registry = ConnectionRegistry()

    with pytest.raises(RuntimeError):
        registry.register("u1", "sid-1")


def test_principal_stays_online_until_last_connection_leaves(registry):
    registry.register("u1", "sid-1")
    registry.register("u1", "sid-2")

    assert registry.connections_for("u1") == frozenset({"sid-1", "sid-2"})
    assert registry.members(personal_channel("u1")) == frozenset({"sid-1", "sid-2"})

    registry.unregister("sid-1")
    assert registry.is_online("u1")

    context = registry.unregister("sid-2")
    assert context.principal_id == "u1"
    assert not registry.is_online("u1")
    assert registry.members(personal_channel("u1")) == frozenset()
    assert registry.unregister("sid-2") is None


def test_unregister_drops_every_channel_membership(registry):
    registry.register("u1", "sid-1")
    assert registry.add_channel("sid-1", chat_channel("t1"))

    registry.unregister("sid-1")

    assert registry.members(chat_channel("t1")) == frozenset()
    assert registry.add_channel("sid-1", chat_channel("t1")) is False


def test_shutdown_forgets_connections(registry):
    registry.register("u1", "sid-1")

    registry.shutdown()

    assert len(registry) == 0
    assert registry.online_principals() == []
    assert registry.running is False


@pytest.mark.anyio
async def test_broadcast_many_sends_one_copy_per_connection(registry, channels, transport):
    registry.register("u1", "sid-1")
    registry.register("u2", "sid-2")
    channels.join("sid-1", chat_channel("t1"))
    channels.join("sid-2", chat_channel("t1"))

    delivered = await channels.broadcast_many(
        [chat_channel("t1"), personal_channel("u1"), personal_channel("u2")],
        "new_message",
        {"chatId": "t1"},
    )

    assert delivered == 2
    assert sorted(target for _, _, target in transport.emitted) == ["sid-1", "sid-2"]


@pytest.mark.anyio
async def test_broadcast_skips_excluded_and_failing_connections(registry, channels, transport):
    for sid in ("sid-1", "sid-2", "sid-3"):
        registry.register("u1", sid)
    transport.failing.add("sid-3")

    delivered = await channels.broadcast(
        personal_channel("u1"), "ping", {}, exclude="sid-1"
    )

    assert delivered == 1
    assert transport.emitted == [("ping", {}, "sid-2")]


@pytest.mark.anyio
async def test_leave_is_idempotent(registry, channels):
    registry.register("u1", "sid-1")
    channels.join("sid-1", chat_channel("t1"))

    channels.leave("sid-1", chat_channel("t1"))
    channels.leave("sid-1", chat_channel("t1"))

    assert not channels.is_member("sid-1", chat_channel("t1"))
