from uuid import uuid4

import pytest

from dashchat.realtime.events import CHANNEL_JOINED, MESSAGE_DELIVERED, SEND_ERROR
from dashchat.realtime.registry import room_channel, user_channel

from tests.fakes import BrokenConnection, FailingMessageStorage, RecordingConnection
from tests.helpers import actor_for


@pytest.fixture()
def gateway(engine):
    return engine.delivery_gateway


@pytest.fixture()
async def room(engine, alice, bob):
    return await engine.room_service.create_room(
        creator=alice.id, name="Eng", kind="group", members=[alice.id, bob.id]
    )


async def _joined(gateway, employee, room=None):
    conn = RecordingConnection(actor_for(employee))
    await gateway.handle(conn, {"event": "joinUserChannel", "data": str(employee.id)})
    if room is not None:
        await gateway.handle(conn, {"event": "joinRoomChannel", "data": str(room.id)})
    return conn


async def test_join_own_channel_is_acknowledged(gateway, alice):
    conn = await _joined(gateway, alice)

    assert conn.events(CHANNEL_JOINED) == [{"channel": user_channel(alice.id)}]
    assert await gateway.registry.members(user_channel(alice.id)) == [conn]


async def test_cannot_join_someone_elses_channel(gateway, alice, bob):
    conn = RecordingConnection(actor_for(alice))

    await gateway.handle(conn, {"event": "joinUserChannel", "data": str(bob.id)})

    assert conn.events(SEND_ERROR)[0]["type"] == "AuthorizationError"
    assert await gateway.registry.members(user_channel(bob.id)) == []


async def test_room_channel_requires_membership(gateway, room, carol):
    conn = RecordingConnection(actor_for(carol))

    await gateway.handle(conn, {"event": "joinRoomChannel", "data": str(room.id)})
    await gateway.handle(conn, {"event": "joinRoomChannel", "data": str(uuid4())})

    assert [e["type"] for e in conn.events(SEND_ERROR)] == ["AuthorizationError", "NotFound"]
    assert conn.events(CHANNEL_JOINED) == []


async def test_room_message_fans_out_to_room_members(gateway, room, alice, bob, carol):
    sender = await _joined(gateway, alice, room)
    member = await _joined(gateway, bob, room)
    outsider = await _joined(gateway, carol)

    message = await gateway.send(
        sender, {"content": "hello", "sender": str(alice.id), "room": str(room.id)}
    )

    assert message is not None
    for conn in (sender, member):
        delivered = conn.events(MESSAGE_DELIVERED)
        assert len(delivered) == 1
        assert delivered[0]["id"] == str(message.id)
        assert delivered[0]["sender"]["name"] == "Alice"
        assert delivered[0]["readBy"] == []
    assert outsider.events(MESSAGE_DELIVERED) == []


async def test_direct_message_reaches_recipient_and_origin_once(gateway, alice, bob, carol):
    origin = await _joined(gateway, alice)
    # second session of the sender is not the origin and is not addressed
    other_session = await _joined(gateway, alice)
    recipient = await _joined(gateway, bob)
    bystander = await _joined(gateway, carol)

    await gateway.handle(origin, {
        "event": "sendMessage",
        "data": {"content": "psst", "sender": str(alice.id), "recipient": str(bob.id)},
    })

    assert len(origin.events(MESSAGE_DELIVERED)) == 1
    assert len(recipient.events(MESSAGE_DELIVERED)) == 1
    assert recipient.events(MESSAGE_DELIVERED)[0]["recipient"]["name"] == "Bob"
    assert other_session.events(MESSAGE_DELIVERED) == []
    assert bystander.events(MESSAGE_DELIVERED) == []


async def test_direct_message_to_self_delivered_once(gateway, alice):
    conn = await _joined(gateway, alice)

    await gateway.send(conn, {"content": "note to self", "sender": str(alice.id), "recipient": str(alice.id)})

    assert len(conn.events(MESSAGE_DELIVERED)) == 1


async def test_invalid_message_reported_only_to_origin(gateway, engine, room, alice, bob):
    sender = await _joined(gateway, alice, room)
    member = await _joined(gateway, bob, room)

    result = await gateway.send(sender, {"content": "", "sender": str(alice.id)})

    assert result is None
    errors = sender.events(SEND_ERROR)
    assert len(errors) == 1
    assert errors[0]["type"] == "ValidationError"
    assert "content" in errors[0]["fields"]
    assert member.events(SEND_ERROR) == []
    assert member.events(MESSAGE_DELIVERED) == []
    assert engine.message_storage.messages == []


async def test_malformed_payload_is_rejected(gateway, alice):
    conn = RecordingConnection(actor_for(alice))

    await gateway.handle(conn, {"event": "sendMessage", "data": "not an object"})
    await gateway.handle(conn, {"event": "sendMessage", "data": {"content": "x", "sender": "nope", "room": str(uuid4())}})
    await gateway.handle(conn, {"event": "shout", "data": None})
    await gateway.handle(conn, ["not", "a", "frame"])

    errors = conn.events(SEND_ERROR)
    assert len(errors) == 4
    assert all(e["type"] == "ValidationError" for e in errors)
    assert "sender" in errors[1]["fields"]
    assert "event" in errors[2]["fields"]


async def test_sender_must_be_the_connected_employee(gateway, engine, alice, bob):
    conn = RecordingConnection(actor_for(alice))

    await gateway.send(conn, {"content": "spoof", "sender": str(bob.id), "recipient": str(alice.id)})

    assert conn.events(SEND_ERROR)[0]["type"] == "AuthorizationError"
    assert engine.message_storage.messages == []


async def test_non_member_cannot_post_to_room(gateway, room, carol):
    conn = RecordingConnection(actor_for(carol))

    await gateway.send(conn, {"content": "let me in", "sender": str(carol.id), "room": str(room.id)})

    assert conn.events(SEND_ERROR)[0]["type"] == "AuthorizationError"


async def test_persistence_failure_is_reported_without_fan_out(gateway, engine, room, alice, bob):
    engine.message_service.message_storage = FailingMessageStorage()
    sender = await _joined(gateway, alice, room)
    member = await _joined(gateway, bob, room)

    result = await gateway.send(sender, {"content": "hi", "sender": str(alice.id), "room": str(room.id)})

    assert result is None
    error = sender.events(SEND_ERROR)[0]
    assert error["type"] == "PersistenceError"
    assert error["reason"] == "Storage operation failed"
    assert member.events(MESSAGE_DELIVERED) == []


async def test_broken_connection_does_not_stop_delivery(gateway, room, alice, bob):
    sender = await _joined(gateway, alice, room)
    broken = BrokenConnection(actor_for(bob))
    await gateway.registry.join(broken, room_channel(room.id))
    healthy = await _joined(gateway, bob, room)

    message = await gateway.send(sender, {"content": "still here", "sender": str(alice.id), "room": str(room.id)})

    assert message is not None
    assert len(healthy.events(MESSAGE_DELIVERED)) == 1
    assert len(sender.events(MESSAGE_DELIVERED)) == 1


async def test_disconnect_stops_delivery(gateway, room, alice, bob):
    sender = await _joined(gateway, alice, room)
    member = await _joined(gateway, bob, room)

    await gateway.disconnect(member)
    await gateway.send(sender, {"content": "anyone?", "sender": str(alice.id), "room": str(room.id)})

    assert member.closed
    assert member.events(MESSAGE_DELIVERED) == []
    assert member not in await gateway.registry.members(room_channel(room.id))
    assert len(sender.events(MESSAGE_DELIVERED)) == 1
