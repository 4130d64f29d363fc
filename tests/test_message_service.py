from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from dashchat.errors import AuthorizationError, NotFoundError, ValidationError
from dashchat.models import DirectAddress, RoomAddress
from dashchat.services.message_service import build_address


@pytest.fixture()
async def room(engine, alice, bob):
    return await engine.room_service.create_room(
        creator=alice.id, name="Eng", kind="group", members=[alice.id, bob.id]
    )


def test_build_address_is_a_tagged_union():
    room_id, user_id = uuid4(), uuid4()

    assert build_address(room_id, None) == RoomAddress(room_id=room_id)
    assert build_address(None, user_id) == DirectAddress(recipient_id=user_id)
    with pytest.raises(ValidationError):
        build_address(None, None)
    with pytest.raises(ValidationError):
        build_address(room_id, user_id)


async def test_room_message_starts_unread(engine, room, alice):
    message = await engine.message_service.send_message(alice.id, "hi", room_id=room.id)

    assert message.room_id == room.id
    assert message.recipient_id is None
    assert message.read_by == []
    assert message.timestamp.tzinfo is not None


async def test_send_validates_before_storing(engine, alice):
    with pytest.raises(ValidationError) as exc:
        await engine.message_service.send_message(None, "   ")

    assert {"content", "sender", "room", "recipient"} <= set(exc.value.fields)
    assert engine.message_storage.messages == []


async def test_send_rejects_both_addresses(engine, room, alice, bob):
    with pytest.raises(ValidationError):
        await engine.message_service.send_message(alice.id, "hi", room_id=room.id, recipient_id=bob.id)


async def test_send_rejects_oversized_content(engine, alice, bob):
    engine.message_service.max_length = 5
    with pytest.raises(ValidationError) as exc:
        await engine.message_service.send_message(alice.id, "too long", recipient_id=bob.id)

    assert "content" in exc.value.fields


async def test_room_send_requires_existing_room_and_membership(engine, room, carol):
    with pytest.raises(NotFoundError):
        await engine.message_service.send_message(carol.id, "hi", room_id=uuid4())
    with pytest.raises(AuthorizationError):
        await engine.message_service.send_message(carol.id, "hi", room_id=room.id)


async def test_client_timestamp_kept_and_naive_treated_as_utc(engine, alice, bob):
    naive = datetime(2024, 5, 1, 12, 0, 0)
    message = await engine.message_service.send_message(alice.id, "hi", recipient_id=bob.id, timestamp=naive)

    assert message.timestamp == naive.replace(tzinfo=timezone.utc)


async def test_mark_read_is_idempotent(engine, room, alice, bob):
    message = await engine.message_service.send_message(alice.id, "hi", room_id=room.id)

    once = await engine.message_service.mark_read(message.id, bob.id)
    twice = await engine.message_service.mark_read(message.id, bob.id)

    assert once.read_by == [bob.id]
    assert twice.read_by == [bob.id]


async def test_mark_read_missing_message(engine, bob):
    with pytest.raises(NotFoundError):
        await engine.message_service.mark_read(uuid4(), bob.id)


async def test_room_history_orders_by_timestamp_then_insertion(engine, room, alice, bob):
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    await engine.message_service.send_message(alice.id, "third", room_id=room.id, timestamp=base + timedelta(minutes=1))
    await engine.message_service.send_message(bob.id, "first", room_id=room.id, timestamp=base)
    await engine.message_service.send_message(alice.id, "second", room_id=room.id, timestamp=base)

    history = await engine.message_service.list_room_history(room.id, bob.id)

    assert [m["content"] for m in history] == ["first", "second", "third"]
    assert history[0]["sender"] == {"id": str(bob.id), "name": "Bob", "email": "bob@example.com"}
    assert await engine.message_service.list_room_history(room.id, bob.id) == history


async def test_direct_history_both_directions_any_argument_order(engine, alice, bob, carol):
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    await engine.message_service.send_message(alice.id, "ping", recipient_id=bob.id, timestamp=base)
    await engine.message_service.send_message(bob.id, "pong", recipient_id=alice.id, timestamp=base + timedelta(seconds=1))
    await engine.message_service.send_message(alice.id, "other", recipient_id=carol.id, timestamp=base)

    forward = await engine.message_service.list_direct_history(alice.id, bob.id, alice.id)
    backward = await engine.message_service.list_direct_history(bob.id, alice.id, alice.id)

    assert [m["content"] for m in forward] == ["ping", "pong"]
    assert forward == backward
    assert forward[0]["recipient"]["name"] == "Bob"
    assert forward[0]["room"] is None


async def test_direct_history_excludes_room_messages(engine, room, alice, bob):
    await engine.message_service.send_message(alice.id, "in room", room_id=room.id)

    assert await engine.message_service.list_direct_history(alice.id, bob.id, alice.id) == []


async def test_room_history_is_for_members_only(engine, room, alice, carol):
    await engine.message_service.send_message(alice.id, "secret", room_id=room.id)

    with pytest.raises(AuthorizationError):
        await engine.message_service.list_room_history(room.id, carol.id)
    with pytest.raises(NotFoundError):
        await engine.message_service.list_room_history(uuid4(), carol.id)


async def test_direct_history_is_for_participants_only(engine, alice, bob, carol):
    await engine.message_service.send_message(alice.id, "dm", recipient_id=bob.id)

    with pytest.raises(AuthorizationError):
        await engine.message_service.list_direct_history(alice.id, bob.id, carol.id)


async def test_mark_read_requires_access_to_the_message(engine, room, alice, bob, carol):
    in_room = await engine.message_service.send_message(alice.id, "hi", room_id=room.id)
    direct = await engine.message_service.send_message(alice.id, "dm", recipient_id=bob.id)

    with pytest.raises(AuthorizationError):
        await engine.message_service.mark_read(in_room.id, carol.id)
    with pytest.raises(AuthorizationError):
        await engine.message_service.mark_read(direct.id, carol.id)

    assert (await engine.message_service.mark_read(direct.id, bob.id)).read_by == [bob.id]
    assert (await engine.message_service.get_message(in_room.id)).read_by == []
