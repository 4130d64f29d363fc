"""
Delivery Gateway

Handles realtime chat events: channel joins, message sends with fan-out,
and disconnects. Persistence always happens before fan-out; fan-out is a
single best-effort attempt.
"""
import asyncio
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from ..errors import AuthorizationError, ChatError, PersistenceError, ValidationError
from ..models.message import Message
from .connection import BaseConnection
from .events import (
    CHANNEL_JOINED,
    JOIN_ROOM_CHANNEL,
    JOIN_USER_CHANNEL,
    MESSAGE_DELIVERED,
    SEND_ERROR,
    SEND_MESSAGE,
    ClientFrame,
    SendMessagePayload,
    decode,
    decode_id,
    error_payload,
)
from .registry import ChannelRegistry, room_channel, user_channel

if TYPE_CHECKING:
    from ..services.message_service import MessageService
    from ..services.room_service import RoomService

logger = logging.getLogger("dashchat.realtime.gateway")


class DeliveryGateway:
    """
    Realtime delivery channel.

    Connections join their own inbox channel and the rooms they belong to.
    Errors are reported to the originating connection only.
    """

    def __init__(
        self,
        registry: ChannelRegistry,
        message_service: "MessageService",
        room_service: "RoomService",
    ):
        self.registry = registry
        self.message_service = message_service
        self.room_service = room_service
        self._handlers = {
            JOIN_USER_CHANNEL: self.join_user_channel,
            JOIN_ROOM_CHANNEL: self.join_room_channel,
            SEND_MESSAGE: self.send,
        }

    async def handle(self, connection: BaseConnection, frame: Any) -> None:
        """Dispatch one decoded client frame"""
        try:
            envelope = decode(ClientFrame, frame)
        except ValidationError as e:
            await self._reject(connection, e)
            return

        handler = self._handlers.get(envelope.event)
        if handler is None:
            await self._reject(connection, ValidationError.for_field("event", f"unknown event '{envelope.event}'"))
            return
        await handler(connection, envelope.data)

    async def join(self, connection: BaseConnection, channel: str) -> None:
        """Join a channel (idempotent) and acknowledge to the connection"""
        if await self.registry.join(connection, channel):
            logger.info(f"Connection {connection.id} ({connection.actor.user_id}) joined {channel}")
        await connection.emit(CHANNEL_JOINED, {"channel": channel})

    async def join_user_channel(self, connection: BaseConnection, data: Any) -> None:
        """Join the caller's own inbox channel"""
        try:
            user_id = decode_id(data, "userId")
            if user_id != connection.actor.user_id:
                raise AuthorizationError("Cannot join another employee's channel")
        except ChatError as e:
            await self._reject(connection, e)
            return
        await self.join(connection, user_channel(user_id))

    async def join_room_channel(self, connection: BaseConnection, data: Any) -> None:
        """Join a room channel; only members of an existing room may join"""
        try:
            room_id = decode_id(data, "roomId")
            await self.room_service.ensure_member(room_id, connection.actor.user_id)
        except ChatError as e:
            await self._reject(connection, e)
            return
        await self.join(connection, room_channel(room_id))

    async def send(self, connection: BaseConnection, data: Any) -> Optional[Message]:
        """
        Persist a message and fan it out.

        Returns:
            The stored message, or None when it was rejected
        """
        try:
            payload = decode(SendMessagePayload, data)
            if payload.sender != connection.actor.user_id:
                raise AuthorizationError("Sender does not match the authenticated employee")
            message = await self.message_service.send_message(
                sender_id=payload.sender,
                content=payload.content,
                room_id=payload.room,
                recipient_id=payload.recipient,
                timestamp=payload.timestamp,
            )
        except ChatError as e:
            await self._reject(connection, e)
            return None

        try:
            enriched = await self.message_service.enrich(message)
        except PersistenceError:
            logger.warning(f"Could not resolve employees for message {message.id}; delivering ids only")
            enriched = message.to_dict()

        targets = await self._targets(connection, message)
        delivered = await self._fan_out(targets, enriched)
        logger.info(f"Message {message.id} delivered to {delivered}/{len(targets)} connection(s)")
        return message

    async def disconnect(self, connection: BaseConnection) -> None:
        """Drop the connection from every channel"""
        connection.mark_closed()
        channels = await self.registry.disconnect(connection)
        logger.info(f"Connection {connection.id} ({connection.actor.user_id}) disconnected from {len(channels)} channel(s)")

    async def _targets(self, origin: BaseConnection, message: Message) -> List[BaseConnection]:
        """Connections that should see the message, each at most once"""
        if message.is_direct:
            candidates = await self.registry.members(user_channel(message.recipient_id))
            candidates.append(origin)
        else:
            candidates = await self.registry.members(room_channel(message.room_id))

        unique: Dict[str, BaseConnection] = {}
        for connection in candidates:
            unique.setdefault(connection.id, connection)
        return list(unique.values())

    async def _fan_out(self, targets: List[BaseConnection], data: dict) -> int:
        results = await asyncio.gather(*(t.emit(MESSAGE_DELIVERED, data) for t in targets))
        return sum(1 for ok in results if ok)

    async def _reject(self, connection: BaseConnection, error: ChatError) -> None:
        if isinstance(error, PersistenceError):
            logger.error(f"Realtime request from {connection.id} failed in storage")
        else:
            logger.warning(f"Rejected realtime request from {connection.id}: {error.message}")
        fields = error.fields if isinstance(error, ValidationError) else None
        await connection.emit(SEND_ERROR, error_payload(error.message, error.kind, fields))
