"""
Message Service

Business logic for sending, listing and read-marking messages.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from ..config import Config
from ..errors import AuthorizationError, NotFoundError, ValidationError
from ..models.message import Address, DirectAddress, Message, RoomAddress
from ..models.employee import utcnow
from ..storage.message_storage import MessageStorage
from .directory_service import DirectoryService
from .room_service import RoomService

logger = logging.getLogger("dashchat.services.message")


def build_address(room_id: Optional[UUID], recipient_id: Optional[UUID]) -> Address:
    """
    Turn the optional room/recipient pair into a tagged address.

    Raises:
        ValidationError: neither or both given
    """
    if room_id is not None and recipient_id is not None:
        raise ValidationError(
            "Provide either room or recipient, not both",
            {"room": "conflicts with recipient", "recipient": "conflicts with room"},
        )
    if room_id is not None:
        return RoomAddress(room_id=room_id)
    if recipient_id is not None:
        return DirectAddress(recipient_id=recipient_id)
    raise ValidationError(
        "Either room or recipient must be provided",
        {"room": "room or recipient is required", "recipient": "room or recipient is required"},
    )


class MessageService:
    """Service for message operations"""

    def __init__(
        self,
        message_storage: MessageStorage,
        room_service: RoomService,
        directory: DirectoryService,
        max_length: int = Config.MAX_MESSAGE_LENGTH,
    ):
        self.message_storage = message_storage
        self.room_service = room_service
        self.directory = directory
        self.max_length = max_length

    async def send_message(
        self,
        sender_id: Optional[UUID],
        content: Optional[str],
        room_id: Optional[UUID] = None,
        recipient_id: Optional[UUID] = None,
        timestamp: Optional[datetime] = None,
    ) -> Message:
        """
        Validate and persist a message.

        All input checks run before the store is touched.

        Raises:
            ValidationError: blank/oversized content, missing sender,
                or not exactly one of room/recipient
            NotFoundError: room does not exist
            AuthorizationError: sender is not a member of the room
        """
        fields = {}
        if not content or not content.strip():
            fields["content"] = "must not be empty"
        elif len(content) > self.max_length:
            fields["content"] = f"must be at most {self.max_length} characters"
        if sender_id is None:
            fields["sender"] = "is required"
        try:
            address = build_address(room_id, recipient_id)
        except ValidationError as e:
            fields.update(e.fields)
            address = None
        if fields:
            raise ValidationError("Invalid message", fields)

        if isinstance(address, RoomAddress):
            await self.room_service.ensure_member(address.room_id, sender_id)

        if timestamp is None:
            timestamp = utcnow()
        elif timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)

        message = Message(
            address=address,
            sender_id=sender_id,
            content=content,
            timestamp=timestamp,
            read_by=[],
        )
        created = await self.message_storage.create(message)
        logger.info(f"Message {created.id} from {sender_id} stored ({'direct' if created.is_direct else 'room'})")
        return created

    async def get_message(self, message_id: UUID) -> Message:
        """Get message by ID or raise NotFoundError"""
        message = await self.message_storage.get_by_id(message_id)
        if not message:
            raise NotFoundError("Message not found")
        return message

    async def list_room_history(self, room_id: UUID, viewer_id: UUID) -> List[dict]:
        """
        Room messages in persisted order, with sender projections.

        Raises:
            NotFoundError: room does not exist
            AuthorizationError: viewer is not a member of the room
        """
        await self.room_service.ensure_member(room_id, viewer_id)
        messages = await self.message_storage.list_by_room(room_id)
        return await self.enrich_many(messages)

    async def list_direct_history(self, user_a: UUID, user_b: UUID, viewer_id: UUID) -> List[dict]:
        """
        Direct messages between two users in persisted order.

        Raises:
            AuthorizationError: viewer is neither of the two users
        """
        if viewer_id not in (user_a, user_b):
            raise AuthorizationError("Not a participant of this conversation")
        messages = await self.message_storage.list_direct(user_a, user_b)
        return await self.enrich_many(messages)

    async def mark_read(self, message_id: UUID, user_id: UUID) -> Message:
        """
        Record that user_id has read the message. Re-marking is a no-op.

        Only room members (room messages) or the sender and recipient
        (direct messages) may mark a message read.

        Raises:
            NotFoundError: message does not exist
            AuthorizationError: user_id cannot see the message
        """
        await self.ensure_can_read(await self.get_message(message_id), user_id)
        message = await self.message_storage.mark_read(message_id, user_id)
        if not message:
            raise NotFoundError("Message not found")
        logger.debug(f"Message {message_id} read by {user_id}")
        return message

    async def ensure_can_read(self, message: Message, user_id: UUID) -> None:
        if message.is_direct:
            if user_id not in (message.sender_id, message.recipient_id):
                raise AuthorizationError("Not a participant of this conversation")
        else:
            await self.room_service.ensure_member(message.room_id, user_id)

    async def enrich(self, message: Message) -> dict:
        """Render one message with sender/recipient projections"""
        enriched = await self.enrich_many([message])
        return enriched[0]

    async def enrich_many(self, messages: List[Message]) -> List[dict]:
        if not messages:
            return []
        ids = set()
        for message in messages:
            ids.add(message.sender_id)
            if message.recipient_id:
                ids.add(message.recipient_id)
        people = await self.directory.summaries(ids)
        return [
            message.to_dict(
                sender=people.get(message.sender_id),
                recipient=people.get(message.recipient_id) if message.recipient_id else None,
            )
            for message in messages
        ]
