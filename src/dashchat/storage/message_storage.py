"""
Message Storage

PostgreSQL storage for messages.
History is ordered by (sent_at, seq); seq is a BIGSERIAL insertion counter.
"""
import logging
from typing import Optional, List
from uuid import UUID

from .base import BaseStorage
from ..models.message import Message, RoomAddress, DirectAddress

logger = logging.getLogger("dashchat.storage.message")


class MessageStorage(BaseStorage):
    """Storage for Message entities"""

    async def create(self, message: Message) -> Message:
        """Create a new message"""
        query = """
            INSERT INTO messages (
                id, content, sender_id, room_id, recipient_id, sent_at, read_by
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7::uuid[])
            RETURNING *
        """
        row = await self.fetchrow(
            query,
            message.id, message.content, message.sender_id,
            message.room_id, message.recipient_id, message.timestamp,
            list(message.read_by)
        )
        return self._row_to_message(row)

    async def get_by_id(self, message_id: UUID) -> Optional[Message]:
        """Get message by ID"""
        query = "SELECT * FROM messages WHERE id = $1"
        row = await self.fetchrow(query, message_id)
        return self._row_to_message(row) if row else None

    async def list_by_room(self, room_id: UUID) -> List[Message]:
        """List room messages in persisted order"""
        query = """
            SELECT * FROM messages
            WHERE room_id = $1
            ORDER BY sent_at ASC, seq ASC
        """
        rows = await self.fetch(query, room_id)
        return [self._row_to_message(row) for row in rows]

    async def list_direct(self, user_a: UUID, user_b: UUID) -> List[Message]:
        """List direct messages between two users, both directions"""
        query = """
            SELECT * FROM messages
            WHERE room_id IS NULL
              AND ((sender_id = $1 AND recipient_id = $2)
                OR (sender_id = $2 AND recipient_id = $1))
            ORDER BY sent_at ASC, seq ASC
        """
        rows = await self.fetch(query, user_a, user_b)
        return [self._row_to_message(row) for row in rows]

    async def mark_read(self, message_id: UUID, user_id: UUID) -> Optional[Message]:
        """Add user to read_by with set semantics; None if the message is missing"""
        query = """
            UPDATE messages
            SET read_by = CASE
                WHEN $2 = ANY(read_by) THEN read_by
                ELSE array_append(read_by, $2)
            END
            WHERE id = $1
            RETURNING *
        """
        row = await self.fetchrow(query, message_id, user_id)
        return self._row_to_message(row) if row else None

    def _row_to_message(self, row) -> Message:
        """Convert database row to Message"""
        if row["room_id"] is not None:
            address = RoomAddress(room_id=row["room_id"])
        else:
            address = DirectAddress(recipient_id=row["recipient_id"])

        return Message(
            id=row["id"],
            address=address,
            sender_id=row["sender_id"],
            content=row["content"],
            timestamp=row["sent_at"],
            read_by=list(row["read_by"] or []),
            seq=row["seq"],
        )
