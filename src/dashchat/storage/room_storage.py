"""
Room Storage

PostgreSQL storage for chat rooms.
"""
import logging
from typing import Optional, List
from uuid import UUID

from .base import BaseStorage
from ..models.room import Room, RoomKind

logger = logging.getLogger("dashchat.storage.room")


class RoomStorage(BaseStorage):
    """Storage for Room entities"""

    async def create(self, room: Room) -> Room:
        """Create a new room"""
        query = """
            INSERT INTO chat_rooms (
                id, name, created_by, members, kind, linked_project, created_at
            )
            VALUES ($1, $2, $3, $4::uuid[], $5, $6, $7)
            RETURNING *
        """
        row = await self.fetchrow(
            query,
            room.id, room.name, room.created_by, list(room.members),
            room.kind.value, room.linked_project, room.created_at
        )
        return self._row_to_room(row)

    async def get_by_id(self, room_id: UUID) -> Optional[Room]:
        """Get room by ID"""
        query = "SELECT * FROM chat_rooms WHERE id = $1"
        row = await self.fetchrow(query, room_id)
        return self._row_to_room(row) if row else None

    async def list_by_member(self, user_id: UUID) -> List[Room]:
        """List rooms that contain the user, newest first"""
        query = """
            SELECT * FROM chat_rooms
            WHERE $1 = ANY(members)
            ORDER BY created_at DESC
        """
        rows = await self.fetch(query, user_id)
        return [self._row_to_room(row) for row in rows]

    async def is_member(self, room_id: UUID, user_id: UUID) -> bool:
        """Check room membership without loading the room"""
        query = "SELECT EXISTS(SELECT 1 FROM chat_rooms WHERE id = $1 AND $2 = ANY(members))"
        return bool(await self.fetchval(query, room_id, user_id))

    def _row_to_room(self, row) -> Room:
        """Convert database row to Room"""
        return Room(
            id=row["id"],
            name=row["name"],
            created_by=row["created_by"],
            members=list(row["members"] or []),
            kind=RoomKind(row["kind"]),
            linked_project=row["linked_project"],
            created_at=row["created_at"],
        )
