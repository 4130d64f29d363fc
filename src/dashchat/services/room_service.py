"""
Room Service

Business logic for chat rooms and their membership.
"""
import logging
from typing import List, Optional, Sequence, Union
from uuid import UUID

from ..errors import AuthorizationError, NotFoundError, ValidationError
from ..models.room import Room, RoomKind
from ..models.employee import utcnow
from ..storage.room_storage import RoomStorage
from .directory_service import DirectoryService

logger = logging.getLogger("dashchat.services.room")


class RoomService:
    """Service for room operations"""

    def __init__(self, room_storage: RoomStorage, directory: DirectoryService):
        self.room_storage = room_storage
        self.directory = directory

    async def create_room(
        self,
        creator: UUID,
        name: str,
        kind: Union[RoomKind, str],
        members: Sequence[UUID],
        linked_project: Optional[UUID] = None,
    ) -> Room:
        """
        Create a room.

        Members are de-duplicated in order and the creator is added when
        missing. linked_project is kept only for PROJECT rooms.

        Raises:
            ValidationError: blank name, no members, unknown kind,
                or a project room without linked_project
        """
        fields = {}
        name = (name or "").strip()
        if not name:
            fields["name"] = "must not be empty"
        if not members:
            fields["members"] = "must contain at least one employee"
        try:
            kind = RoomKind(kind)
        except ValueError:
            fields["kind"] = f"must be one of {[k.value for k in RoomKind]}"
        else:
            if kind == RoomKind.PROJECT and linked_project is None:
                fields["linkedProject"] = "required for project rooms"
        if fields:
            raise ValidationError("Invalid room", fields)

        ordered: List[UUID] = []
        for member in members:
            if member not in ordered:
                ordered.append(member)
        if creator not in ordered:
            ordered.append(creator)

        room = Room(
            name=name,
            created_by=creator,
            members=ordered,
            kind=kind,
            linked_project=linked_project if kind == RoomKind.PROJECT else None,
            created_at=utcnow(),
        )
        created = await self.room_storage.create(room)
        logger.info(f"Room {created.id} ({created.kind.value}) created by {creator} with {len(ordered)} members")
        return created

    async def get_room(self, room_id: UUID) -> Room:
        """Get room by ID or raise NotFoundError"""
        room = await self.room_storage.get_by_id(room_id)
        if not room:
            raise NotFoundError("Room not found")
        return room

    async def is_member(self, room_id: UUID, user_id: UUID) -> bool:
        return await self.room_storage.is_member(room_id, user_id)

    async def ensure_member(self, room_id: UUID, user_id: UUID) -> None:
        """
        Raises:
            NotFoundError: room does not exist
            AuthorizationError: user is not a member of the room
        """
        if await self.is_member(room_id, user_id):
            return
        await self.get_room(room_id)
        raise AuthorizationError("Not a member of this room")

    async def list_rooms_for_user(self, user_id: UUID) -> List[dict]:
        """
        Rooms the user belongs to, members resolved to projections.

        Returns an empty list when the user is in no room.
        """
        rooms = await self.room_storage.list_by_member(user_id)
        if not rooms:
            return []
        people = await self.directory.summaries({m for room in rooms for m in room.members})
        return [room.to_dict(people) for room in rooms]
