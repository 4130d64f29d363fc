"""
In-memory storages with the same interface as the PostgreSQL storages,
plus a recording realtime connection.
"""
import copy
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from dashchat.errors import PersistenceError
from dashchat.models import Comment, Employee, Message, Reply, Room, utcnow
from dashchat.realtime.connection import BaseConnection


class _Lifecycle:
    async def init(self):
        pass

    async def close(self):
        pass

    async def ping(self) -> bool:
        return True


class InMemoryEmployeeStorage(_Lifecycle):
    def __init__(self, employees: Iterable[Employee] = ()):
        self.employees: Dict[UUID, Employee] = {e.id: e for e in employees}

    async def get_by_id(self, employee_id: UUID) -> Optional[Employee]:
        return self.employees.get(employee_id)

    async def get_many(self, employee_ids: Iterable[UUID]) -> List[Employee]:
        return [self.employees[i] for i in set(employee_ids) if i in self.employees]


class InMemoryRoomStorage(_Lifecycle):
    def __init__(self):
        self.rooms: Dict[UUID, Room] = {}

    async def create(self, room: Room) -> Room:
        self.rooms[room.id] = copy.deepcopy(room)
        return copy.deepcopy(room)

    async def get_by_id(self, room_id: UUID) -> Optional[Room]:
        room = self.rooms.get(room_id)
        return copy.deepcopy(room) if room else None

    async def list_by_member(self, user_id: UUID) -> List[Room]:
        rooms = [r for r in self.rooms.values() if user_id in r.members]
        rooms.sort(key=lambda r: r.created_at, reverse=True)
        return copy.deepcopy(rooms)

    async def is_member(self, room_id: UUID, user_id: UUID) -> bool:
        room = self.rooms.get(room_id)
        return bool(room and user_id in room.members)


class InMemoryMessageStorage(_Lifecycle):
    def __init__(self):
        self.messages: List[Message] = []
        self._seq = 0

    async def create(self, message: Message) -> Message:
        self._seq += 1
        stored = copy.deepcopy(message)
        stored.seq = self._seq
        self.messages.append(stored)
        return copy.deepcopy(stored)

    async def get_by_id(self, message_id: UUID) -> Optional[Message]:
        for message in self.messages:
            if message.id == message_id:
                return copy.deepcopy(message)
        return None

    async def list_by_room(self, room_id: UUID) -> List[Message]:
        found = [m for m in self.messages if m.room_id == room_id]
        return copy.deepcopy(sorted(found, key=Message.sort_key))

    async def list_direct(self, user_a: UUID, user_b: UUID) -> List[Message]:
        pair = {user_a, user_b}
        found = [
            m for m in self.messages
            if m.is_direct and {m.sender_id, m.recipient_id} == pair
        ]
        return copy.deepcopy(sorted(found, key=Message.sort_key))

    async def mark_read(self, message_id: UUID, user_id: UUID) -> Optional[Message]:
        for message in self.messages:
            if message.id == message_id:
                if user_id not in message.read_by:
                    message.read_by.append(user_id)
                return copy.deepcopy(message)
        return None


class FailingMessageStorage(InMemoryMessageStorage):
    """Message storage whose writes always fail"""

    async def create(self, message: Message) -> Message:
        raise PersistenceError()


class InMemoryCommentStorage(_Lifecycle):
    def __init__(self):
        self.comments: Dict[UUID, Comment] = {}

    async def create(self, comment: Comment) -> Comment:
        self.comments[comment.id] = copy.deepcopy(comment)
        return copy.deepcopy(comment)

    async def get_by_id(self, comment_id: UUID) -> Optional[Comment]:
        comment = self.comments.get(comment_id)
        return copy.deepcopy(comment) if comment else None

    async def list_by_blog(self, blog_id: UUID) -> List[Comment]:
        found = [c for c in self.comments.values() if c.blog_id == blog_id]
        found.sort(key=lambda c: c.created_at, reverse=True)
        return copy.deepcopy(found)

    async def update_content(self, comment_id: UUID, content: str) -> Optional[Comment]:
        comment = self.comments.get(comment_id)
        if not comment:
            return None
        comment.content = content
        comment.updated_at = utcnow()
        return copy.deepcopy(comment)

    async def add_reply(self, comment_id: UUID, reply: Reply) -> Optional[Comment]:
        comment = self.comments.get(comment_id)
        if not comment:
            return None
        comment.replies.append(copy.deepcopy(reply))
        return copy.deepcopy(comment)

    async def remove_reply(self, comment_id: UUID, reply_id: UUID) -> Optional[Comment]:
        comment = self.comments.get(comment_id)
        if not comment:
            return None
        comment.replies = [r for r in comment.replies if r.id != reply_id]
        return copy.deepcopy(comment)

    async def delete(self, comment_id: UUID) -> bool:
        return self.comments.pop(comment_id, None) is not None


class RecordingConnection(BaseConnection):
    """Connection that keeps every frame it was sent"""

    def __init__(self, actor, connection_id=None):
        super().__init__(actor, connection_id)
        self.frames: List[dict] = []

    async def _send(self, frame: dict):
        self.frames.append(frame)

    def events(self, name: str) -> List:
        return [f["data"] for f in self.frames if f["event"] == name]


class BrokenConnection(BaseConnection):
    """Connection whose transport always fails"""

    async def _send(self, frame: dict):
        raise ConnectionResetError("peer went away")
