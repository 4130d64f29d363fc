"""
Message Model

Represents a chat message. A message is addressed either to a room
or directly to one recipient, never both.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Union
from uuid import UUID, uuid4

from .employee import EmployeeSummary, utcnow


@dataclass(frozen=True)
class RoomAddress:
    """Fans out to every member of a room"""
    room_id: UUID


@dataclass(frozen=True)
class DirectAddress:
    """Fans out to the sender and one recipient"""
    recipient_id: UUID


Address = Union[RoomAddress, DirectAddress]


@dataclass
class Message:
    """
    Message entity.

    address is fixed at creation. read_by only grows.
    seq is the storage insertion sequence, used to break timestamp ties.
    """
    address: Address
    sender_id: UUID
    content: str
    id: UUID = field(default_factory=uuid4)
    timestamp: datetime = field(default_factory=utcnow)
    read_by: List[UUID] = field(default_factory=list)
    seq: Optional[int] = None

    @property
    def room_id(self) -> Optional[UUID]:
        if isinstance(self.address, RoomAddress):
            return self.address.room_id
        return None

    @property
    def recipient_id(self) -> Optional[UUID]:
        if isinstance(self.address, DirectAddress):
            return self.address.recipient_id
        return None

    @property
    def is_direct(self) -> bool:
        return isinstance(self.address, DirectAddress)

    def sort_key(self) -> tuple:
        return (self.timestamp, self.seq if self.seq is not None else 0)

    def to_dict(
        self,
        sender: Optional[EmployeeSummary] = None,
        recipient: Optional[EmployeeSummary] = None,
    ) -> dict:
        """Convert to dictionary for API response"""
        recipient_id = self.recipient_id
        if recipient_id is None:
            recipient_out = None
        elif recipient is not None:
            recipient_out = recipient.to_dict()
        else:
            recipient_out = str(recipient_id)

        return {
            "id": str(self.id),
            "content": self.content,
            "sender": sender.to_dict() if sender else str(self.sender_id),
            "room": str(self.room_id) if self.room_id else None,
            "recipient": recipient_out,
            "timestamp": self.timestamp.isoformat(),
            "readBy": [str(u) for u in self.read_by],
        }
