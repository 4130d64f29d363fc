"""
Chat Room Model

Represents a chat room: a named, fixed set of employees.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional
from uuid import UUID, uuid4

from .employee import EmployeeSummary, utcnow


class RoomKind(str, Enum):
    """Kinds of chat rooms"""
    PRIVATE = "private"   # Small closed conversation
    PROJECT = "project"   # Room bound to a project (linked_project required)
    GROUP = "group"       # General group chat


@dataclass
class Room:
    """
    Room entity.

    Membership is fixed at creation; there are no join/leave operations.
    linked_project is set iff kind == PROJECT.
    """
    id: UUID = field(default_factory=uuid4)
    name: str = ""
    created_by: Optional[UUID] = None                 # Employee who created the room
    members: List[UUID] = field(default_factory=list)  # Employee IDs, insertion order
    kind: RoomKind = RoomKind.GROUP
    linked_project: Optional[UUID] = None             # Project ID for PROJECT rooms
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self, people: Optional[Dict[UUID, EmployeeSummary]] = None) -> dict:
        """
        Convert to dictionary for API response.

        When people is given, members are rendered as employee projections
        instead of bare ids.
        """
        if people is None:
            members = [str(m) for m in self.members]
        else:
            members = [
                people.get(m, EmployeeSummary(id=m)).to_dict()
                for m in self.members
            ]
        return {
            "id": str(self.id),
            "name": self.name,
            "createdBy": str(self.created_by) if self.created_by else None,
            "members": members,
            "kind": self.kind.value,
            "linkedProject": str(self.linked_project) if self.linked_project else None,
            "createdAt": self.created_at.isoformat(),
        }
