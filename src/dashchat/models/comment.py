"""
Comment Model

Blog comments with an embedded, ordered list of replies.
Replies point at their parent reply inside the same comment.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID, uuid4

from .employee import EmployeeSummary, utcnow


@dataclass
class Reply:
    """
    Reply embedded in a comment.

    parent_reply_id is None for a reply to the comment itself.
    """
    author_id: UUID
    content: str
    id: UUID = field(default_factory=uuid4)
    parent_reply_id: Optional[UUID] = None
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self, people: Optional[Dict[UUID, EmployeeSummary]] = None) -> dict:
        """Convert to dictionary for API response"""
        if people is None:
            author = str(self.author_id)
        else:
            author = people.get(self.author_id, EmployeeSummary(id=self.author_id)).to_dict()
        return {
            "id": str(self.id),
            "author": author,
            "content": self.content,
            "parentReplyId": str(self.parent_reply_id) if self.parent_reply_id else None,
            "createdAt": self.created_at.isoformat(),
        }

    def to_record(self) -> dict:
        """Serialize for the embedded JSONB column"""
        return {
            "id": str(self.id),
            "author_id": str(self.author_id),
            "content": self.content,
            "parent_reply_id": str(self.parent_reply_id) if self.parent_reply_id else None,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_record(cls, data: dict) -> "Reply":
        """Create from an embedded JSONB record"""
        parent = data.get("parent_reply_id")
        return cls(
            id=UUID(data["id"]),
            author_id=UUID(data["author_id"]),
            content=data["content"],
            parent_reply_id=UUID(parent) if parent else None,
            created_at=datetime.fromisoformat(data["created_at"]),
        )


@dataclass
class ReplyNode:
    """A reply plus its nested children"""
    reply: Reply
    children: List["ReplyNode"] = field(default_factory=list)

    def to_dict(self, people: Optional[Dict[UUID, EmployeeSummary]] = None) -> dict:
        result = self.reply.to_dict(people)
        result["children"] = [child.to_dict(people) for child in self.children]
        return result


@dataclass
class Comment:
    """Comment entity - a top-level comment on a blog post"""
    blog_id: UUID
    author_id: UUID
    content: str
    id: UUID = field(default_factory=uuid4)
    replies: List[Reply] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def find_reply(self, reply_id: UUID) -> Optional[Reply]:
        for reply in self.replies:
            if reply.id == reply_id:
                return reply
        return None

    def participant_ids(self) -> List[UUID]:
        """Author ids of the comment and all replies, without duplicates"""
        ids = [self.author_id]
        for reply in self.replies:
            if reply.author_id not in ids:
                ids.append(reply.author_id)
        return ids

    def to_dict(
        self,
        tree: Optional[List[ReplyNode]] = None,
        people: Optional[Dict[UUID, EmployeeSummary]] = None,
    ) -> dict:
        """
        Convert to dictionary for API response.

        With tree, replies are rendered nested; otherwise as the flat list.
        """
        if people is None:
            author = str(self.author_id)
        else:
            author = people.get(self.author_id, EmployeeSummary(id=self.author_id)).to_dict()
        if tree is not None:
            replies = [node.to_dict(people) for node in tree]
        else:
            replies = [r.to_dict(people) for r in self.replies]
        return {
            "id": str(self.id),
            "blogId": str(self.blog_id),
            "author": author,
            "content": self.content,
            "replies": replies,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
