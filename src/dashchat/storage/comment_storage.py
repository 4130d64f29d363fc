"""
Comment Storage

PostgreSQL storage for blog comments. Replies are embedded as a JSONB array
in the comment row and are appended/removed atomically.
"""
import json
import logging
from typing import Optional, List
from uuid import UUID

from .base import BaseStorage
from ..models.comment import Comment, Reply
from ..models.employee import utcnow

logger = logging.getLogger("dashchat.storage.comment")


class CommentStorage(BaseStorage):
    """Storage for Comment entities"""

    async def create(self, comment: Comment) -> Comment:
        """Create a new comment"""
        query = """
            INSERT INTO comments (
                id, blog_id, author_id, content, replies, created_at, updated_at
            )
            VALUES ($1, $2, $3, $4, $5::jsonb, $6, $7)
            RETURNING *
        """
        replies_json = json.dumps([r.to_record() for r in comment.replies])
        row = await self.fetchrow(
            query,
            comment.id, comment.blog_id, comment.author_id, comment.content,
            replies_json, comment.created_at, comment.updated_at
        )
        return self._row_to_comment(row)

    async def get_by_id(self, comment_id: UUID) -> Optional[Comment]:
        """Get comment by ID"""
        query = "SELECT * FROM comments WHERE id = $1"
        row = await self.fetchrow(query, comment_id)
        return self._row_to_comment(row) if row else None

    async def list_by_blog(self, blog_id: UUID) -> List[Comment]:
        """List comments on a blog post, newest first"""
        query = """
            SELECT * FROM comments
            WHERE blog_id = $1
            ORDER BY created_at DESC
        """
        rows = await self.fetch(query, blog_id)
        return [self._row_to_comment(row) for row in rows]

    async def update_content(self, comment_id: UUID, content: str) -> Optional[Comment]:
        """Replace comment text"""
        query = """
            UPDATE comments SET content = $2, updated_at = $3
            WHERE id = $1
            RETURNING *
        """
        row = await self.fetchrow(query, comment_id, content, utcnow())
        return self._row_to_comment(row) if row else None

    async def add_reply(self, comment_id: UUID, reply: Reply) -> Optional[Comment]:
        """Append a reply to the end of the embedded list"""
        query = """
            UPDATE comments
            SET replies = replies || jsonb_build_array($2::jsonb), updated_at = $3
            WHERE id = $1
            RETURNING *
        """
        row = await self.fetchrow(query, comment_id, json.dumps(reply.to_record()), utcnow())
        return self._row_to_comment(row) if row else None

    async def remove_reply(self, comment_id: UUID, reply_id: UUID) -> Optional[Comment]:
        """Remove one reply, keeping the order of the others"""
        query = """
            UPDATE comments
            SET replies = (
                SELECT COALESCE(jsonb_agg(r ORDER BY ord), '[]'::jsonb)
                FROM jsonb_array_elements(replies) WITH ORDINALITY AS t(r, ord)
                WHERE r->>'id' <> $2
            ),
            updated_at = $3
            WHERE id = $1
            RETURNING *
        """
        row = await self.fetchrow(query, comment_id, str(reply_id), utcnow())
        return self._row_to_comment(row) if row else None

    async def delete(self, comment_id: UUID) -> bool:
        """Delete comment together with its replies"""
        query = "DELETE FROM comments WHERE id = $1"
        result = await self.execute(query, comment_id)
        return result == "DELETE 1"

    def _row_to_comment(self, row) -> Comment:
        """Convert database row to Comment"""
        replies_data = row["replies"]
        if isinstance(replies_data, str):
            replies_data = json.loads(replies_data)
        replies = [Reply.from_record(r) for r in (replies_data or [])]

        return Comment(
            id=row["id"],
            blog_id=row["blog_id"],
            author_id=row["author_id"],
            content=row["content"],
            replies=replies,
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
