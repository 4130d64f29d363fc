"""
Comment Service

Business logic for blog comments and their reply threads.
"""
import logging
from typing import List, Optional
from uuid import UUID

from ..errors import NotFoundError, ValidationError
from ..models.comment import Comment, Reply
from ..models.employee import Actor, utcnow
from ..storage.comment_storage import CommentStorage
from .directory_service import DirectoryService
from .policy import ensure_can_modify
from .thread_builder import build_reply_tree

logger = logging.getLogger("dashchat.services.comment")


def _require_content(content: Optional[str]) -> str:
    if not isinstance(content, str) or not content.strip():
        raise ValidationError.for_field("content", "must be a non-empty string")
    return content


class CommentService:
    """Service for comment and reply operations"""

    def __init__(self, comment_storage: CommentStorage, directory: DirectoryService):
        self.comment_storage = comment_storage
        self.directory = directory

    async def add_comment(self, author_id: UUID, blog_id: UUID, content: str) -> Comment:
        """Add a top-level comment to a blog post"""
        content = _require_content(content)
        now = utcnow()
        comment = Comment(
            blog_id=blog_id,
            author_id=author_id,
            content=content,
            created_at=now,
            updated_at=now,
        )
        created = await self.comment_storage.create(comment)
        logger.info(f"Comment {created.id} added to blog {blog_id} by {author_id}")
        return created

    async def get_comment(self, comment_id: UUID) -> Comment:
        """Get comment by ID or raise NotFoundError"""
        comment = await self.comment_storage.get_by_id(comment_id)
        if not comment:
            raise NotFoundError("Comment not found")
        return comment

    async def list_comments(self, blog_id: UUID) -> List[dict]:
        """Comments on a blog post, newest first, replies nested"""
        comments = await self.comment_storage.list_by_blog(blog_id)
        if not comments:
            return []
        people = await self.directory.summaries(
            {pid for comment in comments for pid in comment.participant_ids()}
        )
        return [
            comment.to_dict(tree=build_reply_tree(comment.replies), people=people)
            for comment in comments
        ]

    async def add_reply(
        self,
        author_id: UUID,
        comment_id: UUID,
        content: str,
        parent_reply_id: Optional[UUID] = None,
    ) -> Reply:
        """
        Append a reply to a comment.

        Raises:
            ValidationError: blank content, or parent_reply_id not in this comment
            NotFoundError: comment does not exist
        """
        content = _require_content(content)
        comment = await self.get_comment(comment_id)
        if parent_reply_id is not None and comment.find_reply(parent_reply_id) is None:
            raise ValidationError.for_field("parentReplyId", "must reference a reply in the same comment")

        reply = Reply(
            author_id=author_id,
            content=content,
            parent_reply_id=parent_reply_id,
            created_at=utcnow(),
        )
        updated = await self.comment_storage.add_reply(comment_id, reply)
        if not updated:
            raise NotFoundError("Comment not found")
        logger.info(f"Reply {reply.id} added to comment {comment_id} by {author_id}")
        return reply

    async def update_comment(self, actor: Actor, comment_id: UUID, content: str) -> Comment:
        """Edit comment text (author or admin)"""
        content = _require_content(content)
        comment = await self.get_comment(comment_id)
        ensure_can_modify(actor, comment.author_id, "comment")
        updated = await self.comment_storage.update_content(comment_id, content)
        if not updated:
            raise NotFoundError("Comment not found")
        return updated

    async def delete_comment(self, actor: Actor, comment_id: UUID) -> None:
        """Delete a comment and all its replies (author or admin)"""
        comment = await self.get_comment(comment_id)
        ensure_can_modify(actor, comment.author_id, "comment")
        if not await self.comment_storage.delete(comment_id):
            raise NotFoundError("Comment not found")
        logger.info(f"Comment {comment_id} deleted by {actor.user_id}")

    async def delete_reply(self, actor: Actor, comment_id: UUID, reply_id: UUID) -> None:
        """
        Remove one reply (author or admin).

        Children of the removed reply stay; the tree shows them as roots.
        """
        comment = await self.get_comment(comment_id)
        reply = comment.find_reply(reply_id)
        if not reply:
            raise NotFoundError("Reply not found")
        ensure_can_modify(actor, reply.author_id, "reply")
        if not await self.comment_storage.remove_reply(comment_id, reply_id):
            raise NotFoundError("Comment not found")
        logger.info(f"Reply {reply_id} removed from comment {comment_id} by {actor.user_id}")

    async def render_comment(self, comment: Comment) -> dict:
        """Render one comment with nested replies and author projections"""
        people = await self.directory.summaries(comment.participant_ids())
        return comment.to_dict(tree=build_reply_tree(comment.replies), people=people)

    async def render_reply(self, reply: Reply) -> dict:
        people = await self.directory.summaries([reply.author_id])
        return reply.to_dict(people)
