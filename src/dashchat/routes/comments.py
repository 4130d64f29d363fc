"""
Comment Routes

API endpoints for blog comments and threaded replies.
"""
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from ..models.employee import Actor
from ..services.engine_service import get_engine_service, EngineService
from .auth import get_current_user

logger = logging.getLogger("dashchat.routes.comments")
router = APIRouter(prefix="/comments", tags=["comments"])


# Request models

class CommentRequest(BaseModel):
    content: str


class ReplyRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: str
    parent_reply_id: Optional[UUID] = Field(None, alias="parentReplyId")


# Endpoints

@router.post("/{blog_id}", status_code=201)
async def add_comment(
    blog_id: UUID,
    request: CommentRequest,
    current_user: Actor = Depends(get_current_user),
    engine: EngineService = Depends(get_engine_service),
):
    """Comment on a blog post"""
    comment = await engine.comment_service.add_comment(current_user.user_id, blog_id, request.content)
    return await engine.comment_service.render_comment(comment)


@router.get("/{blog_id}")
async def list_comments(
    blog_id: UUID,
    engine: EngineService = Depends(get_engine_service),
):
    """Comments on a blog post, newest first, with nested replies"""
    return await engine.comment_service.list_comments(blog_id)


@router.put("/{comment_id}")
async def update_comment(
    comment_id: UUID,
    request: CommentRequest,
    current_user: Actor = Depends(get_current_user),
    engine: EngineService = Depends(get_engine_service),
):
    """Edit a comment (author or admin)"""
    comment = await engine.comment_service.update_comment(current_user, comment_id, request.content)
    return await engine.comment_service.render_comment(comment)


@router.delete("/{comment_id}")
async def delete_comment(
    comment_id: UUID,
    current_user: Actor = Depends(get_current_user),
    engine: EngineService = Depends(get_engine_service),
):
    """Delete a comment and its replies (author or admin)"""
    await engine.comment_service.delete_comment(current_user, comment_id)
    return {"success": True}


@router.post("/{comment_id}/replies", status_code=201)
async def add_reply(
    comment_id: UUID,
    request: ReplyRequest,
    current_user: Actor = Depends(get_current_user),
    engine: EngineService = Depends(get_engine_service),
):
    """Reply to a comment, or to a reply within it via parentReplyId"""
    reply = await engine.comment_service.add_reply(
        author_id=current_user.user_id,
        comment_id=comment_id,
        content=request.content,
        parent_reply_id=request.parent_reply_id,
    )
    return await engine.comment_service.render_reply(reply)


@router.delete("/{comment_id}/replies/{reply_id}")
async def delete_reply(
    comment_id: UUID,
    reply_id: UUID,
    current_user: Actor = Depends(get_current_user),
    engine: EngineService = Depends(get_engine_service),
):
    """Delete one reply (author or admin)"""
    await engine.comment_service.delete_reply(current_user, comment_id, reply_id)
    return {"success": True}
