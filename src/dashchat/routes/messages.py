"""
Message Routes

API endpoints for sending messages, reading history and read receipts.
"""
import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from ..errors import AuthorizationError
from ..models.employee import Actor
from ..services.engine_service import get_engine_service, EngineService
from .auth import get_current_user

logger = logging.getLogger("dashchat.routes.messages")
router = APIRouter(prefix="/messages", tags=["messages"])


# Request models

class SendMessageRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    content: str
    sender: UUID
    room: Optional[UUID] = None
    recipient: Optional[UUID] = None
    timestamp: Optional[datetime] = None


class MarkReadRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: UUID = Field(..., alias="userId")


# Endpoints

@router.post("", status_code=201)
async def send_message(
    request: SendMessageRequest,
    current_user: Actor = Depends(get_current_user),
    engine: EngineService = Depends(get_engine_service),
):
    """Persist a room or direct message sent by the caller"""
    if request.sender != current_user.user_id:
        raise AuthorizationError("Sender does not match the authenticated employee")
    message = await engine.message_service.send_message(
        sender_id=request.sender,
        content=request.content,
        room_id=request.room,
        recipient_id=request.recipient,
        timestamp=request.timestamp,
    )
    return await engine.message_service.enrich(message)


@router.get("/room/{room_id}")
async def list_room_history(
    room_id: UUID,
    current_user: Actor = Depends(get_current_user),
    engine: EngineService = Depends(get_engine_service),
):
    """Room messages, oldest first (members only)"""
    return await engine.message_service.list_room_history(room_id, current_user.user_id)


@router.get("/direct")
async def list_direct_history(
    user1: UUID,
    user2: UUID,
    current_user: Actor = Depends(get_current_user),
    engine: EngineService = Depends(get_engine_service),
):
    """Direct messages between the caller and another employee, oldest first"""
    return await engine.message_service.list_direct_history(user1, user2, current_user.user_id)


@router.get("/{message_id}")
async def get_message(
    message_id: UUID,
    current_user: Actor = Depends(get_current_user),
    engine: EngineService = Depends(get_engine_service),
):
    """Get message by ID (room members or direct participants only)"""
    message = await engine.message_service.get_message(message_id)
    await engine.message_service.ensure_can_read(message, current_user.user_id)
    return await engine.message_service.enrich(message)


@router.put("/{message_id}/read")
async def mark_read(
    message_id: UUID,
    request: MarkReadRequest,
    current_user: Actor = Depends(get_current_user),
    engine: EngineService = Depends(get_engine_service),
):
    """Mark a message as read by the caller (idempotent)"""
    if request.user_id != current_user.user_id:
        raise AuthorizationError("Cannot mark messages read for another employee")
    message = await engine.message_service.mark_read(message_id, request.user_id)
    return await engine.message_service.enrich(message)
