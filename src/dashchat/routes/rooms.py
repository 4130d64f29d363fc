"""
Room Routes

API endpoints for chat rooms.
"""
import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from ..models.employee import Actor
from ..models.room import RoomKind
from ..services.engine_service import get_engine_service, EngineService
from .auth import get_current_user

logger = logging.getLogger("dashchat.routes.rooms")
router = APIRouter(prefix="/rooms", tags=["rooms"])


# Request models

class CreateRoomRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    kind: RoomKind
    members: List[UUID]
    linked_project: Optional[UUID] = Field(None, alias="linkedProject")


# Endpoints

@router.post("", status_code=201)
async def create_room(
    request: CreateRoomRequest,
    current_user: Actor = Depends(get_current_user),
    engine: EngineService = Depends(get_engine_service),
):
    """Create a chat room; the caller becomes its creator"""
    room = await engine.room_service.create_room(
        creator=current_user.user_id,
        name=request.name,
        kind=request.kind,
        members=request.members,
        linked_project=request.linked_project,
    )
    return room.to_dict()


@router.get("/user/{user_id}")
async def list_rooms_for_user(
    user_id: UUID,
    current_user: Actor = Depends(get_current_user),
    engine: EngineService = Depends(get_engine_service),
):
    """List rooms an employee belongs to (empty list if none)"""
    return await engine.room_service.list_rooms_for_user(user_id)
