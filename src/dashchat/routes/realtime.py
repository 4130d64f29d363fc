"""
Realtime Routes

WebSocket endpoint for chat delivery.
Clients connect with ?token=<jwt> and exchange {"event", "data"} frames.
"""
import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from ..errors import ValidationError
from ..models.employee import Actor
from ..realtime.connection import BaseConnection
from ..realtime.events import SEND_ERROR, error_payload
from ..services.engine_service import get_engine_service, EngineService
from .auth import actor_from_token

logger = logging.getLogger("dashchat.routes.realtime")
router = APIRouter(tags=["realtime"])

# Close code for a missing or invalid token
UNAUTHORIZED_CLOSE_CODE = 4401


class WebSocketConnection(BaseConnection):
    """BaseConnection over a Starlette WebSocket"""

    def __init__(self, websocket: WebSocket, actor: Actor):
        super().__init__(actor)
        self.websocket = websocket

    async def _send(self, frame: dict):
        await self.websocket.send_json(frame)


@router.websocket("/ws/chat")
async def chat_socket(
    websocket: WebSocket,
    token: Optional[str] = None,
    engine: EngineService = Depends(get_engine_service),
):
    """Chat socket: join channels, send messages, receive deliveries"""
    actor = actor_from_token(token)
    if actor is None:
        await websocket.close(code=UNAUTHORIZED_CLOSE_CODE)
        return

    await websocket.accept()
    connection = WebSocketConnection(websocket, actor)
    gateway = engine.delivery_gateway
    logger.info(f"Connection {connection.id} opened for {actor.user_id}")

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            raw = message.get("text")
            if raw is None:
                await _reject_frame(connection, "must be a JSON text frame")
                continue
            try:
                frame = json.loads(raw)
            except json.JSONDecodeError:
                await _reject_frame(connection, "must be valid JSON")
                continue
            await gateway.handle(connection, frame)
    except WebSocketDisconnect:
        pass
    finally:
        await gateway.disconnect(connection)


async def _reject_frame(connection: BaseConnection, reason: str):
    error = ValidationError.for_field("frame", reason)
    await connection.emit(SEND_ERROR, error_payload(error.message, error.kind, error.fields))
