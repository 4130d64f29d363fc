"""
Realtime Events

Event names and payload schemas of the chat socket protocol.
Every incoming payload is decoded exactly once through these models.
"""
from datetime import datetime
from typing import Any, Optional, Type, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..errors import ValidationError, fields_from_errors

# client -> server
JOIN_USER_CHANNEL = "joinUserChannel"
JOIN_ROOM_CHANNEL = "joinRoomChannel"
SEND_MESSAGE = "sendMessage"

# server -> client
MESSAGE_DELIVERED = "messageDelivered"
SEND_ERROR = "sendError"
CHANNEL_JOINED = "channelJoined"

ModelT = TypeVar("ModelT", bound=BaseModel)

_uuid_adapter = TypeAdapter(UUID)


class ClientFrame(BaseModel):
    """Envelope of every client frame"""
    model_config = ConfigDict(extra="forbid")

    event: str
    data: Any = None


class SendMessagePayload(BaseModel):
    """Payload of sendMessage; exactly one of room/recipient is checked downstream"""
    model_config = ConfigDict(extra="forbid")

    content: str
    sender: UUID
    room: Optional[UUID] = None
    recipient: Optional[UUID] = None
    timestamp: Optional[datetime] = None


def decode(model: Type[ModelT], data: Any) -> ModelT:
    """Validate a decoded JSON value against model; JSON-in-a-string is rejected"""
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError("Malformed payload", fields_from_errors(e.errors())) from e


def decode_id(data: Any, field: str) -> UUID:
    """Decode a bare id payload such as joinRoomChannel(roomId)"""
    if not isinstance(data, str):
        raise ValidationError.for_field(field, "must be an id string")
    try:
        return _uuid_adapter.validate_python(data)
    except PydanticValidationError as e:
        raise ValidationError.for_field(field, "must be a valid id") from e


def error_payload(reason: str, kind: str, fields: Optional[dict] = None) -> dict:
    payload = {"reason": reason, "type": kind}
    if fields:
        payload["fields"] = fields
    return payload
