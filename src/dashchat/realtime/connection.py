"""
Base Connection

Abstract interface for a realtime client connection.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional
from uuid import uuid4

from ..models.employee import Actor

logger = logging.getLogger("dashchat.realtime.connection")


class BaseConnection(ABC):
    """
    One connected client.

    Outgoing frames are {"event": name, "data": payload}. Once closed,
    emit() is a no-op so fan-out never writes to a connection mid-teardown.
    """

    def __init__(self, actor: Actor, connection_id: Optional[str] = None):
        self.id = connection_id or uuid4().hex
        self.actor = actor
        self.closed = False

    async def emit(self, event: str, data: Any) -> bool:
        """
        Send one event frame.

        Returns:
            True if the frame was handed to the transport
        """
        if self.closed:
            return False
        try:
            await self._send({"event": event, "data": data})
        except Exception as e:
            logger.warning(f"Delivery of '{event}' to connection {self.id} failed: {e}")
            return False
        return True

    def mark_closed(self):
        self.closed = True

    @abstractmethod
    async def _send(self, frame: dict):
        """Write one frame to the transport"""
        ...
