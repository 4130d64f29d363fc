"""
Channel Registry

In-process table of which connections are joined to which channels.
All mutations happen under one asyncio lock; readers get snapshots.
"""
import asyncio
import logging
from typing import Dict, List, Set
from uuid import UUID

from .connection import BaseConnection

logger = logging.getLogger("dashchat.realtime.registry")


def user_channel(user_id: UUID) -> str:
    """Personal inbox channel of an employee"""
    return f"user:{user_id}"


def room_channel(room_id: UUID) -> str:
    """Fan-out channel of a chat room"""
    return f"room:{room_id}"


class ChannelRegistry:
    """Connection <-> channel membership table"""

    def __init__(self):
        # channel -> connection id -> connection
        self._channels: Dict[str, Dict[str, BaseConnection]] = {}
        # connection id -> channels
        self._joined: Dict[str, Set[str]] = {}
        self._lock = asyncio.Lock()

    async def join(self, connection: BaseConnection, channel: str) -> bool:
        """
        Add a connection to a channel, creating the channel lazily.

        Returns:
            False if the connection was already joined or is closed
        """
        async with self._lock:
            if connection.closed:
                return False
            members = self._channels.setdefault(channel, {})
            if connection.id in members:
                return False
            members[connection.id] = connection
            self._joined.setdefault(connection.id, set()).add(channel)
        logger.debug(f"Connection {connection.id} joined {channel}")
        return True

    async def disconnect(self, connection: BaseConnection) -> List[str]:
        """Remove a connection from every channel; returns the channels it left"""
        async with self._lock:
            channels = sorted(self._joined.pop(connection.id, set()))
            for channel in channels:
                self._remove(connection.id, channel)
        if channels:
            logger.debug(f"Connection {connection.id} left {len(channels)} channel(s)")
        return channels

    async def members(self, channel: str) -> List[BaseConnection]:
        """Snapshot of the connections joined to a channel"""
        async with self._lock:
            return list(self._channels.get(channel, {}).values())

    @property
    def channel_count(self) -> int:
        return len(self._channels)

    @property
    def connection_count(self) -> int:
        return len(self._joined)

    def _remove(self, connection_id: str, channel: str):
        """Caller holds the lock; empty channels are dropped"""
        members = self._channels.get(channel)
        if members is None:
            return
        members.pop(connection_id, None)
        if not members:
            del self._channels[channel]
