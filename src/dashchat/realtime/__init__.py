"""
DashChat Realtime Delivery

Channel registry and delivery gateway for chat over WebSockets.
"""
from .connection import BaseConnection
from .registry import ChannelRegistry, user_channel, room_channel
from .gateway import DeliveryGateway

__all__ = [
    'BaseConnection',
    'ChannelRegistry',
    'DeliveryGateway',
    'user_channel',
    'room_channel',
]
