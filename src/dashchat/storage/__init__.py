"""
DashChat Storage Layer

PostgreSQL storage implementations for DashChat entities.
"""
from .base import BaseStorage
from .employee_storage import EmployeeStorage
from .room_storage import RoomStorage
from .message_storage import MessageStorage
from .comment_storage import CommentStorage

__all__ = [
    'BaseStorage',
    'EmployeeStorage',
    'RoomStorage',
    'MessageStorage',
    'CommentStorage',
]
