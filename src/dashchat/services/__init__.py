"""
DashChat Services

Business logic services for DashChat.
"""
from .engine_service import EngineService
from .directory_service import DirectoryService
from .room_service import RoomService
from .message_service import MessageService, build_address
from .comment_service import CommentService
from .thread_builder import build_reply_tree
from .policy import can_modify, ensure_can_modify

__all__ = [
    'EngineService',
    'DirectoryService',
    'RoomService',
    'MessageService',
    'build_address',
    'CommentService',
    'build_reply_tree',
    'can_modify',
    'ensure_can_modify',
]
