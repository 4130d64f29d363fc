"""
DashChat Data Models

Domain models for the dashboard chat core.
"""
from .employee import Actor, Employee, EmployeeRole, EmployeeSummary, utcnow
from .room import Room, RoomKind
from .message import Message, Address, RoomAddress, DirectAddress
from .comment import Comment, Reply, ReplyNode

__all__ = [
    'Actor',
    'Employee',
    'EmployeeRole',
    'EmployeeSummary',
    'utcnow',
    'Room',
    'RoomKind',
    'Message',
    'Address',
    'RoomAddress',
    'DirectAddress',
    'Comment',
    'Reply',
    'ReplyNode',
]
