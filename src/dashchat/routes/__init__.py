"""
DashChat API Routes

FastAPI route handlers for DashChat.
"""
from .health import router as health_router
from .auth import router as auth_router
from .rooms import router as rooms_router
from .messages import router as messages_router
from .comments import router as comments_router
from .realtime import router as realtime_router

__all__ = [
    'health_router',
    'auth_router',
    'rooms_router',
    'messages_router',
    'comments_router',
    'realtime_router',
]
