"""
Engine Service

Main composite service that manages all storages and services.
Singleton pattern - one instance per process.
"""
import logging
from typing import Optional

from ..config import Config
from ..storage.employee_storage import EmployeeStorage
from ..storage.room_storage import RoomStorage
from ..storage.message_storage import MessageStorage
from ..storage.comment_storage import CommentStorage
from ..realtime.registry import ChannelRegistry
from ..realtime.gateway import DeliveryGateway
from .directory_service import DirectoryService
from .room_service import RoomService
from .message_service import MessageService
from .comment_service import CommentService

logger = logging.getLogger("dashchat.services.engine")

# Singleton instance
_engine_service: Optional["EngineService"] = None


class EngineService:
    """
    Composite engine service.

    Manages:
    - All storage connections (PostgreSQL)
    - Business logic services
    - The realtime channel registry and delivery gateway
    - Graceful shutdown

    Storages may be passed in (e.g. alternative backends); missing ones
    are created against Config.get_postgres_dsn().
    """

    def __init__(
        self,
        employee_storage: Optional[EmployeeStorage] = None,
        room_storage: Optional[RoomStorage] = None,
        message_storage: Optional[MessageStorage] = None,
        comment_storage: Optional[CommentStorage] = None,
    ):
        """Initialize engine service with all storages"""
        self.postgres_dsn = Config.get_postgres_dsn()

        # Initialize storages
        self.employee_storage = employee_storage or EmployeeStorage(self.postgres_dsn)
        self.room_storage = room_storage or RoomStorage(self.postgres_dsn)
        self.message_storage = message_storage or MessageStorage(self.postgres_dsn)
        self.comment_storage = comment_storage or CommentStorage(self.postgres_dsn)

        # Initialize services (after storages)
        self.directory = DirectoryService(self.employee_storage)
        self.room_service = RoomService(self.room_storage, self.directory)
        self.message_service = MessageService(
            message_storage=self.message_storage,
            room_service=self.room_service,
            directory=self.directory,
            max_length=Config.MAX_MESSAGE_LENGTH,
        )
        self.comment_service = CommentService(self.comment_storage, self.directory)

        # Realtime delivery (registry is the only shared in-process state)
        self.channel_registry = ChannelRegistry()
        self.delivery_gateway = DeliveryGateway(
            registry=self.channel_registry,
            message_service=self.message_service,
            room_service=self.room_service,
        )

        self._initialized = False
        logger.info("EngineService created")

    @property
    def storages(self) -> list:
        return [
            self.employee_storage,
            self.room_storage,
            self.message_storage,
            self.comment_storage,
        ]

    async def initialize(self):
        """Initialize all storages"""
        if self._initialized:
            logger.info("EngineService already initialized")
            return

        logger.info("Initializing EngineService...")

        for storage in self.storages:
            await storage.init()

        self._initialized = True
        logger.info("EngineService initialized successfully")

    async def close(self):
        """Close all connections"""
        logger.info("Closing EngineService...")

        for storage in self.storages:
            await storage.close()

        self._initialized = False
        logger.info("EngineService closed")

    async def ping(self) -> bool:
        """True when every storage answers"""
        for storage in self.storages:
            if not await storage.ping():
                return False
        return True

    @property
    def is_initialized(self) -> bool:
        """Check if service is initialized"""
        return self._initialized


def get_engine_service() -> EngineService:
    """Get or create engine service singleton"""
    global _engine_service
    if _engine_service is None:
        _engine_service = EngineService()
    return _engine_service


async def init_engine_service() -> EngineService:
    """Initialize and return engine service"""
    service = get_engine_service()
    await service.initialize()
    return service
