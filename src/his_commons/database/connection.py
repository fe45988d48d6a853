"""Document store connection manager."""

import logging
from typing import Optional, Type

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase

from ..config.settings import HisCommonsSettings, get_settings
from ..models.base import BaseEntity

logger = logging.getLogger(__name__)


class MongoConnectionManager:
    """Owns the motor client for one service.
    
    The client (and its connection pool) is created lazily on first use
    and sized from settings.
    """
    
    def __init__(
        self,
        settings: Optional[HisCommonsSettings] = None,
        client: Optional[AsyncIOMotorClient] = None,
    ):
        self._settings = settings or get_settings()
        self._client = client
    
    @property
    def client(self) -> AsyncIOMotorClient:
        """Get the motor client, creating it on first access."""
        if self._client is None:
            self._client = AsyncIOMotorClient(
                self._settings.mongodb_url,
                maxPoolSize=self._settings.mongodb_max_pool_size,
                serverSelectionTimeoutMS=self._settings.mongodb_server_selection_timeout_ms,
                tz_aware=True,
            )
            logger.info(
                f"Created document store client for database {self._settings.mongodb_database}: "
                f"max_pool_size={self._settings.mongodb_max_pool_size}"
            )
        return self._client
    
    @property
    def database(self) -> AsyncIOMotorDatabase:
        return self.client[self._settings.mongodb_database]
    
    def get_collection(self, name: str) -> AsyncIOMotorCollection:
        """Get a collection handle by name."""
        if not name:
            raise ValueError("Collection name is required")
        return self.database[name]
    
    def get_collection_for(self, entity_class: Type[BaseEntity]) -> AsyncIOMotorCollection:
        """Get the collection declared by an entity class.
        
        Raises:
            ValueError: If the entity class declares no ``collection_name``
        """
        if not entity_class.collection_name:
            raise ValueError(f"{entity_class.entity_name()} does not declare a collection_name")
        return self.get_collection(entity_class.collection_name)
    
    async def ping(self) -> bool:
        """Check the store is reachable."""
        try:
            await self.client.admin.command("ping")
            return True
        except Exception as e:
            logger.warning(f"Document store ping failed: {e}")
            return False
    
    async def close(self) -> None:
        """Close the client and its connection pool."""
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.info("Closed document store client")
