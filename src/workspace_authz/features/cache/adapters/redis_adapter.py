"""Redis cache adapter for workspace-authz."""

import logging
from typing import Any, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from . import serialization
from ....config.settings import CacheSettings
from ....core.exceptions import CacheError, CacheConnectionError

logger = logging.getLogger(__name__)


class RedisAdapter:
    """Permission cache backed by a shared Redis instance.
    
    Each value is stored as one JSON string with ``SET key value EX ttl`` so
    readers observe either the previous document or the new one, never a mix.
    """
    
    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        max_connections: int = 50,
        connection_timeout: float = 5.0,
        command_timeout: float = 3.0,
        client: Optional[redis.Redis] = None
    ):
        self.redis_url = redis_url
        self.max_connections = max_connections
        self.connection_timeout = connection_timeout
        self.command_timeout = command_timeout
        self.redis_client: Optional[redis.Redis] = client
    
    @classmethod
    def from_settings(cls, settings: CacheSettings) -> "RedisAdapter":
        return cls(
            redis_url=settings.redis_url,
            max_connections=settings.redis_max_connections,
            connection_timeout=settings.redis_connection_timeout,
            command_timeout=settings.redis_command_timeout,
        )
    
    def _client(self) -> redis.Redis:
        # from_url does no I/O; the pool connects lazily on first command
        if self.redis_client is None:
            self.redis_client = redis.from_url(
                self.redis_url,
                max_connections=self.max_connections,
                socket_connect_timeout=self.connection_timeout,
                socket_timeout=self.command_timeout,
                decode_responses=True,
            )
        return self.redis_client
    
    async def connect(self) -> None:
        """Connect to Redis and verify it answers."""
        try:
            await self._client().ping()
            logger.info("Connected to Redis permission cache")
        except RedisError as e:
            raise CacheConnectionError(f"Failed to connect to Redis: {e}")
    
    async def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self.redis_client:
            try:
                await self.redis_client.aclose()
            except RedisError as e:
                logger.error(f"Error closing Redis connection: {e}")
            finally:
                self.redis_client = None
    
    async def health_check(self) -> bool:
        try:
            return bool(await self._client().ping())
        except RedisError as e:
            logger.warning(f"Redis health check failed: {e}")
            return False
    
    async def get(self, key: str) -> Optional[Any]:
        """Get value by key."""
        try:
            raw = await self._client().get(key)
        except RedisError as e:
            raise CacheError(f"Redis get error for key {key}: {e}")
        
        if raw is None:
            return None
        return serialization.loads(raw)
    
    async def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        """Set key-value pair with optional TTL."""
        payload = serialization.dumps(value)
        try:
            await self._client().set(
                key,
                payload,
                ex=ttl_seconds if ttl_seconds and ttl_seconds > 0 else None
            )
        except RedisError as e:
            raise CacheError(f"Redis set error for key {key}: {e}")
    
    async def delete(self, key: str) -> bool:
        """Delete key and return whether it existed."""
        try:
            result = await self._client().delete(key)
        except RedisError as e:
            raise CacheError(f"Redis delete error for key {key}: {e}")
        return result > 0
