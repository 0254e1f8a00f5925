"""Protocol interfaces for the permission cache.

The resolvers depend only on ``PermissionCache``: a shared, externally owned
key/value store with per-entry TTL. Values are JSON-compatible documents that
are written and read as one unit.
"""

from abc import abstractmethod
from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class PermissionCache(Protocol):
    """Protocol for the get/set/delete-with-TTL cache consumed by the resolvers."""
    
    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None on a miss or after expiry."""
        ...
    
    @abstractmethod
    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Store value under key for ttl_seconds."""
        ...
    
    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove key if present."""
        ...


@runtime_checkable
class ManagedCache(PermissionCache, Protocol):
    """Cache adapter with an explicit connection lifecycle."""
    
    @abstractmethod
    async def connect(self) -> None:
        """Open connections to the backend."""
        ...
    
    @abstractmethod
    async def disconnect(self) -> None:
        """Release backend connections."""
        ...
    
    @abstractmethod
    async def health_check(self) -> bool:
        """Return True if the backend answers."""
        ...
