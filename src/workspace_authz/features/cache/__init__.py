"""Cache feature for workspace-authz.

- entities/: cache protocol and key construction
- adapters/: Redis and in-memory implementations
- services/: fail-soft cache access and single-flight request coalescing
"""

from .entities import PermissionCache, ManagedCache, PermissionCacheKeys
from .adapters import MemoryAdapter, RedisAdapter
from .services import PermissionCacheService, SingleFlight
from .factory import create_cache

__all__ = [
    # Protocols
    "PermissionCache",
    "ManagedCache",
    
    # Keys
    "PermissionCacheKeys",
    
    # Adapters
    "MemoryAdapter",
    "RedisAdapter",
    "create_cache",
    
    # Services
    "PermissionCacheService",
    "SingleFlight",
]
