"""Cache factory for workspace-authz."""

import logging
from typing import Optional

from .adapters import MemoryAdapter, RedisAdapter
from .entities import ManagedCache
from ...config.settings import CacheBackend, CacheSettings
from ...core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def create_cache(settings: Optional[CacheSettings] = None) -> ManagedCache:
    """Create the cache adapter selected by settings.
    
    Args:
        settings: Cache settings; read from the environment when omitted
        
    Returns:
        An unconnected cache adapter
        
    Raises:
        ConfigurationError: If the backend is not supported
    """
    settings = settings or CacheSettings()
    
    if settings.backend == CacheBackend.REDIS:
        logger.debug("Creating Redis permission cache")
        return RedisAdapter.from_settings(settings)
    if settings.backend == CacheBackend.MEMORY:
        logger.debug("Creating in-memory permission cache")
        return MemoryAdapter(max_size=settings.memory_max_size)
    
    raise ConfigurationError(f"Unsupported cache backend: {settings.backend}")
