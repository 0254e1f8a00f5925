"""Fail-soft permission cache service.

Wraps a ``PermissionCache`` so that an unavailable cache behaves like an empty
one: reads become misses, writes and deletes are logged and skipped. The
resolvers never see a cache exception.

Loads that populate a key register a ``PendingFill`` for it. Invalidating the
key marks every pending fill stale, and a stale fill's write is dropped, so a
lookup that read the store before a role change cannot put the old answer
back after the change. Pending fills are tracked per process.
"""

import asyncio
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, Optional, Set

from ..entities import PermissionCache, PermissionCacheKeys

logger = logging.getLogger(__name__)


class PendingFill:
    """A load in progress whose result will be written to one key."""
    
    __slots__ = ("key", "stale")
    
    def __init__(self, key: str):
        self.key = key
        self.stale = False


class PermissionCacheService:
    """Cache access used by the resolvers and the mutator."""
    
    def __init__(self, cache: PermissionCache, key_prefix: str = ""):
        self.cache = cache
        self.keys = PermissionCacheKeys(key_prefix)
        self._pending: Dict[str, Set[PendingFill]] = {}
    
    @contextmanager
    def fill(self, key: str) -> Iterator[PendingFill]:
        """Register a load for key; pass the yielded fill to ``set``."""
        pending = PendingFill(key)
        self._pending.setdefault(key, set()).add(pending)
        try:
            yield pending
        finally:
            fills = self._pending.get(key)
            if fills is not None:
                fills.discard(pending)
                if not fills:
                    del self._pending[key]
    
    def pending_fills(self, key: str) -> int:
        return len(self._pending.get(key, ()))
    
    async def get(self, key: str) -> Optional[Any]:
        """Get value from cache; any backend failure is a miss."""
        try:
            return await self.cache.get(key)
        except Exception as e:
            logger.warning(f"Cache read failed for {key}, treating as miss: {e}")
            return None
    
    async def set(self, key: str, value: Any, ttl_seconds: int, fill: Optional[PendingFill] = None) -> bool:
        """Set value in cache; returns False if the write was dropped.
        
        A write made on behalf of a stale fill is skipped. If the key is
        invalidated while the write is in progress, the key is deleted again.
        """
        if fill is not None and fill.stale:
            logger.debug(f"Dropping cache write for {key}: invalidated while loading")
            return False
        
        try:
            await self.cache.set(key, value, ttl_seconds)
        except Exception as e:
            logger.warning(f"Cache write failed for {key}: {e}")
            return False
        
        if fill is not None and fill.stale:
            await self.delete(key)
            return False
        return True
    
    async def delete(self, key: str) -> bool:
        """Delete value from cache; returns False if the delete failed."""
        try:
            await self.cache.delete(key)
            return True
        except Exception as e:
            logger.warning(f"Cache delete failed for {key}: {e}")
            return False
    
    async def delete_many(self, keys: Iterable[str]) -> int:
        """Delete several keys concurrently and return how many deletes succeeded."""
        results = await asyncio.gather(*(self.delete(key) for key in keys))
        return sum(1 for ok in results if ok)
    
    async def invalidate(self, keys: Iterable[str]) -> int:
        """Mark pending fills for keys stale, then delete the keys.
        
        Returns how many deletes succeeded.
        """
        keys = list(keys)
        for key in keys:
            for pending in self._pending.get(key, ()):
                pending.stale = True
        return await self.delete_many(keys)
