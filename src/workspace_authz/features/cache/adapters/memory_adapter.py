"""In-process cache adapter for workspace-authz.

Used for single-process deployments and tests. Values go through the same JSON
round-trip as the Redis adapter, so a reader never shares mutable state with
the writer and every entry is replaced as one unit.
"""

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Optional

from . import serialization

logger = logging.getLogger(__name__)


@dataclass
class MemoryCacheEntry:
    """Memory cache entry with expiry."""
    payload: str
    expires_at: Optional[float] = None
    
    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at


class MemoryAdapter:
    """Dict-backed cache with per-entry TTL and oldest-first eviction."""
    
    def __init__(self, max_size: int = 10000, clock: Callable[[], float] = time.monotonic):
        if max_size <= 0:
            raise ValueError("Memory max size must be a positive integer")
        self.max_size = max_size
        self._clock = clock
        self._store: "OrderedDict[str, MemoryCacheEntry]" = OrderedDict()
    
    async def connect(self) -> None:
        return None
    
    async def disconnect(self) -> None:
        self._store.clear()
    
    async def health_check(self) -> bool:
        return True
    
    async def get(self, key: str) -> Optional[Any]:
        entry = self._store.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            self._store.pop(key, None)
            return None
        return serialization.loads(entry.payload)
    
    async def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        payload = serialization.dumps(value)
        expires_at = self._clock() + ttl_seconds if ttl_seconds and ttl_seconds > 0 else None
        
        self._store[key] = MemoryCacheEntry(payload=payload, expires_at=expires_at)
        self._store.move_to_end(key)
        
        while len(self._store) > self.max_size:
            evicted_key, _ = self._store.popitem(last=False)
            logger.debug(f"Evicted cache entry {evicted_key}")
    
    async def delete(self, key: str) -> bool:
        return self._store.pop(key, None) is not None
    
    async def clear(self) -> None:
        self._store.clear()
    
    def __len__(self) -> int:
        return len(self._store)
