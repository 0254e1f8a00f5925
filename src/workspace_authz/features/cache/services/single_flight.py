"""Request coalescing for origin-store lookups.

Concurrent callers asking for the same key share one in-flight task; callers
for different keys never wait on each other. Nothing is remembered once the
task finishes, so this is not a cache.
"""

import asyncio
import functools
import logging
from typing import Awaitable, Callable, Dict, TypeVar

logger = logging.getLogger(__name__)
T = TypeVar('T')


class SingleFlight:
    """Deduplicates concurrent calls keyed by a string.
    
    The first caller for a key starts the task; later callers await the same
    task and receive its result or its exception. Waiters are shielded, so a
    cancelled caller stops waiting without cancelling the shared task for
    everyone else.
    """
    
    def __init__(self, name: str = "single-flight"):
        self.name = name
        self._in_flight: Dict[str, asyncio.Task] = {}
        self.executions = 0
        self.shared_waits = 0
    
    @property
    def in_flight(self) -> int:
        return len(self._in_flight)
    
    async def do(self, key: str, fn: Callable[[], Awaitable[T]]) -> T:
        """Run fn once for all concurrent callers of key."""
        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.create_task(fn())
            self._in_flight[key] = task
            task.add_done_callback(functools.partial(self._forget, key))
            self.executions += 1
        else:
            self.shared_waits += 1
            logger.debug(f"{self.name}: joining in-flight lookup for {key}")
        
        return await asyncio.shield(task)
    
    def forget(self, key: str) -> bool:
        """Detach the in-flight task for key so the next caller starts a fresh one.
        
        Callers already waiting on the detached task still receive its result.
        """
        task = self._in_flight.pop(key, None)
        if task is not None:
            logger.debug(f"{self.name}: detached in-flight lookup for {key}")
        return task is not None
    
    def _forget(self, key: str, task: asyncio.Task) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
        # Mark the exception as retrieved when every waiter was cancelled
        if not task.cancelled() and task.exception() is not None:
            logger.debug(f"{self.name}: lookup for {key} failed: {task.exception()}")
