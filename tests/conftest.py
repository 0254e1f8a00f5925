"""Pytest configuration and fixtures for workspace-authz tests."""

import asyncio
from collections import Counter
from uuid import uuid4

import pytest

from workspace_authz.config.settings import PermissionSettings
from workspace_authz.core.exceptions import CacheConnectionError, MembershipStoreError
from workspace_authz.features.cache.adapters import MemoryAdapter
from workspace_authz.features.cache.services import PermissionCacheService, SingleFlight
from workspace_authz.features.permissions.repositories import InMemoryMembershipRepository
from workspace_authz.features.permissions.services import WorkspaceAuthorizationService


class FakeClock:
    """Manually advanced clock for TTL tests."""
    
    def __init__(self, start: float = 1000.0):
        self.now = start
    
    def __call__(self) -> float:
        return self.now
    
    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingStore:
    """Wraps a membership store, counting calls and optionally slowing or failing them."""
    
    def __init__(self, inner: InMemoryMembershipRepository, delay: float = 0.0):
        self.inner = inner
        self.delay = delay
        self.error = None
        self.calls = Counter()
    
    async def _enter(self, name: str) -> None:
        self.calls[name] += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
    
    async def find_active_membership(self, user_id, workspace_id):
        await self._enter("find_active_membership")
        return await self.inner.find_active_membership(user_id, workspace_id)
    
    async def find_active_memberships_for_user(self, user_id):
        await self._enter("find_active_memberships_for_user")
        return await self.inner.find_active_memberships_for_user(user_id)
    
    async def find_owner_membership(self, user_id, workspace_id):
        await self._enter("find_owner_membership")
        return await self.inner.find_owner_membership(user_id, workspace_id)
    
    async def find_owned_workspace_ids(self, user_id):
        await self._enter("find_owned_workspace_ids")
        return await self.inner.find_owned_workspace_ids(user_id)
    
    async def update_membership_role(self, workspace_id, user_id, role):
        await self._enter("update_membership_role")
        return await self.inner.update_membership_role(workspace_id, user_id, role)


class HeldReadStore(CountingStore):
    """Store that holds the first call to one read method open until released.
    
    The read itself has already happened when the hold starts, so the caller
    ends up with whatever the row looked like at that moment.
    """
    
    def __init__(self, inner: InMemoryMembershipRepository, held_method: str = "find_active_membership"):
        super().__init__(inner)
        self.held_method = held_method
        self.holding = asyncio.Event()
        self.release = asyncio.Event()
    
    async def _hold(self, name: str, result):
        if name == self.held_method and not self.holding.is_set():
            self.holding.set()
            await self.release.wait()
        return result
    
    async def find_active_membership(self, user_id, workspace_id):
        result = await super().find_active_membership(user_id, workspace_id)
        return await self._hold("find_active_membership", result)
    
    async def find_active_memberships_for_user(self, user_id):
        result = await super().find_active_memberships_for_user(user_id)
        return await self._hold("find_active_memberships_for_user", result)


class BrokenCache:
    """Cache whose backend is unreachable."""
    
    def __init__(self):
        self.calls = Counter()
    
    async def get(self, key):
        self.calls["get"] += 1
        raise CacheConnectionError("redis unavailable")
    
    async def set(self, key, value, ttl_seconds):
        self.calls["set"] += 1
        raise CacheConnectionError("redis unavailable")
    
    async def delete(self, key):
        self.calls["delete"] += 1
        raise CacheConnectionError("redis unavailable")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return PermissionSettings(
        membership_ttl_seconds=300,
        permissions_ttl_seconds=300,
        negative_ttl_seconds=60,
        context_ttl_seconds=300,
    )


@pytest.fixture
def memory_cache(clock):
    return MemoryAdapter(max_size=1000, clock=clock)


@pytest.fixture
def cache_service(memory_cache):
    return PermissionCacheService(memory_cache)


@pytest.fixture
def repository():
    return InMemoryMembershipRepository()


@pytest.fixture
def store(repository):
    return CountingStore(repository)


@pytest.fixture
def single_flight():
    return SingleFlight("test")


@pytest.fixture
def service(store, memory_cache, settings):
    return WorkspaceAuthorizationService(store=store, cache=memory_cache, settings=settings)


@pytest.fixture
def user_id():
    return str(uuid4())


@pytest.fixture
def workspace_id():
    return str(uuid4())


@pytest.fixture
def other_workspace_id():
    return str(uuid4())


@pytest.fixture
def store_error():
    return MembershipStoreError("connection refused")


@pytest.fixture
def broken_cache():
    return BrokenCache()


@pytest.fixture
def slow_store(repository):
    """Store that takes 50ms per query, long enough for callers to pile up."""
    return CountingStore(repository, delay=0.05)


@pytest.fixture
def held_store(repository):
    """Store whose first membership read is held open until ``release`` is set."""
    return HeldReadStore(repository)
