"""Membership resolver: cache-then-store lookup of one membership record."""

import logging
from typing import Any, Optional

from ..entities import MembershipStore, WorkspaceMember
from ...cache.services import PermissionCacheService, SingleFlight
from ....config.constants import ABSENT_MEMBERSHIP
from ....config.settings import PermissionSettings

logger = logging.getLogger(__name__)


class MembershipResolver:
    """Resolves the active membership for a (user, workspace) pair.
    
    Hits return the cached record, or None when the cache remembers the pair
    as absent. Misses go to the store through the single-flight coordinator,
    so a burst of identical lookups costs one query. A user who owns the
    workspace directly but has no active membership row resolves to a
    synthesized owner membership. The result is cached with the membership
    TTL, or the negative TTL when there is no active membership.
    """
    
    def __init__(
        self,
        store: MembershipStore,
        cache: PermissionCacheService,
        settings: PermissionSettings,
        single_flight: Optional[SingleFlight] = None
    ):
        self.store = store
        self.cache = cache
        self.settings = settings
        self.single_flight = single_flight
    
    async def get_member(self, user_id: str, workspace_id: str) -> Optional[WorkspaceMember]:
        """Get the active membership, or None. Never raises."""
        key = self.cache.keys.membership(workspace_id, user_id)
        
        try:
            cached = await self.cache.get(key)
            if cached is not None:
                hit, member = self._decode(key, cached)
                if hit:
                    return member
            
            if self.single_flight is not None and self.settings.single_flight_enabled:
                return await self.single_flight.do(key, lambda: self._load(user_id, workspace_id, key))
            return await self._load(user_id, workspace_id, key)
            
        except Exception as e:
            logger.error(f"Failed to get workspace member {user_id} in {workspace_id}: {e}")
            return None
    
    async def _load(self, user_id: str, workspace_id: str, key: str) -> Optional[WorkspaceMember]:
        with self.cache.fill(key) as fill:
            member = await self.store.find_active_membership(user_id, workspace_id)
            
            if member is None or not member.is_active:
                # Owners without a membership row still hold the owner role
                member = await self.store.find_owner_membership(user_id, workspace_id)
            
            if member is None:
                await self.cache.set(key, ABSENT_MEMBERSHIP, self.settings.negative_ttl_seconds, fill=fill)
                return None
            
            await self.cache.set(key, member.to_cache_dict(), self.settings.membership_ttl_seconds, fill=fill)
            return member
    
    def _decode(self, key: str, cached: Any):
        """Return (hit, member); malformed entries count as a miss."""
        if cached == ABSENT_MEMBERSHIP:
            return True, None
        if isinstance(cached, dict):
            try:
                member = WorkspaceMember.from_cache_dict(cached)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Discarding malformed membership cache entry {key}: {e}")
                return False, None
            return True, (member if member.is_active else None)
        
        logger.warning(f"Discarding unexpected membership cache entry {key} of type {type(cached).__name__}")
        return False, None
