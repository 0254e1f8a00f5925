"""Context aggregator: a user's permissions across every accessible workspace."""

import logging
from typing import Any, Dict, FrozenSet, Optional, Set

from ..entities import MembershipStore, OWNER_PERMISSIONS
from ...cache.services import PermissionCacheService, SingleFlight
from ....config.settings import PermissionSettings

logger = logging.getLogger(__name__)


class ContextAggregator:
    """Builds the workspace_id -> permissions map for one user.
    
    Covers active memberships and directly owned workspaces. Ownership without
    a membership row gets the owner set; when both exist the membership row
    wins. Any failure yields an empty map, never a partial one.
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
    
    async def get_context_permissions(self, user_id: str) -> Dict[str, Set[str]]:
        if not user_id:
            return {}
        
        key = self.cache.keys.user_context_permissions(user_id)
        
        try:
            cached = await self.cache.get(key)
            if cached is not None:
                context = self._decode(key, cached)
                if context is not None:
                    return context
            
            if self.single_flight is not None and self.settings.single_flight_enabled:
                snapshot = await self.single_flight.do(key, lambda: self._load(user_id, key))
            else:
                snapshot = await self._load(user_id, key)
            
            # The flight result is shared between callers; hand out copies
            return {workspace_id: set(permissions) for workspace_id, permissions in snapshot.items()}
            
        except Exception as e:
            logger.error(f"Failed to get context permissions for user {user_id}: {e}")
            return {}
    
    async def _load(self, user_id: str, key: str) -> Dict[str, FrozenSet[str]]:
        with self.cache.fill(key) as fill:
            memberships = await self.store.find_active_memberships_for_user(user_id)
            owned_workspace_ids = await self.store.find_owned_workspace_ids(user_id)
            
            context: Dict[str, FrozenSet[str]] = {}
            
            for member in memberships:
                if not member.is_active or member.user_id != user_id:
                    continue
                context[member.workspace_id] = frozenset(member.permission_snapshot())
            
            # Owners may not have a membership row
            for workspace_id in owned_workspace_ids:
                context.setdefault(str(workspace_id), OWNER_PERMISSIONS)
            
            await self.cache.set(
                key,
                {workspace_id: sorted(permissions) for workspace_id, permissions in context.items()},
                self.settings.context_ttl_seconds,
                fill=fill
            )
        
        logger.debug(f"Resolved context permissions for user {user_id} across {len(context)} workspaces")
        return context
    
    def _decode(self, key: str, cached: Any) -> Optional[Dict[str, Set[str]]]:
        if isinstance(cached, dict) and all(
            isinstance(permissions, list) and all(isinstance(p, str) for p in permissions)
            for permissions in cached.values()
        ):
            return {str(workspace_id): set(permissions) for workspace_id, permissions in cached.items()}
        logger.warning(f"Discarding unexpected context permission cache entry {key}")
        return None
