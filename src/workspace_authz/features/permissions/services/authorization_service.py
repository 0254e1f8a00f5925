"""Workspace authorization service.

The only surface the API layer calls. Wires the resolvers, the aggregator and
the mutator around one store, one cache and one single-flight coordinator.
"""

import logging
from typing import Dict, Iterable, Optional, Set, Union

from .context_aggregator import ContextAggregator
from .membership_resolver import MembershipResolver
from .permission_resolver import PermissionResolver
from .role_mutator import RoleMutator
from ..entities import MembershipStore, WorkspaceMember
from ...cache.entities import PermissionCache
from ...cache.services import PermissionCacheService, SingleFlight
from ....config.constants import WorkspaceRole
from ....config.settings import PermissionSettings

logger = logging.getLogger(__name__)


class WorkspaceAuthorizationService:
    """Service orchestrating workspace permission resolution with caching."""
    
    def __init__(
        self,
        store: MembershipStore,
        cache: PermissionCache,
        settings: Optional[PermissionSettings] = None,
        single_flight: Optional[SingleFlight] = None
    ):
        self.settings = settings or PermissionSettings()
        self.store = store
        self.cache = PermissionCacheService(cache, key_prefix=self.settings.key_prefix)
        self.single_flight = single_flight or SingleFlight("membership-store")
        
        self.memberships = MembershipResolver(store, self.cache, self.settings, self.single_flight)
        self.permissions = PermissionResolver(self.memberships, self.cache, self.settings)
        self.context = ContextAggregator(store, self.cache, self.settings, self.single_flight)
        self.mutator = RoleMutator(store, self.cache, self.single_flight)
    
    # Permission Checking
    
    async def has_permission(self, user_id: str, workspace_id: str, permission: str) -> bool:
        """Check if user has a specific permission in the workspace."""
        return await self.permissions.has_permission(user_id, workspace_id, permission)
    
    async def has_any_permission(self, user_id: str, workspace_id: str, permissions: Iterable[str]) -> bool:
        """Check if user has any of the specified permissions."""
        return await self.permissions.has_any_permission(user_id, workspace_id, permissions)
    
    async def has_all_permissions(self, user_id: str, workspace_id: str, permissions: Iterable[str]) -> bool:
        """Check if user has all of the specified permissions."""
        return await self.permissions.has_all_permissions(user_id, workspace_id, permissions)
    
    async def has_workspace_access(
        self,
        user_id: str,
        workspace_id: str,
        required_permission: Optional[str] = None
    ) -> bool:
        """Check if user is an active member, optionally holding a permission."""
        return await self.permissions.has_workspace_access(user_id, workspace_id, required_permission)
    
    async def require_permission(self, user_id: str, workspace_id: str, permission: str) -> WorkspaceMember:
        """Return the membership or raise an authorization error."""
        return await self.permissions.require_permission(user_id, workspace_id, permission)
    
    # Resolution
    
    async def get_role(self, user_id: str, workspace_id: str) -> Optional[str]:
        """Get the user's role in the workspace."""
        return await self.permissions.get_role(user_id, workspace_id)
    
    async def get_permissions(self, user_id: str, workspace_id: str) -> Set[str]:
        """Get all permission codes for a user in the workspace."""
        return await self.permissions.get_permissions(user_id, workspace_id)
    
    async def get_member(self, user_id: str, workspace_id: str) -> Optional[WorkspaceMember]:
        """Get the active membership record."""
        return await self.memberships.get_member(user_id, workspace_id)
    
    async def get_context_permissions(self, user_id: str) -> Dict[str, Set[str]]:
        """Get the user's permissions in every workspace they can access."""
        return await self.context.get_context_permissions(user_id)
    
    # Mutation
    
    async def update_role(
        self,
        workspace_id: str,
        user_id: str,
        new_role: Union[WorkspaceRole, str],
        actor_id: str
    ) -> None:
        """Change a member's role and invalidate their cached permissions."""
        await self.mutator.update_role(workspace_id, user_id, new_role, actor_id)
    
    async def invalidate_permission_caches(self, user_id: str, workspace_id: str) -> None:
        """Drop cached permission state for a membership changed elsewhere."""
        await self.mutator.invalidate_permission_caches(user_id, workspace_id)
