"""Permission resolver: per-workspace permission snapshots and checks."""

import logging
from typing import Any, Iterable, Optional, Set

from .membership_resolver import MembershipResolver
from ..entities import WorkspaceMember
from ...cache.services import PermissionCacheService
from ....config.settings import PermissionSettings
from ....core.exceptions import InsufficientPermissionsError, WorkspaceAccessDeniedError

logger = logging.getLogger(__name__)


class PermissionResolver:
    """Answers permission questions for one (user, workspace) pair.
    
    Every failure resolves to the most restrictive answer: an empty set,
    None, or False. ``require_permission`` is the only method that raises,
    and only to deny.
    """
    
    def __init__(
        self,
        memberships: MembershipResolver,
        cache: PermissionCacheService,
        settings: PermissionSettings
    ):
        self.memberships = memberships
        self.cache = cache
        self.settings = settings
    
    async def get_permissions(self, user_id: str, workspace_id: str) -> Set[str]:
        """Get the deduplicated permission snapshot for the user in the workspace."""
        if not user_id or not workspace_id:
            return set()
        
        key = self.cache.keys.user_permissions(user_id, workspace_id)
        
        try:
            cached = await self.cache.get(key)
            if cached is not None:
                snapshot = self._decode(key, cached)
                if snapshot is not None:
                    return snapshot
            
            with self.cache.fill(key) as fill:
                member = await self.memberships.get_member(user_id, workspace_id)
                
                if member is None or not member.is_active:
                    # Cache the empty result briefly to avoid repeated store queries
                    await self.cache.set(key, [], self.settings.negative_ttl_seconds, fill=fill)
                    return set()
                
                permissions = member.permission_snapshot()
                await self.cache.set(key, sorted(permissions), self.settings.permissions_ttl_seconds, fill=fill)
            
            logger.debug(
                f"Resolved {len(permissions)} permissions for user {user_id} "
                f"in workspace {workspace_id} (role={member.role})"
            )
            return permissions
            
        except Exception as e:
            logger.error(f"Failed to get permissions for user {user_id} in workspace {workspace_id}: {e}")
            return set()
    
    async def get_role(self, user_id: str, workspace_id: str) -> Optional[str]:
        """Get the user's role in the workspace, or None if not an active member."""
        if not user_id or not workspace_id:
            return None
        
        try:
            member = await self.memberships.get_member(user_id, workspace_id)
            if member is None or not member.is_active:
                return None
            return member.role
        except Exception as e:
            logger.error(f"Failed to get role for user {user_id} in workspace {workspace_id}: {e}")
            return None
    
    async def has_permission(self, user_id: str, workspace_id: str, permission: str) -> bool:
        """Check a single permission against the membership record."""
        if not permission or not user_id or not workspace_id:
            return False
        
        try:
            member = await self.memberships.get_member(user_id, workspace_id)
            if member is None or not member.is_active:
                return False
            
            allowed = member.has_permission(permission)
            logger.debug(
                f"Permission {permission} for user {user_id} in workspace {workspace_id}: "
                f"{'granted' if allowed else 'denied'} (role={member.role})"
            )
            return allowed
        except Exception as e:
            logger.error(f"Failed to check {permission} for user {user_id} in workspace {workspace_id}: {e}")
            return False
    
    async def has_any_permission(self, user_id: str, workspace_id: str, permissions: Iterable[str]) -> bool:
        """Check if user has any of the specified permissions."""
        wanted = [p for p in permissions or [] if p]
        if not wanted:
            return False
        granted = await self.get_permissions(user_id, workspace_id)
        return any(p in granted for p in wanted)
    
    async def has_all_permissions(self, user_id: str, workspace_id: str, permissions: Iterable[str]) -> bool:
        """Check if user has all of the specified permissions."""
        wanted = [p for p in permissions or [] if p]
        if not wanted:
            return True
        granted = await self.get_permissions(user_id, workspace_id)
        return all(p in granted for p in wanted)
    
    async def has_workspace_access(
        self,
        user_id: str,
        workspace_id: str,
        required_permission: Optional[str] = None
    ) -> bool:
        """Check active membership, optionally together with one permission."""
        if required_permission is not None:
            return await self.has_permission(user_id, workspace_id, required_permission)
        if not user_id or not workspace_id:
            return False
        member = await self.memberships.get_member(user_id, workspace_id)
        return member is not None and member.is_active
    
    async def require_permission(self, user_id: str, workspace_id: str, permission: str) -> WorkspaceMember:
        """Return the membership or raise a denial.
        
        Raises:
            WorkspaceAccessDeniedError: If the user is not an active member
            InsufficientPermissionsError: If the member lacks the permission
        """
        member = None
        if user_id and workspace_id:
            member = await self.memberships.get_member(user_id, workspace_id)
        
        if member is None or not member.is_active:
            raise WorkspaceAccessDeniedError(user_id, workspace_id, permission)
        
        if not permission or not member.has_permission(permission):
            raise InsufficientPermissionsError(
                user_id, workspace_id, permission, list(member.permission_snapshot())
            )
        
        return member
    
    def _decode(self, key: str, cached: Any) -> Optional[Set[str]]:
        if isinstance(cached, list) and all(isinstance(p, str) for p in cached):
            return set(cached)
        logger.warning(f"Discarding unexpected permission cache entry {key}")
        return None
