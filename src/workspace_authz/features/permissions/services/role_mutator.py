"""Role mutator: persists role changes and invalidates dependent cache entries."""

import logging
from typing import Optional, Union

from ..entities import MembershipStore, is_known_role, role_value
from ...cache.services import PermissionCacheService, SingleFlight
from ....config.constants import WorkspaceRole
from ....core.exceptions import InvalidRoleError, MembershipStoreError, OwnershipTransferRequiredError

logger = logging.getLogger(__name__)


class RoleMutator:
    """Changes a member's role.
    
    Only the role column changes; custom grants on the row are an additive
    overlay and survive the change. The owner role is neither granted nor
    taken away here; that is an ownership transfer. The caller must already
    have checked that the actor may assign roles.
    """
    
    def __init__(
        self,
        store: MembershipStore,
        cache: PermissionCacheService,
        single_flight: Optional[SingleFlight] = None
    ):
        self.store = store
        self.cache = cache
        self.single_flight = single_flight
    
    async def update_role(
        self,
        workspace_id: str,
        user_id: str,
        new_role: Union[WorkspaceRole, str],
        actor_id: str
    ) -> None:
        """Persist the new role, then invalidate cached state for the member.
        
        Invalidation runs whether or not the store write succeeded.
        
        Raises:
            InvalidRoleError: If new_role is not a workspace role
            OwnershipTransferRequiredError: If new_role is owner, or the member is the owner
            MembershipStoreError: If the store read or write failed
        """
        if not is_known_role(new_role):
            raise InvalidRoleError(role_value(new_role))
        role = role_value(new_role)
        
        if role == WorkspaceRole.OWNER.value:
            raise OwnershipTransferRequiredError(user_id, workspace_id, "the owner role cannot be assigned")
        
        try:
            current = await self.store.find_active_membership(user_id, workspace_id)
            if current is None:
                current = await self.store.find_owner_membership(user_id, workspace_id)
            if current is not None and role_value(current.role) == WorkspaceRole.OWNER.value:
                raise OwnershipTransferRequiredError(user_id, workspace_id, "the owner's role cannot be changed")
            
            affected = await self.store.update_membership_role(workspace_id, user_id, role)
        except OwnershipTransferRequiredError:
            raise
        except MembershipStoreError as e:
            logger.error(f"Failed to update role for user {user_id} in workspace {workspace_id}: {e}")
            raise
        except Exception as e:
            logger.error(f"Failed to update role for user {user_id} in workspace {workspace_id}: {e}")
            raise MembershipStoreError(f"Failed to update membership role: {e}") from e
        finally:
            await self.invalidate_permission_caches(user_id, workspace_id)
        
        if not affected:
            logger.warning(f"No active membership for user {user_id} in workspace {workspace_id}; role not changed")
            return
        
        logger.info(f"Updated role for user {user_id} in workspace {workspace_id} to {role} by {actor_id}")
    
    async def invalidate_permission_caches(self, user_id: str, workspace_id: str) -> None:
        """Delete every cache entry derived from this membership.
        
        Lookups already in flight for these keys are detached, so later
        callers read the store again, and their pending cache writes are
        dropped.
        """
        keys = self.cache.keys.for_membership_change(workspace_id, user_id)
        
        if self.single_flight is not None:
            for key in keys:
                self.single_flight.forget(key)
        
        deleted = await self.cache.invalidate(keys)
        
        if deleted < len(keys):
            logger.warning(
                f"Invalidated {deleted}/{len(keys)} permission cache entries "
                f"for user {user_id} in workspace {workspace_id}"
            )
        else:
            logger.debug(f"Invalidated permission caches for user {user_id} in workspace {workspace_id}")
