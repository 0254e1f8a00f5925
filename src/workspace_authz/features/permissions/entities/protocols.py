"""Protocol interfaces for the membership store.

The store is the system of record for who belongs to which workspace. It is
shared with other writers; the resolvers only read from it, and the mutator
only changes the role column.
"""

from abc import abstractmethod
from typing import List, Optional, Protocol, runtime_checkable

from .member import WorkspaceMember


@runtime_checkable
class MembershipStore(Protocol):
    """Protocol for membership data access operations."""
    
    @abstractmethod
    async def find_active_membership(self, user_id: str, workspace_id: str) -> Optional[WorkspaceMember]:
        """Return the single active membership for (user, workspace), if any."""
        ...
    
    @abstractmethod
    async def find_active_memberships_for_user(self, user_id: str) -> List[WorkspaceMember]:
        """Return every active membership held by the user."""
        ...
    
    @abstractmethod
    async def find_owner_membership(self, user_id: str, workspace_id: str) -> Optional[WorkspaceMember]:
        """Return an owner membership if the user directly owns the workspace, else None."""
        ...
    
    @abstractmethod
    async def find_owned_workspace_ids(self, user_id: str) -> List[str]:
        """Return ids of workspaces whose owner is the user."""
        ...
    
    @abstractmethod
    async def update_membership_role(self, workspace_id: str, user_id: str, role: str) -> int:
        """Set the role on the membership row and return the affected row count."""
        ...
