"""Permissions feature for workspace-authz.

- entities/: role table, membership entity and store protocol
- repositories/: asyncpg and in-memory membership stores
- services/: resolvers, context aggregation, role mutation and the facade
"""

from .entities import (
    WorkspaceMember,
    MembershipStore,
    ROLE_PERMISSIONS,
    OWNER_PERMISSIONS,
    ADMIN_PERMISSIONS,
    MEMBER_PERMISSIONS,
    VIEWER_PERMISSIONS,
    role_permissions,
)
from .repositories import AsyncPGMembershipRepository, InMemoryMembershipRepository
from .services import (
    MembershipResolver,
    PermissionResolver,
    ContextAggregator,
    RoleMutator,
    WorkspaceAuthorizationService,
)

__all__ = [
    # Entities
    "WorkspaceMember",
    "MembershipStore",
    "ROLE_PERMISSIONS",
    "OWNER_PERMISSIONS",
    "ADMIN_PERMISSIONS",
    "MEMBER_PERMISSIONS",
    "VIEWER_PERMISSIONS",
    "role_permissions",
    
    # Repositories
    "AsyncPGMembershipRepository",
    "InMemoryMembershipRepository",
    
    # Services
    "MembershipResolver",
    "PermissionResolver",
    "ContextAggregator",
    "RoleMutator",
    "WorkspaceAuthorizationService",
]
