"""Permission entities package.

Role table, membership entity and the store protocol.
"""

from .role import (
    OWNER_PERMISSIONS,
    ADMIN_PERMISSIONS,
    MEMBER_PERMISSIONS,
    VIEWER_PERMISSIONS,
    ROLE_PERMISSIONS,
    role_permissions,
    role_value,
    is_known_role,
)
from .member import WorkspaceMember
from .protocols import MembershipStore

__all__ = [
    # Role table
    "OWNER_PERMISSIONS",
    "ADMIN_PERMISSIONS",
    "MEMBER_PERMISSIONS",
    "VIEWER_PERMISSIONS",
    "ROLE_PERMISSIONS",
    "role_permissions",
    "role_value",
    "is_known_role",
    
    # Entities
    "WorkspaceMember",
    
    # Protocols
    "MembershipStore",
]
