"""Constants and enums for workspace-authz.

Role tags correspond to the ``workspace_members.role`` column enum; cache key
patterns and TTL defaults are shared by the resolvers and the mutator.
"""

from enum import Enum
from typing import Final


class WorkspaceRole(str, Enum):
    """Workspace roles - corresponds to workspace_members.role."""
    
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"
    VIEWER = "viewer"


class CacheKeys:
    """Cache key patterns for the permission cache."""
    
    MEMBERSHIP: Final[str] = "membership:{workspace_id}:{user_id}"
    USER_PERMISSIONS: Final[str] = "user_permissions:{user_id}:{workspace_id}"
    USER_CONTEXT_PERMISSIONS: Final[str] = "user_context_permissions:{user_id}"


class CacheTTL:
    """Cache TTL values in seconds."""
    
    MEMBERSHIP: Final[int] = 300             # 5 minutes
    MEMBER_PERMISSIONS: Final[int] = 300     # 5 minutes
    NON_MEMBER: Final[int] = 60              # 1 minute
    CONTEXT_PERMISSIONS: Final[int] = 300    # 5 minutes


# Stored in place of a membership record to remember "no active membership"
ABSENT_MEMBERSHIP: Final[str] = "__absent__"
