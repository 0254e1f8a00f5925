"""workspace-authz - workspace-scoped permission resolution.

Decides which actions a user may perform in a workspace, caching answers in a
shared cache and coalescing concurrent identical store lookups. Every failure
degrades to "access denied".
"""

from .__version__ import __version__

from .config import (
    WorkspaceRole,
    PermissionSettings,
    CacheSettings,
    CacheBackend,
    setup_logging,
)

from .core.exceptions import (
    WorkspaceAuthzError,
    ConfigurationError,
    MembershipStoreError,
    CacheError,
    AuthorizationError,
    WorkspaceAccessDeniedError,
    InsufficientPermissionsError,
    InvalidRoleError,
    OwnershipTransferRequiredError,
    create_error_response,
)

from .features.cache import (
    PermissionCache,
    MemoryAdapter,
    RedisAdapter,
    SingleFlight,
    create_cache,
)

from .features.permissions import (
    WorkspaceMember,
    MembershipStore,
    ROLE_PERMISSIONS,
    role_permissions,
    AsyncPGMembershipRepository,
    InMemoryMembershipRepository,
    WorkspaceAuthorizationService,
)

__all__ = [
    "__version__",
    
    # Configuration
    "WorkspaceRole",
    "PermissionSettings",
    "CacheSettings",
    "CacheBackend",
    "setup_logging",
    
    # Exceptions
    "WorkspaceAuthzError",
    "ConfigurationError",
    "MembershipStoreError",
    "CacheError",
    "AuthorizationError",
    "WorkspaceAccessDeniedError",
    "InsufficientPermissionsError",
    "InvalidRoleError",
    "OwnershipTransferRequiredError",
    "create_error_response",
    
    # Cache
    "PermissionCache",
    "MemoryAdapter",
    "RedisAdapter",
    "SingleFlight",
    "create_cache",
    
    # Permissions
    "WorkspaceMember",
    "MembershipStore",
    "ROLE_PERMISSIONS",
    "role_permissions",
    "AsyncPGMembershipRepository",
    "InMemoryMembershipRepository",
    "WorkspaceAuthorizationService",
]
