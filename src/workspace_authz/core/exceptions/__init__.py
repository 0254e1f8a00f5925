"""Exception hierarchy for workspace-authz."""

from .base import (
    WorkspaceAuthzError,
    ConfigurationError,
    create_error_response,
)
from .infrastructure import (
    MembershipStoreError,
    CacheError,
    CacheConnectionError,
    CacheSerializationError,
)
from .auth import (
    AuthorizationError,
    WorkspaceAccessDeniedError,
    InsufficientPermissionsError,
    InvalidRoleError,
    OwnershipTransferRequiredError,
)

__all__ = [
    # Base
    "WorkspaceAuthzError",
    "ConfigurationError",
    "create_error_response",
    
    # Infrastructure
    "MembershipStoreError",
    "CacheError",
    "CacheConnectionError",
    "CacheSerializationError",
    
    # Authorization
    "AuthorizationError",
    "WorkspaceAccessDeniedError",
    "InsufficientPermissionsError",
    "InvalidRoleError",
    "OwnershipTransferRequiredError",
]
