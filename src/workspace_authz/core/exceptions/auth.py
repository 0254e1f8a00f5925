"""Authorization exceptions for workspace-authz."""

from typing import List, Optional

from .base import WorkspaceAuthzError


class AuthorizationError(WorkspaceAuthzError):
    """Base class for authorization-related errors."""
    pass


class WorkspaceAccessDeniedError(AuthorizationError):
    """Raised when the user is not an active member of the workspace."""
    
    def __init__(self, user_id: str, workspace_id: str, permission: Optional[str] = None):
        super().__init__(
            "Not a member of this workspace",
            error_code="WORKSPACE_ACCESS_DENIED",
            details={
                "user_id": user_id,
                "workspace_id": workspace_id,
                "required_permission": permission,
            },
        )


class InsufficientPermissionsError(AuthorizationError):
    """Raised when a member lacks the permission required for an action."""
    
    def __init__(
        self,
        user_id: str,
        workspace_id: str,
        permission: str,
        granted: Optional[List[str]] = None
    ):
        super().__init__(
            f"Insufficient permissions for {permission}",
            error_code="INSUFFICIENT_PERMISSIONS",
            details={
                "user_id": user_id,
                "workspace_id": workspace_id,
                "required_permission": permission,
                "granted_permissions": sorted(granted or []),
            },
        )


class InvalidRoleError(AuthorizationError):
    """Raised when a role outside the closed workspace role set is assigned."""
    
    def __init__(self, role: str):
        super().__init__(
            f"Unknown workspace role: {role!r}",
            error_code="INVALID_ROLE",
            details={"role": role},
        )


class OwnershipTransferRequiredError(AuthorizationError):
    """Raised when a role update would grant the owner role or change an owner's role."""
    
    def __init__(self, user_id: str, workspace_id: str, reason: str):
        super().__init__(
            f"Ownership can only change through an ownership transfer: {reason}",
            error_code="OWNERSHIP_TRANSFER_REQUIRED",
            details={
                "user_id": user_id,
                "workspace_id": workspace_id,
                "reason": reason,
            },
        )
