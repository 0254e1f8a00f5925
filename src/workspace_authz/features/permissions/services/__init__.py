"""Permission services package."""

from .membership_resolver import MembershipResolver
from .permission_resolver import PermissionResolver
from .context_aggregator import ContextAggregator
from .role_mutator import RoleMutator
from .authorization_service import WorkspaceAuthorizationService

__all__ = [
    "MembershipResolver",
    "PermissionResolver",
    "ContextAggregator",
    "RoleMutator",
    "WorkspaceAuthorizationService",
]
