"""Role permission table for workspace-authz.

Maps each workspace role to its fixed permission set. Admin is owner minus
``workspace:delete``; that gap is policy, not a hierarchy bug.
"""

import logging
from typing import Dict, FrozenSet, Union

from ....config.constants import WorkspaceRole

logger = logging.getLogger(__name__)


OWNER_PERMISSIONS: FrozenSet[str] = frozenset({
    "workspace:read",
    "workspace:update",
    "workspace:delete",
    "workspace:invite",
    "workspace:manage_members",
    "card:create",
    "card:read",
    "card:update",
    "card:delete",
    "connection:create",
    "connection:read",
    "canvas:read",
})

ADMIN_PERMISSIONS: FrozenSet[str] = OWNER_PERMISSIONS - {"workspace:delete"}

MEMBER_PERMISSIONS: FrozenSet[str] = frozenset({
    "workspace:read",
    "card:create",
    "card:read",
    "card:update",
    "card:delete",
    "connection:create",
    "canvas:read",
})

VIEWER_PERMISSIONS: FrozenSet[str] = frozenset({
    "workspace:read",
    "card:read",
    "connection:read",
    "canvas:read",
})

ROLE_PERMISSIONS: Dict[str, FrozenSet[str]] = {
    WorkspaceRole.OWNER.value: OWNER_PERMISSIONS,
    WorkspaceRole.ADMIN.value: ADMIN_PERMISSIONS,
    WorkspaceRole.MEMBER.value: MEMBER_PERMISSIONS,
    WorkspaceRole.VIEWER.value: VIEWER_PERMISSIONS,
}


def role_value(role: Union[WorkspaceRole, str, None]) -> str:
    """Return the plain string tag for a role or role enum."""
    if isinstance(role, WorkspaceRole):
        return role.value
    return "" if role is None else str(role)


def is_known_role(role: Union[WorkspaceRole, str, None]) -> bool:
    return role_value(role) in ROLE_PERMISSIONS


def role_permissions(role: Union[WorkspaceRole, str, None]) -> FrozenSet[str]:
    """Get the default permissions for a role.
    
    Unrecognized roles (corrupted rows, roles not wired up yet) get the viewer
    set rather than an error or an empty set. The fallback is logged at
    WARNING so the bad value surfaces outside the request path.
    """
    permissions = ROLE_PERMISSIONS.get(role_value(role))
    if permissions is None:
        logger.warning(f"Unknown workspace role {role!r}, falling back to viewer permissions")
        return VIEWER_PERMISSIONS
    return permissions
