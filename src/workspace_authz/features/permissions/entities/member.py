"""Workspace member entity for workspace-authz."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Set

from .role import role_permissions
from ....config.constants import WorkspaceRole


def _as_permission_set(values: Optional[Iterable[str]]) -> FrozenSet[str]:
    if not values:
        return frozenset()
    return frozenset(str(value) for value in values if value)


@dataclass(frozen=True)
class WorkspaceMember:
    """One membership row: a user's role and custom grants in a workspace.
    
    Immutable so a record resolved once can be handed to many concurrent
    callers without copying.
    """
    
    id: str
    workspace_id: str
    user_id: str
    role: str
    custom_permissions: FrozenSet[str] = field(default_factory=frozenset)
    joined_at: Optional[datetime] = None
    is_active: bool = True
    
    def __post_init__(self):
        # Accept lists from callers and rows; keep the stored value hashable
        object.__setattr__(self, "custom_permissions", _as_permission_set(self.custom_permissions))
    
    def permission_snapshot(self) -> Set[str]:
        """Role permissions plus custom grants, deduplicated."""
        return set(role_permissions(self.role) | self.custom_permissions)
    
    def has_permission(self, permission: str) -> bool:
        if permission in role_permissions(self.role):
            return True
        return permission in self.custom_permissions
    
    @classmethod
    def owner_of(cls, workspace_id: str, user_id: str, joined_at: Optional[datetime] = None) -> "WorkspaceMember":
        """Membership for a workspace owner who has no membership row."""
        return cls(
            id=f"owner-{workspace_id}-{user_id}",
            workspace_id=str(workspace_id),
            user_id=str(user_id),
            role=WorkspaceRole.OWNER.value,
            joined_at=joined_at,
        )
    
    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "WorkspaceMember":
        """Build a member from a ``workspace_members`` row."""
        return cls(
            id=str(row["id"]),
            workspace_id=str(row["workspace_id"]),
            user_id=str(row["user_id"]),
            role=row["role"],
            custom_permissions=row["permissions"],
            joined_at=row["joined_at"],
            is_active=bool(row["is_active"]),
        )
    
    def to_cache_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "workspace_id": self.workspace_id,
            "user_id": self.user_id,
            "role": self.role,
            "custom_permissions": sorted(self.custom_permissions),
            "joined_at": self.joined_at.isoformat() if self.joined_at else None,
            "is_active": self.is_active,
        }
    
    @classmethod
    def from_cache_dict(cls, data: Mapping[str, Any]) -> "WorkspaceMember":
        """Rebuild a member from its cached document.
        
        Raises:
            KeyError, TypeError, ValueError: If the document is malformed
        """
        joined_at = data.get("joined_at")
        return cls(
            id=str(data["id"]),
            workspace_id=str(data["workspace_id"]),
            user_id=str(data["user_id"]),
            role=data["role"],
            custom_permissions=data.get("custom_permissions") or [],
            joined_at=datetime.fromisoformat(joined_at) if joined_at else None,
            is_active=bool(data["is_active"]),
        )
