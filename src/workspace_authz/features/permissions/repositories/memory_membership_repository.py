"""In-memory membership repository for tests and single-process use."""

import uuid
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from ..entities import WorkspaceMember


class InMemoryMembershipRepository:
    """MembershipStore over plain dicts.
    
    Keeps at most one record per (user, workspace), mirroring the unique
    constraint on ``workspace_members``.
    """
    
    def __init__(self):
        self._members: Dict[Tuple[str, str], WorkspaceMember] = {}
        self._owners: Dict[str, str] = {}
        self._created_at: Dict[str, datetime] = {}
    
    def add_member(
        self,
        workspace_id: str,
        user_id: str,
        role: str,
        custom_permissions: Optional[Iterable[str]] = None,
        is_active: bool = True
    ) -> WorkspaceMember:
        member = WorkspaceMember(
            id=str(uuid.uuid4()),
            workspace_id=workspace_id,
            user_id=user_id,
            role=role,
            custom_permissions=frozenset(custom_permissions or ()),
            joined_at=datetime.now(timezone.utc),
            is_active=is_active,
        )
        self._members[(user_id, workspace_id)] = member
        return member
    
    def add_workspace(self, workspace_id: str, owner_id: str) -> None:
        self._owners[workspace_id] = owner_id
        self._created_at[workspace_id] = datetime.now(timezone.utc)
    
    def deactivate_member(self, workspace_id: str, user_id: str) -> bool:
        member = self._members.get((user_id, workspace_id))
        if member is None:
            return False
        self._replace(member, is_active=False)
        return True
    
    def _replace(self, member: WorkspaceMember, **changes) -> WorkspaceMember:
        values = {
            "id": member.id,
            "workspace_id": member.workspace_id,
            "user_id": member.user_id,
            "role": member.role,
            "custom_permissions": member.custom_permissions,
            "joined_at": member.joined_at,
            "is_active": member.is_active,
        }
        values.update(changes)
        updated = WorkspaceMember(**values)
        self._members[(member.user_id, member.workspace_id)] = updated
        return updated
    
    async def find_active_membership(self, user_id: str, workspace_id: str) -> Optional[WorkspaceMember]:
        member = self._members.get((user_id, workspace_id))
        if member is None or not member.is_active:
            return None
        return member
    
    async def find_active_memberships_for_user(self, user_id: str) -> List[WorkspaceMember]:
        return [
            member for (member_user_id, _), member in self._members.items()
            if member_user_id == user_id and member.is_active
        ]
    
    async def find_owner_membership(self, user_id: str, workspace_id: str) -> Optional[WorkspaceMember]:
        if self._owners.get(workspace_id) != user_id:
            return None
        return WorkspaceMember.owner_of(workspace_id, user_id, joined_at=self._created_at.get(workspace_id))
    
    async def find_owned_workspace_ids(self, user_id: str) -> List[str]:
        return [workspace_id for workspace_id, owner_id in self._owners.items() if owner_id == user_id]
    
    async def update_membership_role(self, workspace_id: str, user_id: str, role: str) -> int:
        member = self._members.get((user_id, workspace_id))
        if member is None or not member.is_active:
            return 0
        self._replace(member, role=role)
        return 1
