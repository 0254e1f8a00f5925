"""AsyncPG-based membership repository implementation.

Concrete implementation of the MembershipStore protocol over the
``workspace_members`` and ``workspaces`` tables.
"""

import logging
import re
from typing import List, Optional

import asyncpg

from ....core.exceptions import MembershipStoreError
from ..entities import WorkspaceMember


logger = logging.getLogger(__name__)

_SCHEMA_NAME = re.compile(r"^[a-z_][a-z0-9_]*$")


class AsyncPGMembershipRepository:
    """AsyncPG implementation of MembershipStore protocol."""
    
    def __init__(self, pool: asyncpg.Pool, schema: str = "public"):
        """Initialize with a connection pool and the schema holding the tables."""
        self.pool = pool
        self.schema = self._validate_schema_name(schema)
    
    def _validate_schema_name(self, schema_name: str) -> str:
        """Validate schema name to prevent SQL injection."""
        if _SCHEMA_NAME.match(schema_name or ""):
            return schema_name
        raise ValueError(f"Invalid schema name: {schema_name}")
    
    async def find_active_membership(self, user_id: str, workspace_id: str) -> Optional[WorkspaceMember]:
        """Get the active membership for (user, workspace)."""
        query = f"""
            SELECT id, workspace_id, user_id, role, permissions, joined_at, is_active
            FROM {self.schema}.workspace_members
            WHERE user_id = $1 AND workspace_id = $2 AND is_active = true
            LIMIT 1
        """
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(query, user_id, workspace_id)
        except (asyncpg.PostgresError, OSError) as e:
            logger.error(f"Failed to get membership for user {user_id} in workspace {workspace_id}: {e}")
            raise MembershipStoreError(f"Failed to retrieve membership: {e}")
        
        return WorkspaceMember.from_row(row) if row else None
    
    async def find_active_memberships_for_user(self, user_id: str) -> List[WorkspaceMember]:
        """Get every active membership held by the user."""
        query = f"""
            SELECT id, workspace_id, user_id, role, permissions, joined_at, is_active
            FROM {self.schema}.workspace_members
            WHERE user_id = $1 AND is_active = true
            ORDER BY joined_at ASC
        """
        try:
            async with self.pool.acquire() as conn:
                rows = await conn.fetch(query, user_id)
        except (asyncpg.PostgresError, OSError) as e:
            logger.error(f"Failed to list memberships for user {user_id}: {e}")
            raise MembershipStoreError(f"Failed to list memberships: {e}")
        
        return [WorkspaceMember.from_row(row) for row in rows]
    
    async def find_owner_membership(self, user_id: str, workspace_id: str) -> Optional[WorkspaceMember]:
        """Get a synthesized owner membership when the user owns the workspace."""
        query = f"""
            SELECT id, created_at
            FROM {self.schema}.workspaces
            WHERE id = $1 AND owner_id = $2
            LIMIT 1
        """
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(query, workspace_id, user_id)
        except (asyncpg.PostgresError, OSError) as e:
            logger.error(f"Failed to check ownership of workspace {workspace_id} for user {user_id}: {e}")
            raise MembershipStoreError(f"Failed to check workspace ownership: {e}")
        
        if not row:
            return None
        return WorkspaceMember.owner_of(str(row["id"]), user_id, joined_at=row["created_at"])
    
    async def find_owned_workspace_ids(self, user_id: str) -> List[str]:
        """Get ids of workspaces owned by the user."""
        query = f"""
            SELECT id
            FROM {self.schema}.workspaces
            WHERE owner_id = $1
        """
        try:
            async with self.pool.acquire() as conn:
                rows = await conn.fetch(query, user_id)
        except (asyncpg.PostgresError, OSError) as e:
            logger.error(f"Failed to list owned workspaces for user {user_id}: {e}")
            raise MembershipStoreError(f"Failed to list owned workspaces: {e}")
        
        return [str(row["id"]) for row in rows]
    
    async def update_membership_role(self, workspace_id: str, user_id: str, role: str) -> int:
        """Set the role on the active membership row; custom grants are untouched."""
        query = f"""
            UPDATE {self.schema}.workspace_members
            SET role = $3, updated_at = NOW()
            WHERE workspace_id = $1 AND user_id = $2 AND is_active = true
        """
        try:
            async with self.pool.acquire() as conn:
                status = await conn.execute(query, workspace_id, user_id, role)
        except (asyncpg.PostgresError, OSError) as e:
            logger.error(f"Failed to update role for user {user_id} in workspace {workspace_id}: {e}")
            raise MembershipStoreError(f"Failed to update membership role: {e}")
        
        # asyncpg returns the command tag, e.g. "UPDATE 1"
        return int(status.split()[-1]) if status else 0
