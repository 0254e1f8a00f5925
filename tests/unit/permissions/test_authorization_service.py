"""End-to-end tests for WorkspaceAuthorizationService over the in-memory store and cache."""

import asyncio
import logging

import pytest

from workspace_authz.config.settings import PermissionSettings
from workspace_authz.core.exceptions import OwnershipTransferRequiredError
from workspace_authz.features.permissions.entities import (
    ADMIN_PERMISSIONS,
    MEMBER_PERMISSIONS,
    OWNER_PERMISSIONS,
    VIEWER_PERMISSIONS,
)
from workspace_authz.features.permissions.services import WorkspaceAuthorizationService


ALL_KNOWN_PERMISSIONS = sorted(OWNER_PERMISSIONS | {"card:admin", "billing:read"})


class TestResolution:
    
    @pytest.mark.asyncio
    async def test_has_permission_agrees_with_get_permissions(self, service, repository, user_id, workspace_id):
        repository.add_member(workspace_id, user_id, "member", custom_permissions=["card:admin"])
        
        granted = await service.get_permissions(user_id, workspace_id)
        
        for permission in ALL_KNOWN_PERMISSIONS:
            assert await service.has_permission(user_id, workspace_id, permission) == (permission in granted)
    
    @pytest.mark.asyncio
    async def test_workspaces_are_isolated(self, service, repository, user_id, workspace_id, other_workspace_id):
        repository.add_member(workspace_id, user_id, "owner")
        
        assert await service.get_permissions(user_id, other_workspace_id) == set()
        assert await service.has_permission(user_id, other_workspace_id, "workspace:read") is False
        assert await service.get_role(user_id, other_workspace_id) is None
    
    @pytest.mark.asyncio
    async def test_viewer_and_admin_sets(self, service, repository, user_id, workspace_id, other_workspace_id):
        repository.add_member(workspace_id, user_id, "viewer")
        repository.add_member(other_workspace_id, user_id, "admin")
        
        assert await service.get_permissions(user_id, workspace_id) == {
            "workspace:read", "card:read", "connection:read", "canvas:read"
        }
        assert await service.get_permissions(user_id, other_workspace_id) == ADMIN_PERMISSIONS
        assert await service.has_permission(user_id, other_workspace_id, "workspace:delete") is False
    
    @pytest.mark.asyncio
    async def test_second_call_needs_no_store_query(self, service, repository, store, user_id, workspace_id):
        repository.add_member(workspace_id, user_id, "member")
        
        first = await service.get_permissions(user_id, workspace_id)
        second = await service.get_permissions(user_id, workspace_id)
        
        assert first == second == MEMBER_PERMISSIONS
        assert store.calls["find_active_membership"] == 1
    
    @pytest.mark.asyncio
    async def test_inactive_member_has_nothing(self, service, repository, user_id, workspace_id):
        repository.add_member(workspace_id, user_id, "owner", is_active=False)
        
        assert await service.get_permissions(user_id, workspace_id) == set()
        assert await service.has_permission(user_id, workspace_id, "workspace:read") is False
        assert await service.get_role(user_id, workspace_id) is None
        assert await service.get_member(user_id, workspace_id) is None
    
    @pytest.mark.asyncio
    async def test_custom_grant_extends_viewer(self, service, repository, user_id, workspace_id):
        repository.add_member(workspace_id, user_id, "viewer", custom_permissions=["card:delete"])
        
        assert await service.has_permission(user_id, workspace_id, "card:delete") is True
    
    @pytest.mark.asyncio
    async def test_unknown_role_resolves_to_viewer(self, service, repository, user_id, workspace_id, caplog):
        repository.add_member(workspace_id, user_id, "superuser")
        
        with caplog.at_level(logging.WARNING, logger="workspace_authz"):
            permissions = await service.get_permissions(user_id, workspace_id)
        
        assert permissions == VIEWER_PERMISSIONS
        assert any(record.levelno == logging.WARNING for record in caplog.records)
    
    @pytest.mark.asyncio
    async def test_context_permissions(self, service, repository, user_id, workspace_id, other_workspace_id):
        repository.add_member(workspace_id, user_id, "member")
        repository.add_workspace(other_workspace_id, user_id)
        
        assert await service.get_context_permissions(user_id) == {
            workspace_id: MEMBER_PERMISSIONS,
            other_workspace_id: OWNER_PERMISSIONS,
        }


class TestConcurrency:
    
    @pytest.mark.asyncio
    async def test_cold_burst_hits_store_at_most_twice(
        self, repository, slow_store, memory_cache, settings, user_id, workspace_id
    ):
        repository.add_member(workspace_id, user_id, "member")
        service = WorkspaceAuthorizationService(store=slow_store, cache=memory_cache, settings=settings)
        
        results = await asyncio.gather(*(service.get_permissions(user_id, workspace_id) for _ in range(10)))
        
        assert all(result == MEMBER_PERMISSIONS for result in results)
        assert slow_store.calls["find_active_membership"] <= 2
    
    @pytest.mark.asyncio
    async def test_mixed_checks_share_one_lookup(
        self, repository, slow_store, memory_cache, settings, user_id, workspace_id
    ):
        repository.add_member(workspace_id, user_id, "viewer")
        service = WorkspaceAuthorizationService(store=slow_store, cache=memory_cache, settings=settings)
        
        await asyncio.gather(
            service.has_permission(user_id, workspace_id, "card:read"),
            service.get_role(user_id, workspace_id),
            service.get_permissions(user_id, workspace_id),
            service.has_workspace_access(user_id, workspace_id),
        )
        
        assert slow_store.calls["find_active_membership"] == 1
    
    @pytest.mark.asyncio
    async def test_timed_out_caller_leaves_others_unaffected(
        self, repository, slow_store, memory_cache, settings, user_id, workspace_id
    ):
        repository.add_member(workspace_id, user_id, "admin")
        service = WorkspaceAuthorizationService(store=slow_store, cache=memory_cache, settings=settings)
        
        impatient = asyncio.wait_for(service.get_role(user_id, workspace_id), timeout=0.01)
        patient = service.get_role(user_id, workspace_id)
        
        results = await asyncio.gather(impatient, patient, return_exceptions=True)
        
        assert isinstance(results[0], asyncio.TimeoutError)
        assert results[1] == "admin"


class TestRoleChanges:
    
    @pytest.mark.asyncio
    async def test_update_role_is_visible_immediately(self, service, repository, user_id, workspace_id):
        repository.add_member(workspace_id, user_id, "viewer")
        assert await service.get_permissions(user_id, workspace_id) == VIEWER_PERMISSIONS
        assert await service.get_context_permissions(user_id) == {workspace_id: VIEWER_PERMISSIONS}
        
        await service.update_role(workspace_id, user_id, "admin", actor_id="actor-1")
        
        assert await service.get_permissions(user_id, workspace_id) == ADMIN_PERMISSIONS
        assert await service.get_role(user_id, workspace_id) == "admin"
        assert await service.get_context_permissions(user_id) == {workspace_id: ADMIN_PERMISSIONS}
    
    @pytest.mark.asyncio
    async def test_invalidate_after_external_deactivation(self, service, repository, user_id, workspace_id):
        repository.add_member(workspace_id, user_id, "member")
        assert await service.has_permission(user_id, workspace_id, "card:create") is True
        
        repository.deactivate_member(workspace_id, user_id)
        await service.invalidate_permission_caches(user_id, workspace_id)
        
        assert await service.has_permission(user_id, workspace_id, "card:create") is False
        assert await service.get_permissions(user_id, workspace_id) == set()


class TestDegradedCache:
    
    @pytest.mark.asyncio
    async def test_cache_outage_serves_from_store(self, store, repository, broken_cache, settings, user_id, workspace_id):
        repository.add_member(workspace_id, user_id, "admin")
        service = WorkspaceAuthorizationService(store=store, cache=broken_cache, settings=settings)
        
        assert await service.get_permissions(user_id, workspace_id) == ADMIN_PERMISSIONS
        assert await service.has_permission(user_id, workspace_id, "workspace:manage_members") is True
        
        await service.update_role(workspace_id, user_id, "member", actor_id="actor-1")
        assert await service.get_permissions(user_id, workspace_id) == MEMBER_PERMISSIONS
    
    @pytest.mark.asyncio
    async def test_key_prefix_namespaces_entries(self, store, repository, memory_cache, user_id, workspace_id):
        repository.add_member(workspace_id, user_id, "viewer")
        service = WorkspaceAuthorizationService(
            store=store, cache=memory_cache, settings=PermissionSettings(key_prefix="authz")
        )
        
        await service.get_permissions(user_id, workspace_id)
        
        assert await memory_cache.get(f"authz:user_permissions:{user_id}:{workspace_id}") == sorted(VIEWER_PERMISSIONS)
        assert await memory_cache.get(f"user_permissions:{user_id}:{workspace_id}") is None


class TestRoleChangeDuringRead:
    """A read that loaded the store before a role change must not outlive it."""
    
    @pytest.mark.asyncio
    async def test_promotion_is_not_undone_by_earlier_read(
        self, repository, held_store, memory_cache, settings, user_id, workspace_id
    ):
        repository.add_member(workspace_id, user_id, "viewer")
        service = WorkspaceAuthorizationService(store=held_store, cache=memory_cache, settings=settings)
        
        earlier = asyncio.create_task(service.get_permissions(user_id, workspace_id))
        await held_store.holding.wait()
        
        await service.update_role(workspace_id, user_id, "admin", actor_id="actor-1")
        
        after = await asyncio.wait_for(service.get_permissions(user_id, workspace_id), timeout=1)
        assert after == ADMIN_PERMISSIONS
        
        held_store.release.set()
        assert await earlier == VIEWER_PERMISSIONS
        
        assert await service.get_permissions(user_id, workspace_id) == ADMIN_PERMISSIONS
        assert await service.get_role(user_id, workspace_id) == "admin"
        assert await memory_cache.get(f"user_permissions:{user_id}:{workspace_id}") == sorted(ADMIN_PERMISSIONS)
    
    @pytest.mark.asyncio
    async def test_demotion_is_not_undone_by_earlier_read(
        self, repository, held_store, memory_cache, settings, user_id, workspace_id
    ):
        repository.add_member(workspace_id, user_id, "admin")
        service = WorkspaceAuthorizationService(store=held_store, cache=memory_cache, settings=settings)
        
        earlier = asyncio.create_task(service.has_permission(user_id, workspace_id, "workspace:manage_members"))
        await held_store.holding.wait()
        
        await service.update_role(workspace_id, user_id, "viewer", actor_id="actor-1")
        held_store.release.set()
        assert await earlier is True
        
        assert await service.has_permission(user_id, workspace_id, "workspace:manage_members") is False
        assert await service.get_permissions(user_id, workspace_id) == VIEWER_PERMISSIONS
    
    @pytest.mark.asyncio
    async def test_context_map_is_not_undone_by_earlier_read(
        self, repository, held_store, memory_cache, settings, user_id, workspace_id
    ):
        repository.add_member(workspace_id, user_id, "viewer")
        held_store.held_method = "find_active_memberships_for_user"
        service = WorkspaceAuthorizationService(store=held_store, cache=memory_cache, settings=settings)
        
        earlier = asyncio.create_task(service.get_context_permissions(user_id))
        await held_store.holding.wait()
        
        await service.update_role(workspace_id, user_id, "admin", actor_id="actor-1")
        
        after = await asyncio.wait_for(service.get_context_permissions(user_id), timeout=1)
        assert after == {workspace_id: ADMIN_PERMISSIONS}
        
        held_store.release.set()
        assert await earlier == {workspace_id: VIEWER_PERMISSIONS}
        assert await service.get_context_permissions(user_id) == {workspace_id: ADMIN_PERMISSIONS}


class TestDirectOwnership:
    """Owners recorded only on the workspace get the owner role everywhere."""
    
    @pytest.mark.asyncio
    async def test_owner_without_membership_row(self, service, repository, user_id, workspace_id):
        repository.add_workspace(workspace_id, user_id)
        
        assert await service.get_permissions(user_id, workspace_id) == OWNER_PERMISSIONS
        assert await service.has_permission(user_id, workspace_id, "workspace:delete") is True
        assert await service.get_role(user_id, workspace_id) == "owner"
        assert await service.has_workspace_access(user_id, workspace_id) is True
        
        member = await service.require_permission(user_id, workspace_id, "workspace:delete")
        assert member.id == f"owner-{workspace_id}-{user_id}"
    
    @pytest.mark.asyncio
    async def test_context_map_agrees_with_workspace_checks(self, service, repository, user_id, workspace_id):
        repository.add_workspace(workspace_id, user_id)
        
        context = await service.get_context_permissions(user_id)
        
        assert context[workspace_id] == await service.get_permissions(user_id, workspace_id)
    
    @pytest.mark.asyncio
    async def test_membership_row_wins_over_ownership(self, service, repository, user_id, workspace_id):
        repository.add_workspace(workspace_id, user_id)
        repository.add_member(workspace_id, user_id, "viewer")
        
        assert await service.get_permissions(user_id, workspace_id) == VIEWER_PERMISSIONS
        assert (await service.get_context_permissions(user_id))[workspace_id] == VIEWER_PERMISSIONS
    
    @pytest.mark.asyncio
    async def test_other_users_gain_nothing_from_ownership(
        self, service, repository, user_id, workspace_id
    ):
        repository.add_workspace(workspace_id, "someone-else")
        
        assert await service.get_permissions(user_id, workspace_id) == set()
        assert await service.get_role(user_id, workspace_id) is None
    
    @pytest.mark.asyncio
    async def test_owner_role_cannot_be_changed(self, service, repository, user_id, workspace_id):
        repository.add_workspace(workspace_id, user_id)
        
        with pytest.raises(OwnershipTransferRequiredError):
            await service.update_role(workspace_id, user_id, "admin", actor_id="actor-1")
        
        assert await service.get_role(user_id, workspace_id) == "owner"
