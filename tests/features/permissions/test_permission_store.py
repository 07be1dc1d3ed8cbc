"""Tests for the asyncpg permission store and role repository."""

import asyncio
from datetime import datetime, timezone

import asyncpg
import pytest

from campus_authz.core.exceptions import MalformedPermissionDataError, PermissionStoreError
from campus_authz.features.permissions.entities import PermissionGrant
from campus_authz.features.permissions.repositories import AsyncPGPermissionStore, AsyncPGRoleRepository


def role_row(role_id="r-1", name="teacher"):
    now = datetime.now(timezone.utc)
    return {
        "id": role_id,
        "name": name,
        "description": None,
        "created_at": now,
        "updated_at": now,
    }


class TestAsyncPGPermissionStore:
    """Resolution of flat permission sets."""

    @pytest.fixture
    def store(self, mock_pool):
        return AsyncPGPermissionStore(mock_pool, schema="campus", query_timeout=2.0)

    @pytest.mark.asyncio
    async def test_resolve_returns_flat_set(self, store, mock_connection):
        mock_connection.fetch.return_value = [
            {"resource": "courses", "action": "read"},
            {"resource": "courses", "action": "manage"},
            {"resource": "courses", "action": "read"},
        ]

        grants = await store.resolve("u-1")

        assert grants == frozenset({
            PermissionGrant("courses", "read"),
            PermissionGrant("courses", "manage"),
        })

    @pytest.mark.asyncio
    async def test_resolve_query_uses_schema_and_parameter(self, store, mock_connection):
        await store.resolve("u-1")

        query, principal_id = mock_connection.fetch.call_args[0]
        assert "campus.user_roles" in query
        assert "campus.role_permissions" in query
        assert "$1" in query
        assert principal_id == "u-1"
        assert mock_connection.fetch.call_args[1]["timeout"] == 2.0

    @pytest.mark.asyncio
    async def test_no_roles_resolves_to_empty_set(self, store):
        assert await store.resolve("u-none") == frozenset()

    @pytest.mark.asyncio
    async def test_null_field_is_malformed(self, store, mock_connection):
        mock_connection.fetch.return_value = [{"resource": "courses", "action": None}]
        with pytest.raises(MalformedPermissionDataError):
            await store.resolve("u-1")

    @pytest.mark.asyncio
    async def test_malformed_data_is_a_store_error(self, store, mock_connection):
        mock_connection.fetch.return_value = [{"resource": None, "action": "read"}]
        with pytest.raises(PermissionStoreError):
            await store.resolve("u-1")

    @pytest.mark.asyncio
    async def test_connection_failure(self, store, mock_connection):
        mock_connection.fetch.side_effect = OSError("connection refused")
        with pytest.raises(PermissionStoreError):
            await store.resolve("u-1")

    @pytest.mark.asyncio
    async def test_interface_error(self, store, mock_connection):
        mock_connection.fetch.side_effect = asyncpg.InterfaceError("pool is closing")
        with pytest.raises(PermissionStoreError):
            await store.resolve("u-1")

    @pytest.mark.asyncio
    async def test_query_timeout(self, store, mock_connection):
        mock_connection.fetch.side_effect = asyncio.TimeoutError()
        with pytest.raises(PermissionStoreError):
            await store.resolve("u-1")

    @pytest.mark.asyncio
    async def test_get_user_roles(self, store, mock_connection):
        mock_connection.fetch.return_value = [role_row("r-1", "student"), role_row("r-2", "teacher")]

        roles = await store.get_user_roles("u-1")

        assert [role.name for role in roles] == ["student", "teacher"]
        assert roles[0].id == "r-1"

    def test_invalid_schema_rejected(self, mock_pool):
        with pytest.raises(ValueError):
            AsyncPGPermissionStore(mock_pool, schema="public; DROP TABLE roles")


class TestAsyncPGRoleRepository:
    """Role administration writes."""

    @pytest.fixture
    def repository(self, mock_pool):
        return AsyncPGRoleRepository(mock_pool)

    @pytest.mark.asyncio
    async def test_get_role(self, repository, mock_connection):
        mock_connection.fetchrow.return_value = role_row()
        role = await repository.get_role("r-1")
        assert role.name == "teacher"

    @pytest.mark.asyncio
    async def test_get_missing_role(self, repository):
        assert await repository.get_role("r-404") is None

    @pytest.mark.asyncio
    async def test_get_role_permissions(self, repository, mock_connection):
        mock_connection.fetch.return_value = [{
            "id": "p-1",
            "name": "courses:read",
            "resource": "courses",
            "action": "read",
            "description": None,
            "created_at": None,
            "updated_at": None,
        }]
        permissions = await repository.get_role_permissions("r-1")
        assert permissions[0].to_grant() == PermissionGrant("courses", "read")

    @pytest.mark.asyncio
    async def test_assign_role(self, repository, mock_connection):
        mock_connection.execute.return_value = "INSERT 0 1"
        assert await repository.assign_role("u-1", "r-1") is True

        query, principal_id, role_id = mock_connection.execute.call_args[0]
        assert "public.user_roles" in query
        assert (principal_id, role_id) == ("u-1", "r-1")

    @pytest.mark.asyncio
    async def test_assign_existing_role(self, repository, mock_connection):
        mock_connection.execute.return_value = "INSERT 0 0"
        assert await repository.assign_role("u-1", "r-1") is False

    @pytest.mark.asyncio
    async def test_revoke_role(self, repository, mock_connection):
        mock_connection.execute.return_value = "DELETE 1"
        assert await repository.revoke_role("u-1", "r-1") is True

    @pytest.mark.asyncio
    async def test_add_permissions(self, repository, mock_connection):
        mock_connection.execute.return_value = "INSERT 0 2"
        assert await repository.add_permissions_to_role("r-1", ["p-1", "p-2"]) == 2

    @pytest.mark.asyncio
    async def test_add_no_permissions_skips_query(self, repository, mock_connection):
        assert await repository.add_permissions_to_role("r-1", []) == 0
        mock_connection.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_remove_permissions(self, repository, mock_connection):
        mock_connection.execute.return_value = "DELETE 1"
        assert await repository.remove_permissions_from_role("r-1", ["p-1"]) == 1

    @pytest.mark.asyncio
    async def test_list_role_members(self, repository, mock_connection):
        mock_connection.fetch.return_value = [{"user_id": "u-1"}, {"user_id": "u-2"}]
        assert await repository.list_role_members("r-1") == ["u-1", "u-2"]

    @pytest.mark.asyncio
    async def test_write_failure(self, repository, mock_connection):
        mock_connection.execute.side_effect = OSError("connection reset")
        with pytest.raises(PermissionStoreError):
            await repository.assign_role("u-1", "r-1")

    @pytest.mark.asyncio
    async def test_closed_pool_is_a_store_error(self, repository, mock_connection):
        mock_connection.fetchrow.side_effect = asyncpg.InterfaceError("pool is closed")
        mock_connection.fetch.side_effect = asyncpg.InterfaceError("pool is closed")
        mock_connection.execute.side_effect = asyncpg.InterfaceError("pool is closed")

        with pytest.raises(PermissionStoreError):
            await repository.get_role("r-1")
        with pytest.raises(PermissionStoreError):
            await repository.get_role_permissions("r-1")
        with pytest.raises(PermissionStoreError):
            await repository.list_role_members("r-1")
        with pytest.raises(PermissionStoreError):
            await repository.revoke_role("u-1", "r-1")
