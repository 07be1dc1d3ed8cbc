"""Tests for the wiring factory."""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from campus_authz.config import AuthzSettings
from campus_authz.core.exceptions import ConfigurationError
from campus_authz.features.permissions import factory
from campus_authz.features.permissions.entities import HierarchyTable, MatchRule, Principal
from campus_authz.features.permissions.repositories import (
    AsyncPGPermissionStore,
    InMemoryPermissionCache,
    RedisPermissionCache,
)


@pytest.fixture
def settings():
    return AuthzSettings(
        _env_file=None,
        redis_url=None,
        cache_ttl_permissions=60,
        bypass_role_labels=["registrar"],
    )


class TestCreatePermissionCache:

    def test_in_memory_without_redis(self, settings):
        assert isinstance(factory.create_permission_cache(settings), InMemoryPermissionCache)

    def test_redis_client_given(self, settings, mock_redis):
        cache = factory.create_permission_cache(settings, redis_client=mock_redis)
        assert isinstance(cache, RedisPermissionCache)

    def test_redis_from_settings(self):
        settings = AuthzSettings(_env_file=None, redis_url="redis://localhost:6379/0", cache_key_prefix="campus:")
        with patch.object(factory.redis, "from_url", return_value=MagicMock()) as from_url:
            cache = factory.create_permission_cache(settings)

        from_url.assert_called_once_with("redis://localhost:6379/0", decode_responses=False)
        assert cache.build_key("u-1") == "campus:permissions:u-1"


class TestCreateEnforcementGate:

    def test_requires_store_or_pool(self, settings):
        with pytest.raises(ConfigurationError):
            factory.create_enforcement_gate(settings)

    def test_builds_asyncpg_store_from_pool(self, settings, mock_pool):
        gate = factory.create_enforcement_gate(settings, pool=mock_pool)

        assert isinstance(gate.store, AsyncPGPermissionStore)
        assert isinstance(gate.cache, InMemoryPermissionCache)
        assert gate.cache_ttl_seconds == 60

    @pytest.mark.asyncio
    async def test_configured_bypass_labels(self, settings, permission_store):
        gate = factory.create_enforcement_gate(settings, store=permission_store)

        registrar = await gate.authorize(Principal(id="u-1", role_label="registrar"), "courses", "delete")
        admin = await gate.authorize(Principal(id="u-2", role_label="admin"), "courses", "delete")

        assert registrar.rule == MatchRule.BYPASS
        assert not admin

    def test_custom_hierarchy(self, settings, permission_store):
        hierarchy = HierarchyTable({"publish": ["read"]})
        gate = factory.create_enforcement_gate(settings, store=permission_store, hierarchy=hierarchy)
        assert gate.engine.hierarchy is hierarchy


class TestCreateDatabasePool:

    @pytest.mark.asyncio
    async def test_requires_database_url(self, settings):
        with pytest.raises(ConfigurationError):
            await factory.create_database_pool(settings)

    @pytest.mark.asyncio
    async def test_strips_driver_suffix(self):
        settings = AuthzSettings(_env_file=None, database_url="postgresql+asyncpg://u:p@db/campus")
        with patch.object(factory.asyncpg, "create_pool", new=AsyncMock(return_value=MagicMock())) as create_pool:
            await factory.create_database_pool(settings)

        assert create_pool.await_args[0][0] == "postgresql://u:p@db/campus"
