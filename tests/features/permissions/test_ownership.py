"""Tests for the ownership registry."""

import pytest

from campus_authz.core.exceptions import OwnershipCheckError
from campus_authz.features.permissions.entities import OwnershipChecker
from campus_authz.features.permissions.services import OwnershipRegistry


class TestOwnershipRegistry:

    def test_satisfies_protocol(self):
        assert isinstance(OwnershipRegistry(), OwnershipChecker)

    @pytest.mark.asyncio
    async def test_unregistered_resource_is_not_owned(self):
        registry = OwnershipRegistry()
        assert await registry.check("u-1", "submissions", "s-1") is False

    @pytest.mark.asyncio
    async def test_sync_rule(self):
        registry = OwnershipRegistry()
        registry.register("submissions", lambda principal_id, instance_id: instance_id == "s-1")

        assert await registry.check("u-1", "submissions", "s-1") is True
        assert await registry.check("u-1", "submissions", "s-2") is False

    @pytest.mark.asyncio
    async def test_async_rule(self):
        owners = {"s-1": "u-1"}

        async def submission_owner(principal_id, instance_id):
            return owners.get(instance_id) == principal_id

        registry = OwnershipRegistry({"submissions": submission_owner})

        assert await registry.check("u-1", "submissions", "s-1") is True
        assert await registry.check("u-2", "submissions", "s-1") is False

    @pytest.mark.asyncio
    async def test_failing_rule_is_not_owned(self):
        def broken(principal_id, instance_id):
            raise OwnershipCheckError("owner lookup unavailable")

        registry = OwnershipRegistry({"submissions": broken})
        assert await registry.check("u-1", "submissions", "s-1") is False

    @pytest.mark.asyncio
    async def test_truthy_result_must_be_true(self):
        registry = OwnershipRegistry({"submissions": lambda p, i: 1})
        assert await registry.check("u-1", "submissions", "s-1") is False

    @pytest.mark.asyncio
    async def test_unregister(self):
        registry = OwnershipRegistry({"submissions": lambda p, i: True})
        assert registry.is_registered("submissions")

        registry.unregister("submissions")

        assert not registry.is_registered("submissions")
        assert await registry.check("u-1", "submissions", "s-1") is False
