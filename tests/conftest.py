"""Pytest configuration and fixtures for campus-authz tests."""

import pytest
from typing import Dict, Iterable, List, Optional, Tuple
from unittest.mock import AsyncMock, MagicMock

from campus_authz.features.permissions.entities import PermissionGrant, Principal, Role
from campus_authz.features.permissions.repositories import InMemoryPermissionCache
from campus_authz.features.permissions.services import DecisionEngine, EnforcementGate


class CountingPermissionStore:
    """In-memory permission store that counts its queries."""

    def __init__(
        self,
        grants: Optional[Dict[str, Iterable[Tuple[str, str]]]] = None,
        roles: Optional[Dict[str, List[str]]] = None
    ):
        self.grants = {
            principal_id: frozenset(PermissionGrant(resource, action) for resource, action in pairs)
            for principal_id, pairs in (grants or {}).items()
        }
        self.roles = dict(roles or {})
        self.resolve_calls = 0
        self.role_calls = 0

    def set_grants(self, principal_id: str, pairs: Iterable[Tuple[str, str]]) -> None:
        self.grants[principal_id] = frozenset(PermissionGrant(r, a) for r, a in pairs)

    async def resolve(self, principal_id: str):
        self.resolve_calls += 1
        return self.grants.get(principal_id, frozenset())

    async def get_user_roles(self, principal_id: str):
        self.role_calls += 1
        return [
            Role(id=f"role-{name}", name=name)
            for name in self.roles.get(principal_id, [])
        ]


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def permission_store():
    """Store with one principal per matching rule."""
    return CountingPermissionStore(
        grants={
            "u-reader": [("courses", "read")],
            "u-manager": [("courses", "manage")],
            "u-deleter": [("courses", "delete")],
            "u-root": [("*", "*")],
            "u-auditor": [("*", "read")],
            "u-grades": [("grades", "*")],
        },
        roles={
            "u-reader": ["student"],
            "u-manager": ["teacher", "staff"],
        },
    )


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def memory_cache(fake_clock):
    """In-memory permission cache driven by the fake clock."""
    return InMemoryPermissionCache(clock=fake_clock)


@pytest.fixture
def engine():
    return DecisionEngine()


@pytest.fixture
def gate(permission_store, memory_cache, engine):
    """Enforcement gate over the counting store and the in-memory cache."""
    return EnforcementGate(store=permission_store, cache=memory_cache, engine=engine)


@pytest.fixture
def mock_redis():
    """Mock redis.asyncio client."""
    client = MagicMock()
    client.get = AsyncMock(return_value=None)
    client.setex = AsyncMock(return_value=True)
    client.delete = AsyncMock(return_value=1)
    client.ping = AsyncMock(return_value=True)
    return client


@pytest.fixture
def mock_connection():
    """Mock asyncpg connection."""
    conn = MagicMock()
    conn.fetch = AsyncMock(return_value=[])
    conn.fetchrow = AsyncMock(return_value=None)
    conn.execute = AsyncMock(return_value="INSERT 0 1")
    return conn


@pytest.fixture
def mock_pool(mock_connection):
    """Mock asyncpg pool whose ``acquire()`` yields ``mock_connection``."""
    pool = MagicMock()
    acquire_ctx = MagicMock()
    acquire_ctx.__aenter__ = AsyncMock(return_value=mock_connection)
    acquire_ctx.__aexit__ = AsyncMock(return_value=False)
    pool.acquire = MagicMock(return_value=acquire_ctx)
    return pool


@pytest.fixture
def reader():
    return Principal(id="u-reader", role_label="student")


@pytest.fixture
def admin():
    return Principal(id="u-admin", role_label="admin")
