"""Pytest fixtures for accessguard tests."""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from accessguard.domain.entities import Permission, PermissionOverride, RoleAssignment
from accessguard.infrastructure.impersonation import (
    ActionTracker,
    ImpersonationRateLimiter,
    SessionManagerRegistry,
)
from accessguard.infrastructure.permission.override_resolver import OverrideResolver
from accessguard.infrastructure.permission.permission_cache import PermissionCache
from accessguard.infrastructure.permission.permission_evaluator import (
    ElementPermissionEvaluator,
)


# --- Fake clock ---


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2026, 3, 2, 9, 0, tzinfo=UTC)

    def now(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta) -> None:
        self.current = self.current + delta


# --- Fake stores ---


class FakeRoleStore:
    """In-memory role store with call counters and failure switches."""

    def __init__(self) -> None:
        self._assignments: dict[str, list[RoleAssignment]] = {}
        self._permissions: dict[str, list[Permission]] = {}
        self.role_calls = 0
        self.permission_calls = 0
        self.fail_roles = False
        self.fail_permissions = False

    def grant(
        self,
        actor_id: str,
        role_id: str,
        *permissions: Permission,
        tenant_id: str | None = None,
        role_name: str | None = None,
    ) -> None:
        """Helper: assign role_id to actor_id and attach permissions to the role."""
        self._assignments.setdefault(actor_id, []).append(
            RoleAssignment(
                actor_id=actor_id, role_id=role_id, tenant_id=tenant_id, role_name=role_name
            )
        )
        self._permissions.setdefault(role_id, []).extend(permissions)

    async def resolve_roles(self, actor_id: str, tenant_id: str | None) -> list[RoleAssignment]:
        self.role_calls += 1
        if self.fail_roles:
            raise ConnectionError("role store unavailable")
        return list(self._assignments.get(actor_id, []))

    async def resolve_permissions(self, role_ids: Sequence[str]) -> list[Permission]:
        self.permission_calls += 1
        if self.fail_permissions:
            raise ConnectionError("permission store unavailable")
        result: list[Permission] = []
        for role_id in role_ids:
            result.extend(self._permissions.get(role_id, []))
        return result


class FakeOverrideStore:
    """In-memory override store."""

    def __init__(self) -> None:
        self._store: list[PermissionOverride] = []
        self.calls = 0
        self.fail = False

    def add(self, override: PermissionOverride) -> None:
        self._store.append(override)

    async def lookup_overrides(self, actor_id: str, resource_id: str) -> list[PermissionOverride]:
        self.calls += 1
        if self.fail:
            raise TimeoutError("override store timed out")
        return [o for o in self._store if o.actor_id == actor_id and o.resource_id == resource_id]


class FakeOwnershipStore:
    """Record owners by record id."""

    def __init__(self) -> None:
        self.owners: dict[str, str] = {}
        self.calls = 0
        self.fail = False

    async def owner_of(self, record_id: str) -> str | None:
        self.calls += 1
        if self.fail:
            raise ConnectionError("ownership index unavailable")
        return self.owners.get(record_id)


class FakeSessionStore:
    """Dict-backed session store; raw is exposed for corrupting records."""

    def __init__(self) -> None:
        self.raw: dict[str, str] = {}
        self.fail_set = False
        self.fail_get = False

    def get(self, key: str) -> str | None:
        if self.fail_get:
            raise OSError("storage unavailable")
        return self.raw.get(key)

    def set(self, key: str, value: str) -> None:
        if self.fail_set:
            raise OSError("quota exceeded")
        self.raw[key] = value

    def remove(self, key: str) -> None:
        self.raw.pop(key, None)


class FakeAuditSink:
    """Collects audit entries; can be switched to fail."""

    def __init__(self) -> None:
        self.entries: list[dict[str, Any]] = []
        self.fail = False

    async def append(self, entry: dict[str, Any]) -> None:
        if self.fail:
            raise ConnectionError("audit sink unavailable")
        self.entries.append(entry)


# --- Fake UnitOfWork ---


class FakeRoleRepository:
    """Role repository view over a FakeRoleStore."""

    def __init__(self, store: FakeRoleStore) -> None:
        self._store = store

    async def list_assignments(self, actor_id: str, tenant_id: str | None) -> list[RoleAssignment]:
        return await self._store.resolve_roles(actor_id, tenant_id)

    async def list_permissions_for_roles(self, role_ids: Sequence[str]) -> list[Permission]:
        return await self._store.resolve_permissions(role_ids)


class FakeOverrideRepository:
    """Override repository view over a FakeOverrideStore."""

    def __init__(self, store: FakeOverrideStore) -> None:
        self._store = store

    async def list_for_element(self, actor_id: str, resource_id: str) -> list[PermissionOverride]:
        return await self._store.lookup_overrides(actor_id, resource_id)

    async def create(self, override: PermissionOverride) -> PermissionOverride:
        self._store.add(override)
        return override


class FakeRecordOwnershipRepository:
    def __init__(self, store: FakeOwnershipStore) -> None:
        self._store = store

    async def owner_of(self, record_id: str) -> str | None:
        return await self._store.owner_of(record_id)


class FakeAuditLogRepository:
    def __init__(self) -> None:
        self.rows: list[dict[str, Any]] = []

    async def create(self, entry: dict[str, Any]) -> None:
        self.rows.append(entry)


class FakeUnitOfWork:
    """In-memory Unit of Work with fake repositories."""

    def __init__(
        self,
        roles: FakeRoleStore,
        overrides: FakeOverrideStore,
        owners: FakeOwnershipStore | None = None,
    ) -> None:
        self.roles = FakeRoleRepository(roles)
        self.overrides = FakeOverrideRepository(overrides)
        self.records = FakeRecordOwnershipRepository(owners or FakeOwnershipStore())
        self.audit_log = FakeAuditLogRepository()
        self.committed = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        pass


# --- Fixtures ---


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def role_store() -> FakeRoleStore:
    return FakeRoleStore()


@pytest.fixture
def override_store() -> FakeOverrideStore:
    return FakeOverrideStore()


@pytest.fixture
def ownership_store() -> FakeOwnershipStore:
    return FakeOwnershipStore()


@pytest.fixture
def session_store() -> FakeSessionStore:
    return FakeSessionStore()


@pytest.fixture
def audit_sink() -> FakeAuditSink:
    return FakeAuditSink()


@pytest.fixture
def fake_uow(role_store, override_store, ownership_store) -> FakeUnitOfWork:
    return FakeUnitOfWork(role_store, override_store, ownership_store)


@pytest.fixture
def uow_factory(fake_uow):
    """Factory returning async context manager yielding the same FakeUnitOfWork."""

    @asynccontextmanager
    async def _factory() -> AsyncIterator[FakeUnitOfWork]:
        yield fake_uow

    return _factory


@pytest.fixture
def cache(clock) -> PermissionCache:
    return PermissionCache(clock)


@pytest.fixture
def evaluator(
    role_store, override_store, ownership_store, cache, clock
) -> ElementPermissionEvaluator:
    return ElementPermissionEvaluator(
        role_store=role_store,
        override_resolver=OverrideResolver(override_store, clock),
        cache=cache,
        ownership=ownership_store,
    )


@pytest.fixture
def tracker(clock) -> ActionTracker:
    return ActionTracker(clock)


@pytest.fixture
def limiter(clock) -> ImpersonationRateLimiter:
    return ImpersonationRateLimiter(clock)


@pytest.fixture
def session_stores() -> dict[str, FakeSessionStore]:
    """Per-operator fake stores, created on demand by the registry."""
    return {}


@pytest.fixture
def registry(session_stores, clock) -> SessionManagerRegistry:
    def _factory(operator_id: str) -> FakeSessionStore:
        return session_stores.setdefault(operator_id, FakeSessionStore())

    return SessionManagerRegistry(_factory, clock)
