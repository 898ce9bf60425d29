"""Port adapters backed by the PostgreSQL Unit of Work.

Each call opens its own unit of work, so a store never holds a connection
between evaluations.
"""

from collections.abc import Sequence
from typing import Any

from accessguard.application.ports import UnitOfWorkFactory
from accessguard.domain.entities import Permission, PermissionOverride, RoleAssignment


class PostgresRoleStore:
    """RoleStore over user_role, role_permission and permission."""

    def __init__(self, unit_of_work_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = unit_of_work_factory

    async def resolve_roles(self, actor_id: str, tenant_id: str | None) -> list[RoleAssignment]:
        async with self._uow_factory() as uow:
            return await uow.roles.list_assignments(actor_id, tenant_id)

    async def resolve_permissions(self, role_ids: Sequence[str]) -> list[Permission]:
        async with self._uow_factory() as uow:
            return await uow.roles.list_permissions_for_roles(role_ids)


class PostgresOverrideStore:
    """OverrideStore over permission_override."""

    def __init__(self, unit_of_work_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = unit_of_work_factory

    async def lookup_overrides(self, actor_id: str, resource_id: str) -> list[PermissionOverride]:
        async with self._uow_factory() as uow:
            return await uow.overrides.list_for_element(actor_id, resource_id)


class PostgresAuditSink:
    """AuditSink writing to impersonation_log."""

    def __init__(self, unit_of_work_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = unit_of_work_factory

    async def append(self, entry: dict[str, Any]) -> None:
        async with self._uow_factory() as uow:
            await uow.audit_log.create(entry)


class PostgresRecordOwnershipStore:
    """RecordOwnershipStore over record_ownership."""

    def __init__(self, unit_of_work_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = unit_of_work_factory

    async def owner_of(self, record_id: str) -> str | None:
        async with self._uow_factory() as uow:
            return await uow.records.owner_of(record_id)
