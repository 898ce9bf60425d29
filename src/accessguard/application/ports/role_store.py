"""Role store port - resolves an actor's roles and their permissions."""

from collections.abc import Sequence
from typing import Protocol

from accessguard.domain.entities import Permission, RoleAssignment


class RoleStore(Protocol):
    """Port for the external role/permission assignment store."""

    async def resolve_roles(self, actor_id: str, tenant_id: str | None) -> list[RoleAssignment]: ...

    async def resolve_permissions(self, role_ids: Sequence[str]) -> list[Permission]: ...
