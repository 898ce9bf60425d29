"""Role repository port."""

from collections.abc import Sequence
from typing import Protocol

from accessguard.domain.entities import Permission, RoleAssignment


class RoleRepository(Protocol):
    """Port for role assignment and role permission persistence."""

    async def list_assignments(self, actor_id: str, tenant_id: str | None) -> list[RoleAssignment]: ...

    async def list_permissions_for_roles(self, role_ids: Sequence[str]) -> list[Permission]: ...
