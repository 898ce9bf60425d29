"""PostgreSQL role repository implementation."""

from collections.abc import Sequence
from typing import Any

from psycopg import AsyncConnection

from accessguard.domain.entities import Permission, PermissionScope, RoleAssignment
from accessguard.domain.value_objects import TenantMatch


def scope_from_row(data: dict[str, Any] | None) -> PermissionScope | None:
    """Build PermissionScope from the JSON stored in permission.scope."""
    if not data:
        return None
    return PermissionScope(
        tenant_match=TenantMatch(data.get("tenant_match", TenantMatch.ANY.value)),
        tenant_id=data.get("tenant_id"),
        departments=tuple(data.get("departments") or ()),
        roles=tuple(data.get("roles") or ()),
        conditions=tuple(data.get("conditions") or ()),
    )


class PostgresRoleRepository:
    """Role assignment and role permission repository."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def list_assignments(self, actor_id: str, tenant_id: str | None) -> list[RoleAssignment]:
        """Assignments of actor that apply globally or in tenant_id."""
        cur = await self._conn.execute(
            "SELECT ur.actor_id, ur.role_id, ur.tenant_id, r.name "
            "FROM user_role ur JOIN role r ON r.id = ur.role_id "
            "WHERE ur.actor_id = %s AND (ur.tenant_id = '' OR ur.tenant_id = %s)",
            (actor_id, tenant_id or ""),
        )
        rows = await cur.fetchall()
        return [
            RoleAssignment(actor_id=r[0], role_id=r[1], tenant_id=r[2] or None, role_name=r[3])
            for r in rows
        ]

    async def list_permissions_for_roles(self, role_ids: Sequence[str]) -> list[Permission]:
        """Distinct permissions granted to any of role_ids."""
        if not role_ids:
            return []
        cur = await self._conn.execute(
            "SELECT DISTINCT p.id, p.name, p.scope "
            "FROM role_permission rp JOIN permission p ON p.id = rp.permission_id "
            "WHERE rp.role_id = ANY(%s) ORDER BY p.id",
            (list(role_ids),),
        )
        rows = await cur.fetchall()
        return [Permission(id=r[0], name=r[1], scope=scope_from_row(r[2])) for r in rows]
