"""PostgreSQL permission override repository implementation."""

from uuid import uuid4

from psycopg import AsyncConnection

from accessguard.domain.entities import PermissionOverride
from accessguard.domain.value_objects import OverrideType


class PostgresOverrideRepository:
    """Permission override repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def list_for_element(self, actor_id: str, resource_id: str) -> list[PermissionOverride]:
        """All overrides of actor on resource_id, expired ones included."""
        cur = await self._conn.execute(
            "SELECT id, actor_id, resource_id, override_type, issued_at, expires_at "
            "FROM permission_override WHERE actor_id = %s AND resource_id = %s "
            "ORDER BY issued_at",
            (actor_id, resource_id),
        )
        rows = await cur.fetchall()
        return [
            PermissionOverride(
                id=str(r[0]),
                actor_id=r[1],
                resource_id=r[2],
                override_type=OverrideType(r[3]),
                issued_at=r[4],
                expires_at=r[5],
            )
            for r in rows
        ]

    async def create(self, override: PermissionOverride) -> PermissionOverride:
        """Create override."""
        override_id = override.id or str(uuid4())
        await self._conn.execute(
            "INSERT INTO permission_override "
            "(id, actor_id, resource_id, override_type, issued_at, expires_at) "
            "VALUES (%s, %s, %s, %s, %s, %s)",
            (
                override_id,
                override.actor_id,
                override.resource_id,
                override.override_type.value,
                override.issued_at,
                override.expires_at,
            ),
        )
        return PermissionOverride(
            id=override_id,
            actor_id=override.actor_id,
            resource_id=override.resource_id,
            override_type=override.override_type,
            issued_at=override.issued_at,
            expires_at=override.expires_at,
        )
