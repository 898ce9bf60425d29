"""PostgreSQL impersonation audit log repository implementation."""

from datetime import datetime
from typing import Any

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb


class PostgresAuditLogRepository:
    """Writes one impersonation_log row per ended session."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def create(self, entry: dict[str, Any]) -> None:
        """Insert audit entry. Timestamps are ISO 8601 strings."""
        session = entry["session"]
        await self._conn.execute(
            "INSERT INTO impersonation_log "
            "(session_id, super_user_id, impersonated_user_id, tenant_id, reason, ip_address, "
            "user_agent, started_at, ended_at, actions, summary) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
            (
                session["id"],
                session["super_user_id"],
                session["impersonated_user_id"],
                session["tenant_id"],
                session.get("reason"),
                session.get("ip_address"),
                session.get("user_agent"),
                datetime.fromisoformat(entry["started_at"]),
                datetime.fromisoformat(entry["ended_at"]),
                Jsonb(entry.get("actions", [])),
                Jsonb(entry.get("summary", {})),
            ),
        )
