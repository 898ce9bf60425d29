"""PostgreSQL record ownership repository implementation."""

from psycopg import AsyncConnection


class PostgresRecordOwnershipRepository:
    """Record ownership index kept in record_ownership."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def owner_of(self, record_id: str) -> str | None:
        cur = await self._conn.execute(
            "SELECT owner_id FROM record_ownership WHERE record_id = %s",
            (record_id,),
        )
        row = await cur.fetchone()
        return row[0] if row else None
