"""Record ownership port - who owns a CRM record."""

from typing import Protocol


class RecordOwnershipStore(Protocol):
    """Port for the authoritative owner of a record, never the caller's claim."""

    async def owner_of(self, record_id: str) -> str | None: ...
