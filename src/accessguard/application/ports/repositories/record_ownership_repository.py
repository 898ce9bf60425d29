"""Record ownership repository port."""

from typing import Protocol


class RecordOwnershipRepository(Protocol):
    """Port for the record ownership index."""

    async def owner_of(self, record_id: str) -> str | None: ...
