"""Impersonation audit log repository port."""

from typing import Any, Protocol


class AuditLogRepository(Protocol):
    """Port for impersonation audit log persistence."""

    async def create(self, entry: dict[str, Any]) -> None: ...
