"""Audit sink port - durable storage of impersonation audit entries."""

from typing import Any, Protocol


class AuditSink(Protocol):
    """Port receiving one entry per ended impersonation session."""

    async def append(self, entry: dict[str, Any]) -> None: ...
