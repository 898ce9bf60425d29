"""Impersonation action entity - one tracked operation."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from accessguard.domain.value_objects import ActionType


@dataclass(frozen=True)
class ImpersonationAction:
    """Action taken while impersonating. Never mutated after creation."""

    action_type: ActionType
    resource: str
    timestamp: datetime
    resource_id: str | None = None
    method: str | None = None
    status: int | str | None = None
    duration: int | None = None
    metadata: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize for audit entries and API responses."""
        data: dict[str, Any] = {
            "action_type": self.action_type.value,
            "resource": self.resource,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.resource_id is not None:
            data["resource_id"] = self.resource_id
        if self.method is not None:
            data["method"] = self.method
        if self.status is not None:
            data["status"] = self.status
        if self.duration is not None:
            data["duration"] = self.duration
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        return data
