"""Permission override entity - explicit grant/deny on one element for one actor."""

from dataclasses import dataclass
from datetime import datetime

from accessguard.domain.value_objects import OverrideType


@dataclass(frozen=True)
class PermissionOverride:
    """Override consulted only when no permission pattern matched."""

    actor_id: str
    resource_id: str
    override_type: OverrideType
    issued_at: datetime
    expires_at: datetime | None = None
    id: str | None = None

    def is_active(self, now: datetime) -> bool:
        """True when the override has no expiry or expires in the future."""
        return self.expires_at is None or self.expires_at > now
