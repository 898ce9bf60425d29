"""Impersonation session entity."""

from dataclasses import dataclass
from datetime import datetime

IDENTITY_FIELDS = ("id", "super_user_id", "impersonated_user_id", "tenant_id")


@dataclass(frozen=True)
class ImpersonationSession:
    """Super admin acting as another user inside a tenant."""

    id: str
    super_user_id: str
    impersonated_user_id: str
    tenant_id: str
    reason: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None

    def missing_identity_fields(self) -> list[str]:
        """Names of identity fields that are not non-empty strings."""
        missing = []
        for name in IDENTITY_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                missing.append(name)
        return missing


@dataclass(frozen=True)
class ActiveSession:
    """Session together with the instant it started."""

    session: ImpersonationSession
    started_at: datetime
