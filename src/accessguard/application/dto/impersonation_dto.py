"""Impersonation DTOs."""

from dataclasses import dataclass
from typing import Any


@dataclass
class StartImpersonationInput:
    """Input for starting an impersonation session."""

    super_user_id: str
    impersonated_user_id: str
    tenant_id: str
    reason: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None


@dataclass
class TrackActionInput:
    """Input for tracking one action. Which fields apply depends on action_type."""

    action_type: str
    resource: str
    resource_id: str | None = None
    method: str | None = None
    status: int | str | None = None
    duration: int | None = None
    format: str | None = None
    record_count: int | None = None
    query: str | None = None
    result_count: int | None = None
    metadata: dict[str, Any] | None = None
