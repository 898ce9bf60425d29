"""Role assignment entity for RBAC."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RoleAssignment:
    """Actor holds role in tenant."""

    actor_id: str
    role_id: str
    tenant_id: str | None = None
    role_name: str | None = None
