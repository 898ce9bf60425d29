"""Permission entity - an allowed element pattern with optional scope."""

from dataclasses import dataclass

from accessguard.domain.value_objects import TenantMatch


@dataclass(frozen=True)
class PermissionScope:
    """Constraints a context must satisfy for a matching permission to apply."""

    tenant_match: TenantMatch = TenantMatch.ANY
    tenant_id: str | None = None
    departments: tuple[str, ...] = ()
    roles: tuple[str, ...] = ()
    conditions: tuple[str, ...] = ()


@dataclass(frozen=True)
class Permission:
    """Permission - colon-delimited name pattern, segments may be `*`."""

    name: str
    scope: PermissionScope | None = None
    id: str | None = None
