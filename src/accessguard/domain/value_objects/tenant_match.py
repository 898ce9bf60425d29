"""Tenant constraint modes for permission scopes."""

from enum import StrEnum


class TenantMatch(StrEnum):
    """How a scoped permission relates to the evaluated tenant.

    ANY applies the permission in every tenant. CURRENT restricts it to the
    tenant the permission was granted in.
    """

    ANY = "any"
    CURRENT = "current"
