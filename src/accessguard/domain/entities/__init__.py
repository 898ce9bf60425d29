"""Domain entities."""

from accessguard.domain.entities.impersonation_action import ImpersonationAction
from accessguard.domain.entities.impersonation_session import (
    ActiveSession,
    ImpersonationSession,
)
from accessguard.domain.entities.permission import Permission, PermissionScope
from accessguard.domain.entities.permission_override import PermissionOverride
from accessguard.domain.entities.role_assignment import RoleAssignment

__all__ = [
    "ActiveSession",
    "ImpersonationAction",
    "ImpersonationSession",
    "Permission",
    "PermissionOverride",
    "PermissionScope",
    "RoleAssignment",
]
