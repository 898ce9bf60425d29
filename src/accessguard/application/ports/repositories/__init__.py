"""Repository ports."""

from accessguard.application.ports.repositories.audit_log_repository import (
    AuditLogRepository,
)
from accessguard.application.ports.repositories.override_repository import (
    OverrideRepository,
)
from accessguard.application.ports.repositories.record_ownership_repository import (
    RecordOwnershipRepository,
)
from accessguard.application.ports.repositories.role_repository import RoleRepository

__all__ = [
    "AuditLogRepository",
    "OverrideRepository",
    "RecordOwnershipRepository",
    "RoleRepository",
]
