"""Application ports - interfaces for external adapters."""

from accessguard.application.ports.audit_sink import AuditSink
from accessguard.application.ports.clock import Clock
from accessguard.application.ports.impersonation import (
    ActionLog,
    ImpersonationLimiter,
    SessionManager,
    SessionRegistry,
)
from accessguard.application.ports.override_store import OverrideStore
from accessguard.application.ports.permission_evaluator import PermissionEvaluator
from accessguard.application.ports.record_ownership_store import RecordOwnershipStore
from accessguard.application.ports.role_store import RoleStore
from accessguard.application.ports.session_store import SessionStore
from accessguard.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "ActionLog",
    "AuditSink",
    "Clock",
    "ImpersonationLimiter",
    "OverrideStore",
    "PermissionEvaluator",
    "RecordOwnershipStore",
    "RoleStore",
    "SessionManager",
    "SessionRegistry",
    "SessionStore",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
