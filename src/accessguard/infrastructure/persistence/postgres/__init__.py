"""PostgreSQL persistence adapters."""

from accessguard.infrastructure.persistence.postgres.connection import create_pool
from accessguard.infrastructure.persistence.postgres.stores import (
    PostgresAuditSink,
    PostgresOverrideStore,
    PostgresRecordOwnershipStore,
    PostgresRoleStore,
)
from accessguard.infrastructure.persistence.postgres.unit_of_work import (
    PostgresUnitOfWork,
    create_uow_factory,
)

__all__ = [
    "PostgresAuditSink",
    "PostgresOverrideStore",
    "PostgresRecordOwnershipStore",
    "PostgresRoleStore",
    "PostgresUnitOfWork",
    "create_pool",
    "create_uow_factory",
]
