"""Unit of Work port - transactional boundary."""

from collections.abc import AsyncIterator
from typing import Protocol

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


class UnitOfWork(Protocol):
    """Unit of Work - manages transaction and repository access."""

    @property
    def roles(self) -> RoleRepository: ...

    @property
    def overrides(self) -> OverrideRepository: ...

    @property
    def audit_log(self) -> AuditLogRepository: ...

    @property
    def records(self) -> RecordOwnershipRepository: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class UnitOfWorkFactory(Protocol):
    """Factory for creating UnitOfWork instances."""

    async def __call__(self) -> AsyncIterator[UnitOfWork]: ...
