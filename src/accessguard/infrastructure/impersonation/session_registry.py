"""Session manager registry - one impersonation session manager per operator."""

from collections.abc import Callable
from datetime import timedelta

from accessguard.application.ports import Clock, SessionStore
from accessguard.infrastructure.impersonation.session_manager import (
    DEFAULT_TIMEOUT,
    ImpersonationSessionManager,
)

SessionStoreFactory = Callable[[str], SessionStore]


class SessionManagerRegistry:
    """Lazily creates a manager per operator and restores its persisted session once."""

    def __init__(
        self,
        store_factory: SessionStoreFactory,
        clock: Clock,
        timeout: timedelta = DEFAULT_TIMEOUT,
    ) -> None:
        self._store_factory = store_factory
        self._clock = clock
        self._timeout = timeout
        self._managers: dict[str, ImpersonationSessionManager] = {}

    def for_operator(self, operator_id: str) -> ImpersonationSessionManager:
        manager = self._managers.get(operator_id)
        if manager is None:
            manager = ImpersonationSessionManager(
                self._store_factory(operator_id), self._clock, timeout=self._timeout
            )
            manager.restore()
            self._managers[operator_id] = manager
        return manager

    def __len__(self) -> int:
        return len(self._managers)
