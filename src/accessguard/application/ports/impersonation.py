"""Impersonation ports - session lifecycle, action log and rate limits."""

from datetime import timedelta
from enum import StrEnum
from typing import Any, Protocol

from accessguard.domain.entities import ActiveSession, ImpersonationAction, ImpersonationSession
from accessguard.domain.value_objects import ActionType


class SessionManager(Protocol):
    """The single impersonation session of one operator."""

    @property
    def current(self) -> ActiveSession | None: ...

    @property
    def state(self) -> StrEnum: ...

    def start(self, session: ImpersonationSession) -> bool: ...

    def is_valid(self) -> bool: ...

    def remaining_time(self) -> int: ...

    def get_session_details(self) -> ImpersonationSession | None: ...

    def end(self) -> ActiveSession | None: ...


class SessionRegistry(Protocol):
    """Hands out the session manager of an operator."""

    def for_operator(self, operator_id: str) -> SessionManager: ...


class ActionLog(Protocol):
    """Bounded per-session log of impersonated actions."""

    def track_page_view(
        self, session_id: str, page: str, metadata: dict[str, Any] | None = None
    ) -> ImpersonationAction: ...

    def track_api_call(
        self,
        session_id: str,
        method: str,
        resource: str,
        resource_id: str | None = None,
        status: int | str | None = None,
        duration: int | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> ImpersonationAction: ...

    def track_crud(
        self,
        session_id: str,
        action_type: ActionType | str,
        resource: str,
        resource_id: str,
        metadata: dict[str, Any] | None = None,
    ) -> ImpersonationAction: ...

    def track_export(
        self,
        session_id: str,
        resource: str,
        format: str,
        record_count: int,
        metadata: dict[str, Any] | None = None,
    ) -> ImpersonationAction: ...

    def track_search(
        self,
        session_id: str,
        resource: str,
        query: str,
        result_count: int | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> ImpersonationAction: ...

    def track_print(
        self, session_id: str, resource: str, metadata: dict[str, Any] | None = None
    ) -> ImpersonationAction: ...

    def get_actions(self, session_id: str) -> list[ImpersonationAction]: ...

    def get_action_count(self, session_id: str) -> int: ...

    def get_summary(self, session_id: str) -> dict[str, int]: ...

    def clear(self, session_id: str) -> int: ...


class ImpersonationLimiter(Protocol):
    """Caps how often and how widely an operator impersonates."""

    def ensure_allowed(self, super_user_id: str, replacing: str | None = None) -> Any: ...

    def record_start(self, session: ImpersonationSession) -> Any: ...

    def record_end(self, session_id: str) -> timedelta | None: ...
