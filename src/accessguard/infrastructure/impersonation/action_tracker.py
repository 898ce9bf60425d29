"""Impersonation action tracker - bounded, per-session log of operator actions."""

from collections import deque
from typing import Any

import structlog

from accessguard.application.ports import Clock
from accessguard.domain.entities import ImpersonationAction
from accessguard.domain.exceptions import ValidationError
from accessguard.domain.value_objects import CRUD_ACTION_TYPES, ActionType

logger = structlog.get_logger(__name__)

DEFAULT_ACTION_LIMIT = 1000


def _require_text(value: Any, message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message)
    return value


def _require_count(value: Any, message: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(message)
    return value


class ActionTracker:
    """Collects actions per impersonation session.

    Each session keeps at most `limit` actions; past the cap the oldest is
    evicted first. Sessions never see each other's actions.
    """

    def __init__(self, clock: Clock, limit: int = DEFAULT_ACTION_LIMIT) -> None:
        if limit < 1:
            raise ValueError("Action limit must be positive")
        self._clock = clock
        self._limit = limit
        self._sessions: dict[str, deque[ImpersonationAction]] = {}

    @property
    def limit(self) -> int:
        return self._limit

    def track_page_view(
        self,
        session_id: str,
        page: str,
        metadata: dict[str, Any] | None = None,
    ) -> ImpersonationAction:
        _require_text(session_id, "Session ID is required")
        _require_text(page, "Page name is required")
        return self._add(
            session_id,
            ImpersonationAction(
                action_type=ActionType.PAGE_VIEW,
                resource=page,
                timestamp=self._clock.now(),
                metadata=metadata,
            ),
        )

    def track_api_call(
        self,
        session_id: str,
        method: str,
        resource: str,
        resource_id: str | None = None,
        status: int | str | None = None,
        duration: int | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> ImpersonationAction:
        _require_text(session_id, "Session ID is required")
        _require_text(method, "HTTP method is required")
        _require_text(resource, "Resource is required")
        if duration is not None:
            _require_count(duration, "Duration must be a non-negative integer (ms)")
        return self._add(
            session_id,
            ImpersonationAction(
                action_type=ActionType.API_CALL,
                resource=resource,
                resource_id=resource_id,
                method=method.strip().upper(),
                status=status if status is not None else 200,
                duration=duration,
                metadata=metadata,
                timestamp=self._clock.now(),
            ),
        )

    def track_crud(
        self,
        session_id: str,
        action_type: ActionType | str,
        resource: str,
        resource_id: str,
        metadata: dict[str, Any] | None = None,
    ) -> ImpersonationAction:
        _require_text(session_id, "Session ID is required")
        try:
            kind = ActionType(action_type)
        except (TypeError, ValueError):
            kind = None
        if kind not in CRUD_ACTION_TYPES:
            raise ValidationError("Action type must be create, update, or delete")
        _require_text(resource, "Resource is required")
        _require_text(resource_id, "Resource ID is required")
        return self._add(
            session_id,
            ImpersonationAction(
                action_type=kind,
                resource=resource,
                resource_id=resource_id,
                metadata=metadata,
                timestamp=self._clock.now(),
            ),
        )

    def track_export(
        self,
        session_id: str,
        resource: str,
        format: str,
        record_count: int,
        metadata: dict[str, Any] | None = None,
    ) -> ImpersonationAction:
        _require_text(session_id, "Session ID is required")
        _require_text(resource, "Resource is required")
        _require_text(format, "Export format is required")
        _require_count(record_count, "Record count must be a non-negative integer")
        return self._add(
            session_id,
            ImpersonationAction(
                action_type=ActionType.EXPORT,
                resource=resource,
                metadata={**(metadata or {}), "format": format, "record_count": record_count},
                timestamp=self._clock.now(),
            ),
        )

    def track_search(
        self,
        session_id: str,
        resource: str,
        query: str,
        result_count: int | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> ImpersonationAction:
        _require_text(session_id, "Session ID is required")
        _require_text(resource, "Resource is required")
        _require_text(query, "Search query is required")
        extra: dict[str, Any] = {"query": query}
        if result_count is not None:
            extra["result_count"] = _require_count(
                result_count, "Result count must be a non-negative integer"
            )
        return self._add(
            session_id,
            ImpersonationAction(
                action_type=ActionType.SEARCH,
                resource=resource,
                metadata={**(metadata or {}), **extra},
                timestamp=self._clock.now(),
            ),
        )

    def track_print(
        self,
        session_id: str,
        resource: str,
        metadata: dict[str, Any] | None = None,
    ) -> ImpersonationAction:
        _require_text(session_id, "Session ID is required")
        _require_text(resource, "Resource is required")
        return self._add(
            session_id,
            ImpersonationAction(
                action_type=ActionType.PRINT,
                resource=resource,
                metadata=metadata,
                timestamp=self._clock.now(),
            ),
        )

    def get_actions(self, session_id: str) -> list[ImpersonationAction]:
        """Actions for session in the order they were tracked."""
        return list(self._sessions.get(session_id, ()))

    def get_action_count(self, session_id: str) -> int:
        return len(self._sessions.get(session_id, ()))

    def get_summary(self, session_id: str) -> dict[str, int]:
        """Count per action type; every type is present, zero when unseen."""
        summary = {kind.value: 0 for kind in ActionType}
        for action in self._sessions.get(session_id, ()):
            summary[action.action_type.value] += 1
        return summary

    def clear(self, session_id: str) -> int:
        """Drop all actions of one session. Returns how many were removed."""
        removed = len(self._sessions.pop(session_id, ()))
        logger.info("impersonation_actions_cleared", session_id=session_id, removed=removed)
        return removed

    def _add(self, session_id: str, action: ImpersonationAction) -> ImpersonationAction:
        actions = self._sessions.get(session_id)
        if actions is None:
            actions = deque(maxlen=self._limit)
            self._sessions[session_id] = actions
        if len(actions) == self._limit:
            logger.warning(
                "impersonation_action_limit_reached",
                session_id=session_id,
                limit=self._limit,
                evicted_action_type=actions[0].action_type.value,
            )
        actions.append(action)
        logger.debug(
            "impersonation_action_tracked",
            session_id=session_id,
            action_type=action.action_type.value,
            resource=action.resource,
        )
        return action
