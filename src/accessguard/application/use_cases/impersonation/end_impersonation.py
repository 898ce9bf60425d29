"""End impersonation use case."""

from datetime import datetime
from typing import Any

import structlog

from accessguard.application.ports import (
    ActionLog,
    AuditSink,
    Clock,
    ImpersonationLimiter,
    SessionRegistry,
)
from accessguard.domain.entities import ActiveSession

logger = structlog.get_logger(__name__)


def build_audit_entry(
    held: ActiveSession, tracker: ActionLog, ended_at: datetime
) -> dict[str, Any]:
    """Audit record of one session: identity, tracked actions, per-type summary."""
    session = held.session
    return {
        "session": {
            "id": session.id,
            "super_user_id": session.super_user_id,
            "impersonated_user_id": session.impersonated_user_id,
            "tenant_id": session.tenant_id,
            "reason": session.reason,
            "ip_address": session.ip_address,
            "user_agent": session.user_agent,
        },
        "actions": [a.to_dict() for a in tracker.get_actions(session.id)],
        "started_at": held.started_at.isoformat(),
        "ended_at": ended_at.isoformat(),
        "summary": tracker.get_summary(session.id),
    }


class EndImpersonationUseCase:
    """Close the operator's session and hand its action log to the audit sink.

    The audit write happens before anything is cleared. A failing sink is
    logged and does not keep the session open.
    """

    def __init__(
        self,
        registry: SessionRegistry,
        tracker: ActionLog,
        limiter: ImpersonationLimiter,
        audit_sink: AuditSink,
        clock: Clock,
    ) -> None:
        self._registry = registry
        self._tracker = tracker
        self._limiter = limiter
        self._audit_sink = audit_sink
        self._clock = clock

    async def execute(self, operator_id: str) -> dict[str, Any] | None:
        """Returns the audit entry, or None when the operator held no session."""
        manager = self._registry.for_operator(operator_id)
        held = manager.current
        if held is None:
            return None

        entry = await self.close(held)
        manager.end()
        return entry

    async def close(self, held: ActiveSession) -> dict[str, Any]:
        """Audit held and release its action log and rate limit slot.

        The operator's session manager is left alone, so a session that has
        already been replaced there can still be closed.
        """
        session_id = held.session.id
        entry = build_audit_entry(held, self._tracker, self._clock.now())
        try:
            await self._audit_sink.append(entry)
        except Exception as exc:
            logger.error(
                "impersonation_audit_failed",
                session_id=session_id,
                actions=len(entry["actions"]),
                error=str(exc),
            )

        self._tracker.clear(session_id)
        self._limiter.record_end(session_id)
        return entry
