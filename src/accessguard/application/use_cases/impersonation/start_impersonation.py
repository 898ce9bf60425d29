"""Start impersonation use case."""

from uuid import uuid4

import structlog

from accessguard.application.dto import StartImpersonationInput
from accessguard.application.ports import ImpersonationLimiter, PermissionEvaluator, SessionRegistry
from accessguard.application.use_cases.impersonation.end_impersonation import (
    EndImpersonationUseCase,
)
from accessguard.domain.entities import ActiveSession, ImpersonationSession
from accessguard.domain.exceptions import PermissionDenied, StorageUnavailable, ValidationError
from accessguard.domain.value_objects import ElementAction, EvaluationContext

logger = structlog.get_logger(__name__)

IMPERSONATION_ELEMENT = "admin:impersonation"


class StartImpersonationUseCase:
    """Start a session for a super admin acting as another user."""

    def __init__(
        self,
        registry: SessionRegistry,
        limiter: ImpersonationLimiter,
        end_impersonation: EndImpersonationUseCase,
        evaluator: PermissionEvaluator,
    ) -> None:
        self._registry = registry
        self._limiter = limiter
        self._end = end_impersonation
        self._evaluator = evaluator

    async def execute(
        self, data: StartImpersonationInput, caller: EvaluationContext
    ) -> ActiveSession:
        """Raises PermissionDenied, RateLimitExceeded, ValidationError or StorageUnavailable.

        A session the operator still holds is replaced. It is closed, and
        audited, only once the new one has been persisted; any failure before
        that leaves it running.
        """
        if caller.actor_id != data.super_user_id or not await self._evaluator.evaluate(
            IMPERSONATION_ELEMENT, ElementAction.ACCESSIBLE, caller
        ):
            logger.warning(
                "impersonation_start_denied",
                caller_id=caller.actor_id,
                impersonated_user_id=data.impersonated_user_id,
            )
            raise PermissionDenied("Not allowed to impersonate users")

        session = ImpersonationSession(
            id=str(uuid4()),
            super_user_id=data.super_user_id,
            impersonated_user_id=data.impersonated_user_id,
            tenant_id=data.tenant_id,
            reason=data.reason,
            ip_address=data.ip_address,
            user_agent=data.user_agent,
        )
        missing = session.missing_identity_fields()
        if missing:
            raise ValidationError(
                f"Invalid impersonation session: missing required fields: {', '.join(missing)}"
            )

        manager = self._registry.for_operator(data.super_user_id)
        previous = manager.current
        self._limiter.ensure_allowed(
            data.super_user_id, replacing=previous.session.id if previous else None
        )

        if not manager.start(session):
            raise StorageUnavailable("Impersonation session could not be persisted")
        if previous is not None:
            await self._end.close(previous)
        self._limiter.record_start(session)
        return manager.current
