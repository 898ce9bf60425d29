"""Invalidate cached permissions use case."""

import structlog

from accessguard.application.ports import PermissionEvaluator
from accessguard.domain.exceptions import PermissionDenied
from accessguard.domain.value_objects import ElementAction, EvaluationContext

logger = structlog.get_logger(__name__)

ADMIN_ELEMENT = "admin:permissions"


class InvalidatePermissionsUseCase:
    """Drop cached verdicts of an actor after their roles changed."""

    def __init__(self, evaluator: PermissionEvaluator) -> None:
        self._evaluator = evaluator

    async def execute(self, caller: EvaluationContext, actor_id: str) -> int:
        """Invalidate actor_id's cache. Caller must be able to edit permission admin."""
        allowed = await self._evaluator.evaluate(ADMIN_ELEMENT, ElementAction.EDITABLE, caller)
        if not allowed:
            logger.warning(
                "permission_cache_invalidation_denied",
                caller_id=caller.actor_id,
                actor_id=actor_id,
            )
            raise PermissionDenied("Not allowed to administer permissions")
        return self._evaluator.invalidate_actor(actor_id)
