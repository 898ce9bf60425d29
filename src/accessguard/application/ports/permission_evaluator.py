"""Permission evaluator port - element-level authorization."""

from typing import Protocol

from accessguard.domain.value_objects import ElementAction, EvaluationContext


class PermissionEvaluator(Protocol):
    """Port for checking whether an actor may act on a UI element."""

    async def evaluate(
        self, element_path: str, action: ElementAction | str, context: EvaluationContext
    ) -> bool: ...

    def invalidate_actor(self, actor_id: str) -> int: ...
