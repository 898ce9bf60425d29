"""Bulk element evaluation use case."""

from collections.abc import Sequence

from accessguard.application.dto import ElementCheck
from accessguard.application.ports import PermissionEvaluator
from accessguard.domain.value_objects import EvaluationContext


class EvaluateElementsUseCase:
    """Evaluate many element checks for one context."""

    def __init__(self, evaluator: PermissionEvaluator) -> None:
        self._evaluator = evaluator

    async def execute(
        self, checks: Sequence[ElementCheck], context: EvaluationContext
    ) -> dict[tuple[str, str], bool]:
        """Verdict per (element_path, action), evaluated in input order.

        Each check behaves exactly like an individual evaluate call; repeated
        checks are answered from the cache.
        """
        results: dict[tuple[str, str], bool] = {}
        for check in checks:
            results[(check.element_path, check.action)] = await self._evaluator.evaluate(
                check.element_path, check.action, context
            )
        return results
