"""Element permission API resources."""

import falcon.asgi

from accessguard.application.dto import ElementCheck
from accessguard.application.ports import SessionRegistry
from accessguard.application.use_cases.permission.evaluate_elements import (
    EvaluateElementsUseCase,
)
from accessguard.application.use_cases.permission.invalidate_permissions import (
    InvalidatePermissionsUseCase,
)
from accessguard.domain.exceptions import PermissionDenied
from accessguard.domain.value_objects import ElementAction, EvaluationContext

MAX_CHECKS = 200
_ACTIONS = {a.value for a in ElementAction}


def _parse_checks(body: dict) -> list[ElementCheck]:
    raw = body.get("checks")
    if not isinstance(raw, list) or not raw:
        raise ValueError("checks must be a non-empty list")
    if len(raw) > MAX_CHECKS:
        raise ValueError(f"At most {MAX_CHECKS} checks per request")
    checks = []
    for item in raw:
        if not isinstance(item, dict):
            raise ValueError("Each check must be an object")
        path = item.get("element_path")
        action = item.get("action", ElementAction.VISIBLE.value)
        if not isinstance(path, str) or not path.strip():
            raise ValueError("element_path is required")
        if action not in _ACTIONS:
            raise ValueError(f"Unknown action: {action}")
        checks.append(ElementCheck(element_path=path, action=action))
    return checks


class PermissionsEvaluateResource:
    """POST /v1/permissions/evaluate - evaluate element checks for the caller.

    While the caller impersonates someone, checks run as the impersonated
    user inside the session's tenant. Only record_id is read from the body
    context; the record's owner comes from the ownership store.
    """

    def __init__(
        self,
        evaluate_elements: EvaluateElementsUseCase,
        registry: SessionRegistry,
    ) -> None:
        self._evaluate = evaluate_elements
        self._registry = registry

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return

        body = await req.get_media()
        if not isinstance(body, dict):
            resp.status = falcon.HTTP_400
            resp.media = {"error": "Request body must be an object"}
            return
        try:
            checks = _parse_checks(body)
        except ValueError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return

        record = body.get("context") or {}
        if not isinstance(record, dict):
            resp.status = falcon.HTTP_400
            resp.media = {"error": "context must be an object"}
            return
        record_id = record.get("record_id")
        if record_id is not None and not isinstance(record_id, str):
            resp.status = falcon.HTTP_400
            resp.media = {"error": "context.record_id must be a string"}
            return

        session = self._registry.for_operator(user.user_id).get_session_details()
        if session is not None:
            context = EvaluationContext(
                actor_id=session.impersonated_user_id,
                tenant_id=session.tenant_id,
                record_id=record_id,
            )
        else:
            context = user.evaluation_context(record_id=record_id)

        verdicts = await self._evaluate.execute(checks, context)
        resp.media = {
            "actor_id": context.actor_id,
            "impersonating": session is not None,
            "results": [
                {
                    "element_path": c.element_path,
                    "action": c.action,
                    "allowed": verdicts[(c.element_path, c.action)],
                }
                for c in checks
            ],
        }
        resp.status = falcon.HTTP_200


class PermissionCacheResource:
    """DELETE /v1/permissions/cache/{actor_id} - drop an actor's cached verdicts."""

    def __init__(self, invalidate_permissions: InvalidatePermissionsUseCase) -> None:
        self._invalidate = invalidate_permissions

    async def on_delete(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        actor_id: str,
    ) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return

        try:
            removed = await self._invalidate.execute(user.evaluation_context(), actor_id)
        except PermissionDenied:
            resp.status = falcon.HTTP_403
            resp.media = {"error": "Permission denied"}
            return

        resp.media = {"actor_id": actor_id, "invalidated": removed}
        resp.status = falcon.HTTP_200
