"""Impersonation API resources."""

import falcon.asgi

from accessguard.application.dto import StartImpersonationInput, TrackActionInput
from accessguard.application.ports import ActionLog, SessionRegistry
from accessguard.application.use_cases.impersonation.end_impersonation import (
    EndImpersonationUseCase,
)
from accessguard.application.use_cases.impersonation.start_impersonation import (
    StartImpersonationUseCase,
)
from accessguard.application.use_cases.impersonation.track_action import (
    TrackImpersonationActionUseCase,
)
from accessguard.domain.exceptions import (
    NotFound,
    PermissionDenied,
    RateLimitExceeded,
    StorageUnavailable,
    ValidationError,
)
from accessguard.domain.entities import ActiveSession

_TRACK_FIELDS = (
    "resource_id",
    "method",
    "status",
    "duration",
    "format",
    "record_count",
    "query",
    "result_count",
    "metadata",
)


def _session_media(active: ActiveSession) -> dict:
    s = active.session
    return {
        "id": s.id,
        "super_user_id": s.super_user_id,
        "impersonated_user_id": s.impersonated_user_id,
        "tenant_id": s.tenant_id,
        "reason": s.reason,
        "started_at": active.started_at.isoformat(),
    }


class ImpersonationResource:
    """POST/GET/DELETE /v1/impersonation - the caller's impersonation session."""

    def __init__(
        self,
        start_impersonation: StartImpersonationUseCase,
        end_impersonation: EndImpersonationUseCase,
        registry: SessionRegistry,
    ) -> None:
        self._start = start_impersonation
        self._end = end_impersonation
        self._registry = registry

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Start impersonating body.impersonated_user_id in body.tenant_id."""
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

        data = StartImpersonationInput(
            super_user_id=user.user_id,
            impersonated_user_id=body.get("impersonated_user_id"),
            tenant_id=body.get("tenant_id"),
            reason=body.get("reason"),
            ip_address=req.remote_addr,
            user_agent=req.user_agent,
        )
        try:
            active = await self._start.execute(data, user.evaluation_context())
        except PermissionDenied:
            resp.status = falcon.HTTP_403
            resp.media = {"error": "Permission denied"}
            return
        except RateLimitExceeded as e:
            resp.status = falcon.HTTP_429
            resp.media = {"error": str(e)}
            return
        except ValidationError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return
        except StorageUnavailable as e:
            resp.status = falcon.HTTP_503
            resp.media = {"error": str(e)}
            return

        manager = self._registry.for_operator(user.user_id)
        resp.media = {
            "session": _session_media(active),
            "remaining_ms": manager.remaining_time(),
        }
        resp.status = falcon.HTTP_201

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Session state, remaining time in ms (-1 when none) and details."""
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return

        manager = self._registry.for_operator(user.user_id)
        held = manager.current
        resp.media = {
            "status": manager.state.value,
            "remaining_ms": manager.remaining_time(),
            "session": _session_media(held) if held and manager.is_valid() else None,
        }
        resp.status = falcon.HTTP_200

    async def on_delete(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """End the session and write its audit entry."""
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return

        entry = await self._end.execute(user.user_id)
        if entry is None:
            resp.status = falcon.HTTP_404
            resp.media = {"error": "No impersonation session"}
            return

        resp.media = {
            "session_id": entry["session"]["id"],
            "action_count": len(entry["actions"]),
            "summary": entry["summary"],
        }
        resp.status = falcon.HTTP_200


class ImpersonationActionsResource:
    """POST/GET /v1/impersonation/actions - action log of the active session."""

    def __init__(
        self,
        track_action: TrackImpersonationActionUseCase,
        registry: SessionRegistry,
        tracker: ActionLog,
    ) -> None:
        self._track = track_action
        self._registry = registry
        self._tracker = tracker

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return

        body = await req.get_media()
        try:
            data = TrackActionInput(
                action_type=body["action_type"],
                resource=body["resource"],
                **{k: body[k] for k in _TRACK_FIELDS if k in body},
            )
        except (KeyError, TypeError) as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Missing required field: {e}"}
            return

        try:
            action = await self._track.execute(user.user_id, data)
        except NotFound as e:
            resp.status = falcon.HTTP_404
            resp.media = {"error": str(e)}
            return
        except ValidationError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return

        resp.media = action.to_dict()
        resp.status = falcon.HTTP_201

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return

        session = self._registry.for_operator(user.user_id).get_session_details()
        if session is None:
            resp.status = falcon.HTTP_404
            resp.media = {"error": "No active impersonation session"}
            return

        resp.media = {
            "session_id": session.id,
            "actions": [a.to_dict() for a in self._tracker.get_actions(session.id)],
            "summary": self._tracker.get_summary(session.id),
            "count": self._tracker.get_action_count(session.id),
        }
        resp.status = falcon.HTTP_200
