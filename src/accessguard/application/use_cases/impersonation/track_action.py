"""Track impersonation action use case."""

from accessguard.application.dto import TrackActionInput
from accessguard.application.ports import ActionLog, SessionRegistry
from accessguard.domain.entities import ImpersonationAction
from accessguard.domain.exceptions import NotFound, ValidationError
from accessguard.domain.value_objects import CRUD_ACTION_TYPES, ActionType


class TrackImpersonationActionUseCase:
    """Record one action against the operator's active session."""

    def __init__(self, registry: SessionRegistry, tracker: ActionLog) -> None:
        self._registry = registry
        self._tracker = tracker

    async def execute(self, operator_id: str, data: TrackActionInput) -> ImpersonationAction:
        session = self._registry.for_operator(operator_id).get_session_details()
        if session is None:
            raise NotFound("No active impersonation session")

        try:
            kind = ActionType(data.action_type)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"Unknown action type: {data.action_type}") from exc

        sid = session.id
        t = self._tracker
        if kind is ActionType.PAGE_VIEW:
            return t.track_page_view(sid, data.resource, data.metadata)
        if kind is ActionType.API_CALL:
            return t.track_api_call(
                sid,
                data.method,
                data.resource,
                resource_id=data.resource_id,
                status=data.status,
                duration=data.duration,
                metadata=data.metadata,
            )
        if kind in CRUD_ACTION_TYPES:
            return t.track_crud(sid, kind, data.resource, data.resource_id, data.metadata)
        if kind is ActionType.EXPORT:
            return t.track_export(
                sid, data.resource, data.format, data.record_count, data.metadata
            )
        if kind is ActionType.SEARCH:
            return t.track_search(
                sid, data.resource, data.query, data.result_count, data.metadata
            )
        return t.track_print(sid, data.resource, data.metadata)
