"""Override resolver - fallback grant/deny when no permission pattern matched."""

import structlog

from accessguard.application.ports import Clock, OverrideStore
from accessguard.domain.value_objects import OverrideType
from accessguard.infrastructure.permission.fault_policy import on_resolution_fault

logger = structlog.get_logger(__name__)


class OverrideResolver:
    """Resolves the newest unexpired override for (actor, element)."""

    def __init__(self, override_store: OverrideStore, clock: Clock) -> None:
        self._store = override_store
        self._clock = clock

    async def resolve(self, actor_id: str, element_path: str) -> OverrideType | None:
        """GRANT, DENY, or None when no active override exists or lookup failed."""
        try:
            overrides = await self._store.lookup_overrides(actor_id, element_path)
        except Exception as exc:
            # absence of an override already means deny
            on_resolution_fault(
                "lookup_overrides", exc, actor_id=actor_id, element_path=element_path
            )
            return None

        now = self._clock.now()
        active = [o for o in overrides if o.is_active(now)]
        if not active:
            return None

        latest = max(active, key=lambda o: o.issued_at)
        logger.debug(
            "permission_override_applied",
            actor_id=actor_id,
            element_path=element_path,
            override_type=latest.override_type.value,
        )
        return latest.override_type
