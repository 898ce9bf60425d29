"""Evaluation context for element permission checks."""

import json
from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class EvaluationContext:
    """Everything scope constraints may look at.

    The field set is closed: scope evaluation only ever reads these.
    """

    actor_id: str
    tenant_id: str | None = None
    department: str | None = None
    role: str | None = None
    record_id: str | None = None
    record_owner_id: str | None = None

    def cache_token(self) -> str:
        """Stable serialization used as part of the permission cache key."""
        return json.dumps(asdict(self), sort_keys=True, separators=(",", ":"))
