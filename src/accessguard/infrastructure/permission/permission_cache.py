"""Time-bounded memoization of permission verdicts."""

from dataclasses import dataclass
from datetime import datetime, timedelta

from accessguard.application.ports import Clock
from accessguard.domain.value_objects import EvaluationContext

DEFAULT_TTL = timedelta(minutes=5)


@dataclass(frozen=True)
class CacheKey:
    """Composite key: actor, normalized element path, action, serialized context."""

    actor_id: str
    element_path: str
    action: str
    context_token: str

    @classmethod
    def for_check(
        cls, context: EvaluationContext, element_path: str, action: str
    ) -> "CacheKey":
        return cls(
            actor_id=context.actor_id,
            element_path=element_path,
            action=action,
            context_token=context.cache_token(),
        )


class PermissionCache:
    """Verdict cache with a fixed TTL window and per-actor invalidation.

    Expired entries are dropped lazily when read.
    """

    def __init__(self, clock: Clock, ttl: timedelta = DEFAULT_TTL) -> None:
        self._clock = clock
        self._ttl = ttl
        self._entries: dict[CacheKey, tuple[bool, datetime]] = {}

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def get(self, key: CacheKey) -> bool | None:
        """Cached verdict, or None when absent or older than the TTL."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        verdict, written_at = entry
        if self._clock.now() - written_at >= self._ttl:
            del self._entries[key]
            return None
        return verdict

    def put(self, key: CacheKey, verdict: bool) -> None:
        self._entries[key] = (verdict, self._clock.now())

    def invalidate_actor(self, actor_id: str) -> int:
        """Drop every entry for actor. Returns number of entries removed."""
        stale = [key for key in self._entries if key.actor_id == actor_id]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
