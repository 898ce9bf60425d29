"""Override store port."""

from typing import Protocol

from accessguard.domain.entities import PermissionOverride


class OverrideStore(Protocol):
    """Port for per-actor, per-element permission overrides."""

    async def lookup_overrides(self, actor_id: str, resource_id: str) -> list[PermissionOverride]: ...
