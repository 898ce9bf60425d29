"""Permission override repository port."""

from typing import Protocol

from accessguard.domain.entities import PermissionOverride


class OverrideRepository(Protocol):
    """Port for permission override persistence."""

    async def list_for_element(self, actor_id: str, resource_id: str) -> list[PermissionOverride]: ...

    async def create(self, override: PermissionOverride) -> PermissionOverride: ...
