"""Session store port - durable per-tab key/value storage."""

from typing import Protocol


class SessionStore(Protocol):
    """Synchronous key/value store holding serialized session records."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...
