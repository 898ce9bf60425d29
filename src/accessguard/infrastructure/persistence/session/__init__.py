"""Session store adapters."""

from accessguard.infrastructure.persistence.session.file_session_store import FileSessionStore
from accessguard.infrastructure.persistence.session.memory_session_store import (
    InMemorySessionStore,
)

__all__ = ["FileSessionStore", "InMemorySessionStore"]
