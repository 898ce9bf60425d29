"""Permission override kinds."""

from enum import StrEnum


class OverrideType(StrEnum):
    """Explicit per-actor resolution of an unmatched element."""

    GRANT = "grant"
    DENY = "deny"
