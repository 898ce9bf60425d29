"""Actions checked against UI elements."""

from enum import StrEnum


class ElementAction(StrEnum):
    """What the caller wants to do with an element."""

    VISIBLE = "visible"
    ENABLED = "enabled"
    EDITABLE = "editable"
    ACCESSIBLE = "accessible"
