"""Element check DTO."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ElementCheck:
    """One (element path, action) pair to evaluate."""

    element_path: str
    action: str = "visible"
