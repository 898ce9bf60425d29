"""Application DTOs."""

from accessguard.application.dto.element_check import ElementCheck
from accessguard.application.dto.impersonation_dto import (
    StartImpersonationInput,
    TrackActionInput,
)

__all__ = ["ElementCheck", "StartImpersonationInput", "TrackActionInput"]
