"""Fail-safe policy for permission resolution faults."""

from typing import Any

import structlog

logger = structlog.get_logger(__name__)


def on_resolution_fault(step: str, error: Exception, **fields: Any) -> bool:
    """Log a fault raised while resolving roles, permissions or overrides; deny.

    Every resolution step routes its failures through here so the outcome of a
    fault is decided in one place.
    """
    logger.warning(
        "permission_resolution_fault",
        step=step,
        error_type=type(error).__name__,
        error=str(error),
        **fields,
    )
    return False
