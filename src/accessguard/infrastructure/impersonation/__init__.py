"""Impersonation infrastructure - session lifecycle, action log, rate limits."""

from accessguard.infrastructure.impersonation.action_tracker import ActionTracker
from accessguard.infrastructure.impersonation.rate_limiter import (
    ImpersonationRateLimiter,
    RateLimitCheck,
    RateLimitConfig,
)
from accessguard.infrastructure.impersonation.session_manager import (
    ActiveSession,
    ImpersonationSessionManager,
    SessionState,
)
from accessguard.infrastructure.impersonation.session_registry import SessionManagerRegistry

__all__ = [
    "ActionTracker",
    "ActiveSession",
    "ImpersonationRateLimiter",
    "ImpersonationSessionManager",
    "RateLimitCheck",
    "RateLimitConfig",
    "SessionManagerRegistry",
    "SessionState",
]
