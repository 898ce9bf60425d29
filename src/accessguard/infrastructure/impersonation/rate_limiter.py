"""Impersonation rate limiter - caps how often and how widely an operator impersonates."""

from dataclasses import dataclass
from datetime import datetime, timedelta

import structlog

from accessguard.application.ports import Clock
from accessguard.domain.entities import ImpersonationSession
from accessguard.domain.exceptions import RateLimitExceeded

logger = structlog.get_logger(__name__)

_WINDOW = timedelta(hours=1)


@dataclass(frozen=True)
class RateLimitConfig:
    """Limits applied to every super admin."""

    max_per_hour: int = 10
    max_concurrent: int = 5
    max_session_duration: timedelta = timedelta(minutes=30)
    enabled: bool = True


@dataclass(frozen=True)
class RateLimitCheck:
    """Outcome of a rate limit check for one operator."""

    allowed: bool
    impersonations_this_hour: int
    concurrent_sessions: int
    remaining_impersonations: int
    remaining_concurrent_slots: int
    reason: str | None = None


@dataclass
class SessionUsage:
    """Usage record of one impersonation session."""

    session_id: str
    super_user_id: str
    impersonated_user_id: str
    tenant_id: str
    started_at: datetime
    ended_at: datetime | None = None
    reason: str | None = None

    def duration(self, now: datetime) -> timedelta:
        return (self.ended_at or now) - self.started_at


class ImpersonationRateLimiter:
    """Tracks session starts and ends per operator against RateLimitConfig."""

    def __init__(self, clock: Clock, config: RateLimitConfig | None = None) -> None:
        self._clock = clock
        self._config = config or RateLimitConfig()
        self._sessions: dict[str, SessionUsage] = {}

    @property
    def config(self) -> RateLimitConfig:
        return self._config

    def check(self, super_user_id: str, replacing: str | None = None) -> RateLimitCheck:
        """Usage of super_user_id; the session being replaced, if any, is not concurrent."""
        cfg = self._config
        if not cfg.enabled:
            return RateLimitCheck(
                allowed=True,
                impersonations_this_hour=0,
                concurrent_sessions=0,
                remaining_impersonations=cfg.max_per_hour,
                remaining_concurrent_slots=cfg.max_concurrent,
            )

        window_start = self._clock.now() - _WINDOW
        self._prune(window_start)
        mine = [u for u in self._sessions.values() if u.super_user_id == super_user_id]
        this_hour = sum(1 for u in mine if u.started_at >= window_start)
        concurrent = sum(1 for u in mine if u.ended_at is None and u.session_id != replacing)

        reason = None
        if this_hour >= cfg.max_per_hour:
            reason = (
                f"Rate limit exceeded: {this_hour}/{cfg.max_per_hour} "
                "impersonations in last hour"
            )
        elif concurrent >= cfg.max_concurrent:
            reason = (
                f"Concurrent session limit exceeded: {concurrent}/{cfg.max_concurrent} "
                "active sessions"
            )

        return RateLimitCheck(
            allowed=reason is None,
            impersonations_this_hour=this_hour,
            concurrent_sessions=concurrent,
            remaining_impersonations=max(0, cfg.max_per_hour - this_hour),
            remaining_concurrent_slots=max(0, cfg.max_concurrent - concurrent),
            reason=reason,
        )

    def ensure_allowed(
        self, super_user_id: str, replacing: str | None = None
    ) -> RateLimitCheck:
        """Raise RateLimitExceeded unless the operator may start another session."""
        check = self.check(super_user_id, replacing)
        if not check.allowed:
            logger.warning(
                "impersonation_rate_limited",
                super_user_id=super_user_id,
                reason=check.reason,
            )
            raise RateLimitExceeded(check.reason)
        return check

    def record_start(self, session: ImpersonationSession) -> SessionUsage:
        self.ensure_allowed(session.super_user_id)
        usage = SessionUsage(
            session_id=session.id,
            super_user_id=session.super_user_id,
            impersonated_user_id=session.impersonated_user_id,
            tenant_id=session.tenant_id,
            started_at=self._clock.now(),
            reason=session.reason,
        )
        self._sessions[session.id] = usage
        return usage

    def record_end(self, session_id: str) -> timedelta | None:
        """Mark session ended; returns its duration, None if it was never recorded."""
        usage = self._sessions.get(session_id)
        if usage is None or usage.ended_at is not None:
            return None

        usage.ended_at = self._clock.now()
        self._prune(usage.ended_at - _WINDOW)
        duration = usage.duration(usage.ended_at)
        if duration > self._config.max_session_duration:
            logger.warning(
                "impersonation_session_exceeded_max_duration",
                session_id=session_id,
                duration_minutes=int(duration.total_seconds() // 60),
                max_duration_minutes=int(self._config.max_session_duration.total_seconds() // 60),
            )
        return duration

    def _prune(self, window_start: datetime) -> None:
        """Drop ended usages that started before the window; they no longer count."""
        stale = [
            sid
            for sid, u in self._sessions.items()
            if u.ended_at is not None and u.started_at < window_start
        ]
        for sid in stale:
            del self._sessions[sid]

    def __len__(self) -> int:
        return len(self._sessions)

    def active_sessions(self, super_user_id: str | None = None) -> list[SessionUsage]:
        return [
            u
            for u in self._sessions.values()
            if u.ended_at is None and (super_user_id is None or u.super_user_id == super_user_id)
        ]

    def reset(self, super_user_id: str | None = None) -> int:
        """Forget ended sessions, for one operator or all. Active sessions stay."""
        done = [
            sid
            for sid, u in self._sessions.items()
            if u.ended_at is not None and (super_user_id is None or u.super_user_id == super_user_id)
        ]
        for sid in done:
            del self._sessions[sid]
        logger.info("impersonation_rate_limits_reset", super_user_id=super_user_id, removed=len(done))
        return len(done)
