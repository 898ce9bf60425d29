"""Unit tests for ImpersonationRateLimiter."""

from datetime import timedelta

import pytest

from accessguard.domain.entities import ImpersonationSession
from accessguard.domain.exceptions import RateLimitExceeded
from accessguard.infrastructure.impersonation.rate_limiter import (
    ImpersonationRateLimiter,
    RateLimitConfig,
)

from tests.conftest import FakeClock


def _session(n: int, operator: str = "admin1") -> ImpersonationSession:
    return ImpersonationSession(
        id=f"s{n}", super_user_id=operator, impersonated_user_id=f"u{n}", tenant_id="t1"
    )


def test_fresh_operator_is_allowed(limiter: ImpersonationRateLimiter) -> None:
    check = limiter.check("admin1")
    assert check.allowed is True
    assert check.remaining_impersonations == 10
    assert check.remaining_concurrent_slots == 5


def test_concurrent_limit(limiter: ImpersonationRateLimiter) -> None:
    for n in range(5):
        limiter.record_start(_session(n))

    check = limiter.check("admin1")
    assert check.allowed is False
    assert "Concurrent" in check.reason
    with pytest.raises(RateLimitExceeded):
        limiter.record_start(_session(99))


def test_hourly_limit_and_window(limiter: ImpersonationRateLimiter, clock: FakeClock) -> None:
    for n in range(10):
        limiter.record_start(_session(n))
        limiter.record_end(f"s{n}")

    check = limiter.check("admin1")
    assert check.allowed is False
    assert check.impersonations_this_hour == 10

    clock.advance(timedelta(hours=1, seconds=1))
    assert limiter.check("admin1").allowed is True


def test_limits_are_per_operator(limiter: ImpersonationRateLimiter) -> None:
    for n in range(5):
        limiter.record_start(_session(n))
    assert limiter.check("admin2").allowed is True


def test_disabled_allows_everything(clock: FakeClock) -> None:
    limiter = ImpersonationRateLimiter(clock, RateLimitConfig(max_concurrent=1, enabled=False))
    limiter.record_start(_session(1))
    limiter.record_start(_session(2))
    assert limiter.check("admin1").allowed is True


def test_record_end_returns_duration(limiter: ImpersonationRateLimiter, clock: FakeClock) -> None:
    limiter.record_start(_session(1))
    clock.advance(timedelta(minutes=45))
    assert limiter.record_end("s1") == timedelta(minutes=45)
    assert limiter.record_end("s1") is None
    assert limiter.record_end("unknown") is None


def test_active_sessions(limiter: ImpersonationRateLimiter) -> None:
    limiter.record_start(_session(1))
    limiter.record_start(_session(2, operator="admin2"))
    limiter.record_end("s1")

    assert [u.session_id for u in limiter.active_sessions()] == ["s2"]
    assert limiter.active_sessions("admin1") == []


def test_reset_forgets_ended_sessions(limiter: ImpersonationRateLimiter) -> None:
    for n in range(10):
        limiter.record_start(_session(n))
        limiter.record_end(f"s{n}")
    assert limiter.reset("admin1") == 10
    assert limiter.check("admin1").allowed is True


def test_ended_sessions_pruned_after_window(
    limiter: ImpersonationRateLimiter, clock: FakeClock
) -> None:
    for n in range(3):
        limiter.record_start(_session(n))
        limiter.record_end(f"s{n}")
    limiter.record_start(_session(3))
    assert len(limiter) == 4

    clock.advance(timedelta(hours=2))
    assert limiter.check("admin1").impersonations_this_hour == 0
    assert len(limiter) == 1
    assert [u.session_id for u in limiter.active_sessions()] == ["s3"]


def test_replaced_session_is_not_concurrent(clock: FakeClock) -> None:
    limiter = ImpersonationRateLimiter(clock, RateLimitConfig(max_concurrent=1))
    limiter.record_start(_session(1))

    assert limiter.check("admin1").allowed is False
    assert limiter.check("admin1", replacing="s1").allowed is True
