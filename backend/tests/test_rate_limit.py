import pytest

from app.services.rate_limit import RateLimitPolicy, SlidingWindowLimiter, policy_for


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_window_fills_then_frees_after_expiry():
    clock = FakeClock()
    limiter = SlidingWindowLimiter(clock=clock)
    policy = RateLimitPolicy(scope="auth.login", limit=2, window_seconds=60)

    assert limiter.acquire("k", policy).remaining == 1
    assert limiter.acquire("k", policy).remaining == 0
    blocked = limiter.acquire("k", policy)
    assert blocked.allowed is False
    assert blocked.retry_after == 60

    clock.now += 30
    assert limiter.acquire("k", policy).retry_after == 30
    assert limiter.acquire("other", policy).allowed is True

    clock.now += 31
    assert limiter.acquire("k", policy).allowed is True


def test_policies_follow_settings():
    login = policy_for("auth.login")
    assert login.limit == 12
    assert login.window_seconds == 300
    assert policy_for("imports.submit").window_seconds == 60
    with pytest.raises(KeyError):
        policy_for("unknown.scope")
