from __future__ import annotations

from collections import defaultdict, deque
from dataclasses import dataclass
import logging
from threading import Lock
import time
from typing import Callable, Deque

from fastapi import HTTPException, Request, status

from app.core.config import get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitPolicy:
    scope: str
    limit: int
    window_seconds: int


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    retry_after: int = 0


def policy_for(scope: str) -> RateLimitPolicy:
    """Policy for a named scope, read from settings on every call so overrides apply at once."""
    settings = get_settings()
    limits = {
        "auth.login": (settings.auth_rate_limit_login_max_requests, settings.auth_rate_limit_window_seconds),
        "auth.register": (settings.auth_rate_limit_register_max_requests, settings.auth_rate_limit_window_seconds),
        "imports.submit": (settings.import_rate_limit_max_requests, settings.import_rate_limit_window_seconds),
    }
    if scope not in limits:
        raise KeyError(f"No rate limit policy for scope {scope!r}")
    limit, window_seconds = limits[scope]
    return RateLimitPolicy(scope=scope, limit=limit, window_seconds=window_seconds)


class SlidingWindowLimiter:
    """Per-key request log over a trailing window, shared across worker threads."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._windows: dict[str, Deque[float]] = defaultdict(deque)
        self._lock = Lock()
        self._clock = clock

    def acquire(self, key: str, policy: RateLimitPolicy) -> RateLimitDecision:
        now = self._clock()
        with self._lock:
            window = self._windows[key]
            while window and window[0] <= now - policy.window_seconds:
                window.popleft()
            if len(window) >= policy.limit:
                wait = max(1, int(window[0] + policy.window_seconds - now))
                return RateLimitDecision(allowed=False, remaining=0, retry_after=wait)
            window.append(now)
            return RateLimitDecision(allowed=True, remaining=policy.limit - len(window))

    def clear(self) -> None:
        with self._lock:
            self._windows.clear()


_limiter = SlidingWindowLimiter()


def client_address(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def enforce_rate_limit(request: Request, scope: str, *, identity: str | None = None) -> RateLimitDecision:
    """Count one request against ``scope`` for this client and identity; 429 once the window is full."""
    policy = policy_for(scope)
    key = f"{scope}|{client_address(request)}|{(identity or '').strip().lower()}"
    decision = _limiter.acquire(key, policy)
    if decision.allowed:
        return decision
    logger.warning("Rate limit hit for %s from %s", scope, client_address(request))
    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail=f"Too many requests for {scope}. Try again in {decision.retry_after} second(s).",
        headers={"Retry-After": str(decision.retry_after)},
    )


def clear_rate_limiter() -> None:
    _limiter.clear()
