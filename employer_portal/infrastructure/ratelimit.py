"""Fixed-window request limiter kept in process memory."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Callable

from employer_portal.core.config import RateLimitSettings

LOGIN = "login"
ONBOARDING = "onboarding"
EMAIL = "email"
API = "api"
INVITE = "invite"


@dataclass(slots=True)
class RateLimitRule:
    limit: int
    window_seconds: int


@dataclass(slots=True)
class RateLimitResult:
    success: bool
    limit: int
    remaining: int
    reset_at: float
    retry_after: int = 0


@dataclass(slots=True)
class _Window:
    count: int
    reset_at: float


class InMemoryRateLimiter:
    """Counts hits per (bucket, identifier); state is lost on restart and not shared between workers."""

    def __init__(
        self,
        rules: dict[str, RateLimitRule],
        *,
        enabled: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._rules = rules
        self._enabled = enabled
        self._clock = clock
        self._windows: dict[tuple[str, str], _Window] = {}

    @classmethod
    def from_settings(cls, settings: RateLimitSettings) -> "InMemoryRateLimiter":
        rules = {
            LOGIN: RateLimitRule(settings.login_limit, settings.login_window_seconds),
            ONBOARDING: RateLimitRule(settings.onboarding_limit, settings.onboarding_window_seconds),
            EMAIL: RateLimitRule(settings.email_limit, settings.email_window_seconds),
            API: RateLimitRule(settings.api_limit, settings.api_window_seconds),
            INVITE: RateLimitRule(settings.invite_limit, settings.invite_window_seconds),
        }
        return cls(rules, enabled=settings.enabled)

    def hit(self, bucket: str, identifier: str) -> RateLimitResult:
        rule = self._rules[bucket]
        now = self._clock()
        if not self._enabled:
            return RateLimitResult(True, rule.limit, rule.limit, now)

        key = (bucket, identifier)
        window = self._windows.get(key)
        if window is None or now >= window.reset_at:
            window = _Window(count=1, reset_at=now + rule.window_seconds)
            self._windows[key] = window
            self._prune(now)
            return RateLimitResult(True, rule.limit, rule.limit - 1, window.reset_at)

        if window.count >= rule.limit:
            retry_after = max(1, math.ceil(window.reset_at - now))
            return RateLimitResult(False, rule.limit, 0, window.reset_at, retry_after)

        window.count += 1
        return RateLimitResult(True, rule.limit, rule.limit - window.count, window.reset_at)

    def reset(self) -> None:
        self._windows.clear()

    def _prune(self, now: float) -> None:
        expired = [key for key, window in self._windows.items() if window.reset_at <= now]
        for key in expired:
            del self._windows[key]


__all__ = ["API", "EMAIL", "INVITE", "LOGIN", "ONBOARDING", "InMemoryRateLimiter", "RateLimitResult", "RateLimitRule"]
