# accounts/throttles.py
"""
Rate limiting for authentication endpoints.

Two layers protect the login endpoint:
- LoginThrottle: DRF rate limit per IP (settings 'login' rate)
- LoginLockout: after LOGIN_MAX_ATTEMPTS failures inside
  LOGIN_WINDOW_MINUTES the IP is blocked for LOGIN_BLOCK_MINUTES
"""

import logging

from django.conf import settings
from django.core.cache import cache
from rest_framework.throttling import AnonRateThrottle

logger = logging.getLogger(__name__)


class LoginThrottle(AnonRateThrottle):
    """
    Rate limit login attempts.

    Default: 10 attempts per minute per IP.
    Configured via settings.REST_FRAMEWORK['DEFAULT_THROTTLE_RATES']['login']
    """
    scope = 'login'


class LoginLockout:
    """Failed-login counter kept in the Django cache, keyed by client IP."""

    ATTEMPTS_KEY = "login-attempts:{ip}"
    BLOCK_KEY = "login-blocked:{ip}"

    def __init__(self, ip: str):
        self.ip = ip or "unknown"

    @property
    def max_attempts(self) -> int:
        return getattr(settings, "LOGIN_MAX_ATTEMPTS", 5)

    @property
    def window_seconds(self) -> int:
        return getattr(settings, "LOGIN_WINDOW_MINUTES", 15) * 60

    @property
    def block_seconds(self) -> int:
        return getattr(settings, "LOGIN_BLOCK_MINUTES", 15) * 60

    def is_blocked(self) -> bool:
        return cache.get(self.BLOCK_KEY.format(ip=self.ip)) is not None

    def register_failure(self) -> int:
        key = self.ATTEMPTS_KEY.format(ip=self.ip)
        # add() only sets the key when absent, so the window starts at the first failure
        cache.add(key, 0, timeout=self.window_seconds)
        try:
            attempts = cache.incr(key)
        except ValueError:
            cache.set(key, 1, timeout=self.window_seconds)
            attempts = 1

        if attempts >= self.max_attempts:
            cache.set(self.BLOCK_KEY.format(ip=self.ip), True, timeout=self.block_seconds)
            cache.delete(key)
            logger.warning(
                "Login blocked after repeated failures",
                extra={"ip": self.ip, "attempts": attempts},
            )
        return attempts

    def reset(self) -> None:
        cache.delete_many([
            self.ATTEMPTS_KEY.format(ip=self.ip),
            self.BLOCK_KEY.format(ip=self.ip),
        ])
