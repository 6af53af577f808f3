"""Fixed-window rate limiting backed by a KeyedStore."""

import logging
from dataclasses import dataclass

from fastapi import Request

from domain.exceptions import RateLimitError
from infrastructure.key_store import KeyedStore, MemoryStore
from infrastructure.settings import (
    AUTH_RATE_LIMIT_MAX,
    RATE_LIMIT_ENABLED,
    RATE_LIMIT_MAX,
    RATE_LIMIT_WINDOW_SECONDS,
)
from application.utils.utils import get_client_ip

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    remaining: int
    limit: int
    reset_in: int


class RateLimiter:
    """Counts hits per key inside a fixed window."""

    def __init__(self, store: KeyedStore, limit: int, window: int, prefix: str, message: str):
        self.store = store
        self.limit = limit
        self.window = window
        self.prefix = prefix
        self.message = message

    def check(self, key: str) -> RateLimitResult:
        cache_key = f"{self.prefix}:{key}"
        # a janela não é renovada a cada hit
        count, ttl_left = self.store.incr(cache_key, ttl=self.window)
        reset_in = max(1, int(ttl_left)) if ttl_left is not None else self.window
        if count > self.limit:
            logger.info("Rate limit exceeded for %s", cache_key)
            return RateLimitResult(False, 0, self.limit, reset_in)
        return RateLimitResult(True, self.limit - count, self.limit, reset_in)

    def release(self, key: str) -> None:
        """Give back one hit, for attempts that should not count."""
        self.store.incr(f"{self.prefix}:{key}", -1, ttl=self.window)

    def hit(self, key: str) -> RateLimitResult:
        result = self.check(key)
        if not result.allowed:
            raise RateLimitError(self.message, retry_after=result.reset_in)
        return result


_store = MemoryStore()

general_limiter = RateLimiter(
    _store,
    limit=RATE_LIMIT_MAX,
    window=RATE_LIMIT_WINDOW_SECONDS,
    prefix="ratelimit:general",
    message="Too many requests from this IP, please try again later.",
)

auth_limiter = RateLimiter(
    _store,
    limit=AUTH_RATE_LIMIT_MAX,
    window=RATE_LIMIT_WINDOW_SECONDS,
    prefix="ratelimit:auth",
    message="Too many login attempts. Please try again later.",
)


general_limit_enabled = RATE_LIMIT_ENABLED


def auth_rate_limit(request: Request) -> None:
    """Dependency for /register and /login.

    Every attempt is counted up front; ``release_successful_auth`` gives the
    hit back once the response turns out 2xx, so only failures use the budget.
    """
    key = get_client_ip(request)
    auth_limiter.hit(key)
    request.state.auth_limit_key = key


def release_successful_auth(request: Request, status_code: int) -> None:
    key = getattr(request.state, "auth_limit_key", None)
    if key is not None and 200 <= status_code < 300:
        auth_limiter.release(key)


def reset_rate_limits() -> int:
    return _store.clear()
