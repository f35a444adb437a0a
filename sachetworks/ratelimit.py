"""Per-client request budgets for sensitive endpoints.

Views depend only on `consume(key) -> bool`. The default store is an
in-process dict, reset on restart and not shared between instances; point
RATE_LIMITER_BACKEND at `CacheRateLimiter` to share counts through the
configured Django cache.
"""
from __future__ import annotations

import logging
import threading
import time
from functools import wraps
from typing import Dict, Optional, Tuple

from django.conf import settings
from django.core.cache import cache
from django.utils.module_loading import import_string

from .errors import RateLimitedError

logger = logging.getLogger(__name__)

SWEEP_INTERVAL_SECONDS = 5 * 60


class InMemoryRateLimiter:
    def __init__(self, max_requests: int = 5, window_seconds: int = 15 * 60, clock=time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: Dict[str, Tuple[int, float]] = {}
        self._next_sweep = clock() + SWEEP_INTERVAL_SECONDS

    def consume(self, key: str) -> bool:
        now = self._clock()
        with self._lock:
            if now >= self._next_sweep:
                self._sweep(now)
            count, reset_at = self._windows.get(key, (0, 0.0))
            if reset_at <= now:
                self._windows[key] = (1, now + self.window_seconds)
                return True
            count += 1
            self._windows[key] = (count, reset_at)
            return count <= self.max_requests

    def _sweep(self, now: float) -> None:
        expired = [k for k, (_, reset_at) in self._windows.items() if reset_at <= now]
        for k in expired:
            del self._windows[k]
        self._next_sweep = now + SWEEP_INTERVAL_SECONDS

    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._windows)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()


class CacheRateLimiter:
    """Fixed-window counter kept in the Django cache.

    Counter keys carry a generation number stored beside them; `reset()` bumps
    it, and counters of older generations are left to expire.
    """

    def __init__(self, max_requests: int = 5, window_seconds: int = 15 * 60, prefix: str = 'ratelimit'):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.prefix = prefix

    @property
    def _generation_key(self) -> str:
        return f'{self.prefix}:generation'

    def _generation(self) -> int:
        return cache.get_or_set(self._generation_key, 0, timeout=None)

    def consume(self, key: str) -> bool:
        cache_key = f'{self.prefix}:{self._generation()}:{key}'
        if cache.add(cache_key, 1, timeout=self.window_seconds):
            return True
        try:
            count = cache.incr(cache_key)
        except ValueError:
            # expired between add() and incr()
            cache.add(cache_key, 1, timeout=self.window_seconds)
            return True
        return count <= self.max_requests

    def reset(self) -> None:
        self._generation()
        cache.incr(self._generation_key)


_limiter = None


def get_rate_limiter():
    global _limiter
    if _limiter is None:
        limiter_class = import_string(settings.RATE_LIMITER_BACKEND)
        _limiter = limiter_class(
            max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
            window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        )
    return _limiter


def set_rate_limiter(limiter: Optional[object]) -> None:
    """Swap the process-wide limiter (None rebuilds it from settings on next use)."""
    global _limiter
    _limiter = limiter


def rate_limited(view):
    """Charge every non-GET call of `view` against the caller's budget."""

    @wraps(view)
    def wrapper(request, *args, **kwargs):
        if request.method not in ('GET', 'HEAD', 'OPTIONS'):
            client = request.META.get('REMOTE_ADDR') or 'unknown-ip'
            key = f'{client}:{view.__name__}'
            if not get_rate_limiter().consume(key):
                logger.warning('Rate limit exceeded for %s', key)
                raise RateLimitedError('Too many requests. Please try again later.')
        return view(request, *args, **kwargs)

    return wrapper
