import pytest
from django.core.cache import cache

from sachetworks.errors import RateLimitedError
from sachetworks.ratelimit import (SWEEP_INTERVAL_SECONDS, CacheRateLimiter, InMemoryRateLimiter, get_rate_limiter,
                                   rate_limited, set_rate_limiter)


def test_allows_budget_then_blocks(clock):
    limiter = InMemoryRateLimiter(max_requests=5, window_seconds=900, clock=clock)
    assert [limiter.consume('1.2.3.4:settlements') for _ in range(6)] == [True] * 5 + [False]
    # other clients and other endpoints keep their own budget
    assert limiter.consume('5.6.7.8:settlements')
    assert limiter.consume('1.2.3.4:settings_detail')


def test_window_resets_after_expiry(clock):
    limiter = InMemoryRateLimiter(max_requests=2, window_seconds=60, clock=clock)
    assert limiter.consume('k') and limiter.consume('k')
    assert not limiter.consume('k')
    clock.advance(59)
    assert not limiter.consume('k')
    clock.advance(1)
    assert limiter.consume('k')


def test_sweep_drops_expired_windows(clock):
    limiter = InMemoryRateLimiter(max_requests=5, window_seconds=60, clock=clock)
    for n in range(3):
        limiter.consume(f'client-{n}')
    assert limiter.tracked_keys() == 3
    clock.advance(SWEEP_INTERVAL_SECONDS)
    limiter.consume('late')
    assert limiter.tracked_keys() == 1


def test_cache_backend_shares_counts():
    cache.clear()
    first = CacheRateLimiter(max_requests=3, window_seconds=60, prefix='test-rl')
    second = CacheRateLimiter(max_requests=3, window_seconds=60, prefix='test-rl')
    assert first.consume('ip:view')
    assert second.consume('ip:view')
    assert first.consume('ip:view')
    assert not second.consume('ip:view')
    first.reset()
    assert first.consume('ip:view')


def test_cache_backend_reset_is_shared_and_keeps_no_per_client_state():
    cache.clear()
    first = CacheRateLimiter(max_requests=1, window_seconds=60, prefix='test-rl-gen')
    second = CacheRateLimiter(max_requests=1, window_seconds=60, prefix='test-rl-gen')
    for n in range(50):
        assert first.consume(f'10.0.0.{n}:settlements')
    assert not second.consume('10.0.0.7:settlements')
    assert not hasattr(first, '_keys')
    first.reset()
    assert second.consume('10.0.0.7:settlements')


def test_decorator_only_charges_writes(rf, clock):
    set_rate_limiter(InMemoryRateLimiter(max_requests=1, window_seconds=60, clock=clock))
    try:
        @rate_limited
        def create_thing(request):
            return 'done'

        for _ in range(3):
            assert create_thing(rf.get('/api/things')) == 'done'
        assert create_thing(rf.post('/api/things')) == 'done'
        with pytest.raises(RateLimitedError) as excinfo:
            create_thing(rf.post('/api/things'))
        assert excinfo.value.status == 429
        assert create_thing(rf.post('/api/things', REMOTE_ADDR='10.0.0.9')) == 'done'
    finally:
        set_rate_limiter(None)


def test_limiter_built_from_settings(settings):
    settings.RATE_LIMIT_MAX_REQUESTS = 2
    settings.RATE_LIMITER_BACKEND = 'sachetworks.ratelimit.CacheRateLimiter'
    set_rate_limiter(None)
    try:
        limiter = get_rate_limiter()
        assert isinstance(limiter, CacheRateLimiter)
        assert limiter.max_requests == 2
    finally:
        set_rate_limiter(None)
