"""Tests for the Redis-backed circuit breaker."""
from __future__ import annotations

import pytest
from fakeredis import aioredis

from shared.breaker import CircuitBreaker, CircuitBreakerOpen


@pytest.fixture
def redis():
    return aioredis.FakeRedis(decode_responses=True)


@pytest.mark.asyncio
async def test_opens_after_threshold(redis):
    cb = CircuitBreaker("chat-service", failure_threshold=3, reset_timeout_seconds=60, redis=redis)

    for _ in range(2):
        await cb.record_failure()
    await cb.allow_request()
    await cb.record_failure()

    assert await cb.state() == "OPEN"
    with pytest.raises(CircuitBreakerOpen):
        await cb.allow_request()


@pytest.mark.asyncio
async def test_half_open_probe_closes_on_success(redis):
    cb = CircuitBreaker("chat-service", failure_threshold=1, reset_timeout_seconds=0, redis=redis)
    await cb.record_failure()

    await cb.allow_request()
    assert await cb.state() == "HALF_OPEN"

    await cb.record_success()
    status = await cb.status()
    assert status == {"name": "chat-service", "state": "CLOSED", "failures": 0}


@pytest.mark.asyncio
async def test_half_open_probe_failure_reopens(redis):
    cb = CircuitBreaker("chat-service", failure_threshold=1, reset_timeout_seconds=0, redis=redis)
    await cb.record_failure()
    await cb.allow_request()

    await cb.record_failure()

    assert await cb.state() == "OPEN"


@pytest.mark.asyncio
async def test_success_resets_failure_count(redis):
    cb = CircuitBreaker("chat-service", failure_threshold=3, redis=redis)
    await cb.record_failure()
    await cb.record_failure()

    await cb.record_success()
    await cb.record_failure()

    assert (await cb.status())["failures"] == 1
    assert await cb.state() == "CLOSED"
