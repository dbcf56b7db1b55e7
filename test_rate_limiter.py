import asyncio

from conftest import ManualClock
from utils.rate_limiter import MinIntervalRateLimiter, get_rate_limiter, reset_rate_limiters


def test_first_request_does_not_wait():
    clock = ManualClock()
    limiter = MinIntervalRateLimiter(2.0, clock=clock, sleep=clock.sleep)
    assert asyncio.run(limiter()) == 0.0
    assert clock.sleeps == []


def test_back_to_back_requests_are_spaced():
    clock = ManualClock()
    limiter = MinIntervalRateLimiter(2.0, clock=clock, sleep=clock.sleep)

    async def run():
        await limiter()
        clock.now += 0.5
        return await limiter()

    waited = asyncio.run(run())
    assert waited == 1.5
    assert clock.sleeps == [1.5]


def test_concurrent_callers_are_serialized():
    clock = ManualClock()
    limiter = MinIntervalRateLimiter(1.0, clock=clock, sleep=clock.sleep)

    async def run():
        return await asyncio.gather(limiter(), limiter(), limiter())

    waits = asyncio.run(run())
    assert sorted(waits) == [0.0, 1.0, 1.0]
    assert clock.now == 1002.0


def test_registry_shares_limiter_per_credential():
    reset_rate_limiters()
    first = get_rate_limiter("openrouter", "key-a", 2.0)
    assert get_rate_limiter("openrouter", "key-a", 2.0) is first
    assert get_rate_limiter("openrouter", "key-b", 2.0) is not first
    assert get_rate_limiter("gemini", "key-a", 2.0) is not first
    reset_rate_limiters()
    assert get_rate_limiter("openrouter", "key-a", 2.0) is not first
