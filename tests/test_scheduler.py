import asyncio

import pytest

from sensor_exporter.services.scheduler import IntervalTicker


class FakeClock:
    def __init__(self):
        self.now = 100.0
        self.sleeps: list[float] = []

    def __call__(self):
        return self.now

    async def sleep(self, delay):
        self.sleeps.append(delay)
        self.now += delay


def make_ticker(interval=5.0):
    clock = FakeClock()
    return IntervalTicker(interval, clock=clock, sleep=clock.sleep), clock


def test_first_tick_is_immediate():
    ticker, clock = make_ticker()
    asyncio.run(ticker.wait())
    assert clock.sleeps == []


def test_fixed_rate_independent_of_cycle_duration():
    ticker, clock = make_ticker(5.0)

    async def scenario():
        await ticker.wait()          # t=100
        clock.now += 1.5             # cycle took 1.5s
        await ticker.wait()          # fires at 105
        clock.now += 0.2
        await ticker.wait()          # fires at 110

    asyncio.run(scenario())

    assert clock.sleeps == pytest.approx([3.5, 4.8])
    assert clock.now == pytest.approx(110.0)


def test_overrun_fires_immediately_then_realigns():
    ticker, clock = make_ticker(5.0)

    async def scenario():
        await ticker.wait()          # t=100, next boundary 105
        clock.now += 12.0            # cycle overran to 112 (105 and 110 missed)
        await ticker.wait()          # immediate
        assert clock.sleeps == []
        await ticker.wait()          # next boundary is 115

    asyncio.run(scenario())

    assert clock.sleeps == pytest.approx([3.0])
    assert clock.now == pytest.approx(115.0)
    assert ticker.coalesced == 1


def test_rejects_non_positive_interval():
    with pytest.raises(ValueError):
        IntervalTicker(0)


def test_uses_loop_clock_by_default():
    async def scenario():
        ticker = IntervalTicker(0.05)
        loop = asyncio.get_running_loop()
        t0 = loop.time()
        await ticker.wait()
        await ticker.wait()
        return loop.time() - t0

    elapsed = asyncio.run(scenario())
    assert elapsed >= 0.04
