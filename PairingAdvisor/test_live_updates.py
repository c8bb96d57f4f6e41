"""Tests for the periodic update loop and subscriptions."""
import asyncio
import threading
import pytest
from datetime import datetime, timezone
from live_updates import LiveUpdates
from weather_provider import WeatherProviderBase
from weather_service import WeatherService
from weather_data import WeatherSnapshot


def make_snapshot(location="Cape Town", temperature_c=22.0):
    observed = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    return WeatherSnapshot(
        location=location,
        city=location,
        country="ZA",
        temperature_c=temperature_c,
        condition="sunny",
        description="clear sky",
        humidity_pct=45.0,
        wind_speed_kph=8.0,
        pressure_hpa=1016.0,
        visibility_km=10.0,
        sunrise=observed,
        sunset=observed,
        observed_at=observed,
    )


class StubService:
    """Stands in for WeatherService; records the locations requested."""

    def __init__(self):
        self.locations = []

    def get_current(self, location):
        self.locations.append(location)
        return make_snapshot(location)


@pytest.fixture
def service():
    return StubService()


@pytest.fixture
def updates(service):
    return LiveUpdates(service, "Cape Town", interval_seconds=0.01)


def test_subscribers_receive_same_snapshot(updates):
    """Both subscribers get the tick's snapshot; after unsubscribing only one does."""
    received_a, received_b = [], []
    updates.subscribe(received_a.append)
    unsubscribe_b = updates.subscribe(received_b.append)

    async def scenario():
        await updates.refresh()
        unsubscribe_b()
        await updates.refresh()

    asyncio.run(scenario())

    assert len(received_a) == 2
    assert len(received_b) == 1
    assert received_b[0] is received_a[0]


def test_notify_in_subscription_order(updates):
    calls = []
    updates.subscribe(lambda s: calls.append("first"))
    updates.subscribe(lambda s: calls.append("second"))
    updates.subscribe(lambda s: calls.append("third"))

    updates.notify(make_snapshot())

    assert calls == ["first", "second", "third"]


def test_failing_subscriber_does_not_block_others(updates, caplog):
    received = []

    def broken(snapshot):
        raise RuntimeError("render failed")

    updates.subscribe(broken)
    updates.subscribe(received.append)

    updates.notify(make_snapshot())

    assert len(received) == 1
    assert "subscriber" in caplog.text


def test_subscriber_may_unsubscribe_during_notify(updates):
    """Changing the subscriber list mid-notify does not skip anyone."""
    calls = []
    unsubscribe_holder = {}

    def first(snapshot):
        calls.append("first")
        unsubscribe_holder["first"]()

    unsubscribe_holder["first"] = updates.subscribe(first)
    updates.subscribe(lambda s: calls.append("second"))

    updates.notify(make_snapshot())
    updates.notify(make_snapshot())

    assert calls == ["first", "second", "second"]


def test_unsubscribe_is_idempotent(updates):
    def callback(snapshot):
        pass

    unsubscribe_one = updates.subscribe(callback)
    updates.subscribe(callback)
    assert updates.subscriber_count == 2

    unsubscribe_one()
    unsubscribe_one()

    assert updates.subscriber_count == 1


def test_refresh_uses_default_location(updates, service):
    snapshot = asyncio.run(updates.refresh())

    assert service.locations == ["Cape Town"]
    assert snapshot.location == "Cape Town"


def test_periodic_updates_tick_until_stopped(updates, service):
    received = []
    updates.subscribe(received.append)

    async def scenario():
        stop = updates.start_periodic_updates("Bordeaux, France", interval_seconds=0.01)
        assert updates.is_running
        await asyncio.sleep(0.1)
        stop()
        assert not updates.is_running
        # let refreshes that already started finish
        await asyncio.sleep(0.05)
        count = len(received)
        await asyncio.sleep(0.1)
        return count

    count_after_stop = asyncio.run(scenario())

    assert count_after_stop >= 2
    assert len(received) == count_after_stop
    assert set(service.locations) == {"Bordeaux, France"}
    # stopping keeps subscribers
    assert updates.subscriber_count == 1


def test_restart_replaces_running_cycle(updates, service):
    async def scenario():
        stop_first = updates.start_periodic_updates("Cape Town", interval_seconds=0.01)
        stop_second = updates.start_periodic_updates("Miami, USA", interval_seconds=0.01)
        await asyncio.sleep(0.08)
        # the first handle no longer controls anything
        stop_first()
        assert updates.is_running
        stop_second()
        assert not updates.is_running

    asyncio.run(scenario())

    assert service.locations
    assert set(service.locations) == {"Miami, USA"}


def test_first_tick_waits_one_interval(updates, service):
    async def scenario():
        stop = updates.start_periodic_updates(interval_seconds=10)
        await asyncio.sleep(0.05)
        stop()

    asyncio.run(scenario())

    assert service.locations == []


def test_start_requires_running_loop(updates):
    with pytest.raises(RuntimeError):
        updates.start_periodic_updates()


def test_start_rejects_non_positive_interval(updates):
    async def scenario():
        updates.start_periodic_updates(interval_seconds=0)

    with pytest.raises(ValueError):
        asyncio.run(scenario())


def test_stop_without_start_is_noop(updates):
    updates.stop_periodic_updates()

    assert not updates.is_running


class BlockingProvider(WeatherProviderBase):
    """Provider whose fetches hang until `release` is set."""

    def __init__(self):
        self.release = threading.Event()
        self.calls = 0

    def get_current(self, location):
        self.calls += 1
        self.release.wait(timeout=2)
        return make_snapshot(location, temperature_c=14.0)

    def get_forecast(self, location):
        return []


async def wait_until(predicate, timeout=2.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.005)


def test_stop_lets_in_flight_refresh_finish():
    """A refresh running when the cycle stops still caches and notifies; no new tick starts."""
    provider = BlockingProvider()
    service = WeatherService(provider, max_retries=1)
    updates = LiveUpdates(service, "Cape Town", interval_seconds=0.05)
    received = []
    updates.subscribe(received.append)

    async def scenario():
        try:
            stop = updates.start_periodic_updates()
            await wait_until(lambda: provider.calls >= 1)
            stop()
            calls_at_stop = provider.calls
            assert received == []
            provider.release.set()
            await wait_until(lambda: len(received) == calls_at_stop)
            # several intervals pass without another tick
            await asyncio.sleep(0.2)
            return calls_at_stop
        finally:
            provider.release.set()

    calls_at_stop = asyncio.run(scenario())

    assert provider.calls == calls_at_stop
    assert len(received) == calls_at_stop
    assert not updates.is_running
    cached = service.cache.get("Cape Town")
    assert cached is not None
    assert cached.temperature_c == 14.0
    assert received[-1].temperature_c == 14.0


def test_overlapping_ticks_both_reach_service():
    """A tick fires while the previous refresh is still blocked; both complete."""
    provider = BlockingProvider()
    service = WeatherService(provider, max_retries=1)
    updates = LiveUpdates(service, "Cape Town", interval_seconds=0.02)
    received = []
    updates.subscribe(received.append)

    async def scenario():
        try:
            stop = updates.start_periodic_updates()
            await wait_until(lambda: provider.calls >= 2)
            # neither refresh has finished yet
            assert received == []
            stop()
            provider.release.set()
            await wait_until(lambda: len(received) == provider.calls)
        finally:
            provider.release.set()

    asyncio.run(scenario())

    assert provider.calls >= 2
    assert len(received) == provider.calls
    assert all(snapshot.temperature_c == 14.0 for snapshot in received)
    assert service.cache.get("Cape Town") is not None
