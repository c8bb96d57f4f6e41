"""Periodic weather refresh with push notifications to subscribers."""
import asyncio
import logging
from typing import Callable, List, Optional, Set
from weather_data import WeatherSnapshot
from weather_service import WeatherService

Subscriber = Callable[[WeatherSnapshot], None]

DEFAULT_INTERVAL_SECONDS = 300.0  # 5 minutes


class LiveUpdates:
    """
    Polls the weather service on an asyncio timer and pushes each snapshot
    to subscribers.

    At most one timer runs at a time. Ticks are not serialized: a slow
    refresh may still be running when the next tick fires, in which case
    both write to the shared cache and the last one wins.
    """

    def __init__(
        self,
        service: WeatherService,
        default_location: str,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS
    ):
        self.service = service
        self.default_location = default_location
        self.interval_seconds = interval_seconds
        self._subscribers: List[Subscriber] = []
        self._timer: Optional[asyncio.Task] = None
        self._in_flight: Set[asyncio.Task] = set()

    @property
    def is_running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback for every refreshed snapshot.

        Returns:
            A function removing exactly this registration; calling it again is a no-op
        """
        self._subscribers.append(callback)
        removed = False

        def unsubscribe() -> None:
            nonlocal removed
            if removed:
                return
            for index, registered in enumerate(self._subscribers):
                if registered is callback:
                    del self._subscribers[index]
                    break
            removed = True

        return unsubscribe

    def notify(self, snapshot: WeatherSnapshot) -> None:
        """Call every subscriber in subscription order; failures are logged and skipped."""
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception:
                logging.exception(f"Weather subscriber {callback!r} failed")

    async def refresh(self, location: Optional[str] = None) -> WeatherSnapshot:
        """Fetch weather through the cache once and notify subscribers."""
        location = location or self.default_location
        # The provider uses blocking HTTP, keep it off the event loop
        snapshot = await asyncio.to_thread(self.service.get_current, location)
        logging.info(
            f"Weather update for {location}: {snapshot.temperature_c}°C, {snapshot.condition}"
            + (" (demo data)" if snapshot.is_synthetic else "")
        )
        self.notify(snapshot)
        return snapshot

    def start_periodic_updates(
        self,
        location: Optional[str] = None,
        interval_seconds: Optional[float] = None
    ) -> Callable[[], None]:
        """
        Start refreshing every interval, replacing any running cycle.

        Must be called from a running event loop. The first tick fires after
        one interval.

        Returns:
            Function that stops the cycle
        """
        self.stop_periodic_updates()
        location = location or self.default_location
        interval = interval_seconds if interval_seconds is not None else self.interval_seconds
        if interval <= 0:
            raise ValueError(f"Update interval must be positive, got {interval}")

        loop = asyncio.get_running_loop()
        timer = loop.create_task(self._run(location, interval))
        self._timer = timer
        logging.info(f"Started weather updates for {location} every {interval}s")

        def stop() -> None:
            # Only stop the cycle this call started
            if self._timer is timer:
                self.stop_periodic_updates()

        return stop

    def stop_periodic_updates(self) -> None:
        """Cancel the timer. In-flight refreshes finish; subscribers are kept."""
        if self._timer is None:
            return
        self._timer.cancel()
        self._timer = None
        logging.info("Stopped weather updates")

    async def _run(self, location: str, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            task = asyncio.create_task(self._tick(location))
            self._in_flight.add(task)
            task.add_done_callback(self._in_flight.discard)

    async def _tick(self, location: str) -> None:
        try:
            await self.refresh(location)
        except Exception:
            logging.exception(f"Weather update for {location} failed")
