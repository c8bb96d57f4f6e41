"""In-memory TTL cache for current weather and forecasts, keyed by location."""
import logging
import time
from typing import Callable, Dict, List, Optional
from weather_data import CacheEntry, ForecastEntry, WeatherSnapshot

DEFAULT_TTL_SECONDS = 300  # 5 minutes


def normalize_location(location: str) -> str:
    """Canonical cache key for a location string."""
    return location.strip().lower()


class WeatherCache:
    """
    Time-bounded cache of fetched weather data.

    An entry is valid while ``now - fetched_at < ttl_seconds``; expired
    entries are reported as misses and replaced by the next ``put``. There is
    no other eviction, so the cache grows with the number of distinct
    locations requested.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time
    ):
        """
        Args:
            ttl_seconds: How long an entry stays valid
            clock: Returns the current epoch time in seconds
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._current: Dict[str, CacheEntry] = {}
        self._forecast: Dict[str, CacheEntry] = {}

    def get(self, location: str) -> Optional[WeatherSnapshot]:
        """Return the cached current weather, or None on a miss."""
        return self._lookup(self._current, location, "weather")

    def put(self, location: str, snapshot: WeatherSnapshot) -> None:
        """Store current weather, superseding any previous entry."""
        self._current[normalize_location(location)] = CacheEntry(snapshot, self._clock())

    def get_forecast(self, location: str) -> Optional[List[ForecastEntry]]:
        """Return the cached forecast, or None on a miss."""
        entries = self._lookup(self._forecast, location, "forecast")
        return list(entries) if entries is not None else None

    def put_forecast(self, location: str, entries: List[ForecastEntry]) -> None:
        """Store a forecast, superseding any previous entry."""
        self._forecast[normalize_location(location)] = CacheEntry(list(entries), self._clock())

    def entry_age(self, location: str) -> Optional[float]:
        """Seconds since the current-weather entry was stored, or None if absent."""
        entry = self._current.get(normalize_location(location))
        if entry is None:
            return None
        return self._clock() - entry.fetched_at

    def invalidate_all(self) -> None:
        """Drop every current-weather and forecast entry."""
        logging.info(f"Invalidating weather cache ({len(self._current)} current, {len(self._forecast)} forecast)")
        self._current.clear()
        self._forecast.clear()

    def _lookup(self, store: Dict[str, CacheEntry], location: str, kind: str):
        key = normalize_location(location)
        entry = store.get(key)
        if entry is None:
            logging.debug(f"Cache miss for {kind} '{key}'")
            return None

        age = self._clock() - entry.fetched_at
        if age < self.ttl_seconds:
            logging.debug(f"Using cached {kind} for '{key}' (age: {age:.1f}s, TTL: {self.ttl_seconds}s)")
            return entry.value

        logging.info(f"Cached {kind} for '{key}' expired (age: {age:.1f}s >= TTL: {self.ttl_seconds}s)")
        return None
