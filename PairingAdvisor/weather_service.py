"""Weather service with caching, retries and synthetic fallback."""
import logging
import random
import time
from typing import Callable, List, Optional, TypeVar
from weather_provider import WeatherProviderBase, WeatherProviderError
from weather_cache import WeatherCache
from weather_data import ForecastEntry, WeatherSnapshot
from demo_weather import synthetic_forecast, synthetic_snapshot

T = TypeVar("T")

NON_RETRYABLE_STATUS = (400, 401, 404)


class WeatherService:
    """
    Service that wraps a weather provider with caching and graceful degradation.

    Results are cached per location (see WeatherCache). When the provider
    cannot deliver, callers get synthetic demo data marked ``is_synthetic``
    instead of an exception, so a recommendation is always available.
    """

    def __init__(
        self,
        provider: WeatherProviderBase,
        cache: Optional[WeatherCache] = None,
        max_retries: int = 2,
        retry_delay_seconds: float = 1.0,
        rng: Optional[random.Random] = None,
        demo_mode: bool = False
    ):
        """
        Initialize weather service.

        Args:
            provider: Weather provider to use
            cache: Cache shared with other consumers (a private one is created if omitted)
            max_retries: Maximum number of attempts per fetch
            retry_delay_seconds: Base delay between attempts (multiplied by attempt number)
            rng: Random source for synthetic data
            demo_mode: Skip the provider and always serve synthetic data
        """
        self.provider = provider
        self.cache = cache if cache is not None else WeatherCache()
        self.max_retries = max(1, max_retries)
        self.retry_delay_seconds = retry_delay_seconds
        self.rng = rng or random.Random()
        self.demo_mode = demo_mode

    def get_current(self, location: str) -> WeatherSnapshot:
        """
        Get current weather for a location, using the cache if still fresh.

        Returns:
            WeatherSnapshot: Cached, freshly fetched or synthetic weather
        """
        if self.demo_mode:
            logging.debug(f"Demo mode: synthetic weather for {location}")
            return synthetic_snapshot(location, self.rng)

        cached = self.cache.get(location)
        if cached is not None:
            return cached

        try:
            snapshot = self._fetch_with_retries(lambda: self.provider.get_current(location))
        except WeatherProviderError as e:
            logging.error(f"Weather unavailable for {location}, using demo data: {e}")
            return synthetic_snapshot(location, self.rng)

        self.cache.put(location, snapshot)
        return snapshot

    def get_forecast(self, location: str) -> List[ForecastEntry]:
        """
        Get the daily forecast for a location, using the cache if still fresh.

        Returns:
            At most 5 ForecastEntry objects, oldest first
        """
        if self.demo_mode:
            logging.debug(f"Demo mode: synthetic forecast for {location}")
            return synthetic_forecast(location, rng=self.rng)

        cached = self.cache.get_forecast(location)
        if cached is not None:
            return cached

        try:
            entries = self._fetch_with_retries(lambda: self.provider.get_forecast(location))
        except WeatherProviderError as e:
            logging.error(f"Forecast unavailable for {location}, using demo data: {e}")
            return synthetic_forecast(location, rng=self.rng)

        self.cache.put_forecast(location, entries)
        return list(entries)

    def invalidate_all(self) -> None:
        """Force the next requests to go to the provider."""
        self.cache.invalidate_all()

    def _fetch_with_retries(self, fetch: Callable[[], T]) -> T:
        logging.info("Fetching weather data from provider...")
        last_error = None
        for attempt in range(self.max_retries):
            try:
                logging.debug(f"Weather fetch attempt {attempt + 1}/{self.max_retries}")
                return fetch()
            except WeatherProviderError as e:
                last_error = e
                logging.warning(f"Weather fetch attempt {attempt + 1} failed: {e}")
                # Don't retry on 4xx errors (bad request, auth, unknown city)
                if e.status_code in NON_RETRYABLE_STATUS:
                    logging.error("Non-retryable error (4xx), stopping retries")
                    break
                if attempt < self.max_retries - 1:
                    retry_delay = self.retry_delay_seconds * (attempt + 1)
                    logging.info(f"Retrying in {retry_delay}s...")
                    time.sleep(retry_delay)

        raise WeatherProviderError(
            f"Failed to fetch weather after {attempt + 1} attempt(s): {last_error}",
            status_code=last_error.status_code if last_error else None
        )
