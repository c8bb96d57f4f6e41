"""Pairing advisor - one owned instance tying weather, pairing and alerts together."""
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple
from alerts import alert_severity, alerts_for
from destinations import CRUISE_DESTINATIONS, DEFAULT_LOCATION, split_location
from live_updates import DEFAULT_INTERVAL_SECONDS, LiveUpdates, Subscriber
from openweather_provider import OpenWeatherProvider
from pairing import recommend, recommend_forecast
from weather_cache import DEFAULT_TTL_SECONDS, WeatherCache
from weather_data import ForecastEntry, PairingRecommendation, WeatherSnapshot
from weather_service import WeatherService

DEMO_API_KEY = "demo_key"


@dataclass(frozen=True)
class DestinationReport:
    """Everything shown for one location."""
    location: str
    name: str
    country: str
    weather: WeatherSnapshot
    recommendation: PairingRecommendation
    alerts: Tuple[str, ...]
    severity: str


class PairingAdvisor:
    """
    Weather-driven wine pairing advisor.

    Construct once (see build_advisor) and share the instance; it owns the
    cache and the subscriber list.
    """

    def __init__(self, service: WeatherService, updates: LiveUpdates):
        self.service = service
        self.updates = updates

    @property
    def default_location(self) -> str:
        return self.updates.default_location

    def current_weather(self, location: Optional[str] = None) -> WeatherSnapshot:
        return self.service.get_current(location or self.default_location)

    def forecast(self, location: Optional[str] = None) -> List[ForecastEntry]:
        return self.service.get_forecast(location or self.default_location)

    def recommend(self, weather: WeatherSnapshot) -> PairingRecommendation:
        return recommend(weather)

    def alerts_for(self, weather: WeatherSnapshot) -> List[str]:
        return alerts_for(weather)

    def advise(self, location: Optional[str] = None) -> DestinationReport:
        """Fetch weather for a location and derive the recommendation and alerts."""
        location = location or self.default_location
        weather = self.current_weather(location)
        alerts = alerts_for(weather)
        name, country = split_location(location)
        return DestinationReport(
            location=location,
            name=name,
            country=country,
            weather=weather,
            recommendation=recommend(weather),
            alerts=tuple(alerts),
            severity=alert_severity(alerts),
        )

    def advise_destinations(self, locations: Optional[Sequence[str]] = None) -> List[DestinationReport]:
        """Reports for a list of locations (the cruise itinerary by default), in order."""
        locations = CRUISE_DESTINATIONS if locations is None else locations
        return [self.advise(location) for location in locations]

    def forecast_outlook(self, location: Optional[str] = None) -> List[Tuple[ForecastEntry, PairingRecommendation]]:
        """Daily forecast with a recommendation per day."""
        return recommend_forecast(self.forecast(location))

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        return self.updates.subscribe(callback)

    def start_periodic_updates(
        self,
        location: Optional[str] = None,
        interval_seconds: Optional[float] = None
    ) -> Callable[[], None]:
        return self.updates.start_periodic_updates(location, interval_seconds)

    def stop_periodic_updates(self) -> None:
        self.updates.stop_periodic_updates()

    def invalidate_cache(self) -> None:
        self.service.invalidate_all()


def build_advisor(
    api_key: Optional[str],
    base_url: str = OpenWeatherProvider.BASE_URL,
    default_location: str = DEFAULT_LOCATION,
    lang: str = "en",
    timeout: int = 10,
    cache_ttl_seconds: float = DEFAULT_TTL_SECONDS,
    max_retries: int = 2,
    retry_delay_seconds: float = 1.0,
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS
) -> PairingAdvisor:
    """
    Wire provider, cache, service and update loop into an advisor.

    A missing API key (or the placeholder "demo_key") switches the service to
    demo mode, serving synthetic data without touching the network.
    """
    demo_mode = not api_key or api_key == DEMO_API_KEY
    if demo_mode:
        logging.warning("No weather API key configured, serving demo data")

    provider = OpenWeatherProvider(
        api_key=api_key or DEMO_API_KEY,
        base_url=base_url,
        lang=lang,
        timeout=timeout,
    )
    service = WeatherService(
        provider=provider,
        cache=WeatherCache(ttl_seconds=cache_ttl_seconds),
        max_retries=max_retries,
        retry_delay_seconds=retry_delay_seconds,
        demo_mode=demo_mode,
    )
    updates = LiveUpdates(service, default_location, interval_seconds)
    logging.info(f"Pairing advisor ready (cache ttl={cache_ttl_seconds}s, default location={default_location})")
    return PairingAdvisor(service, updates)
