"""Weather provider abstraction - allows swapping different weather APIs."""
from abc import ABC, abstractmethod
from typing import List, Optional
from weather_data import ForecastEntry, WeatherSnapshot


class WeatherProviderBase(ABC):
    """Abstract base class for weather data providers."""

    @abstractmethod
    def get_current(self, location: str) -> WeatherSnapshot:
        """
        Fetch current weather for a location.

        Args:
            location: City/region name, e.g. "Cape Town, South Africa"

        Returns:
            WeatherSnapshot: Current weather information

        Raises:
            WeatherProviderError: If the provider fails to fetch data
        """
        pass

    @abstractmethod
    def get_forecast(self, location: str) -> List[ForecastEntry]:
        """
        Fetch the daily forecast for a location.

        Returns:
            List of at most 5 ForecastEntry objects, one per day, oldest first

        Raises:
            WeatherProviderError: If the provider fails to fetch data
        """
        pass


class WeatherProviderError(Exception):
    """Exception raised when a weather provider fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code  # HTTP status when the provider answered with an error
