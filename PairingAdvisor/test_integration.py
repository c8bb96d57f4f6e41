"""Integration tests - can optionally hit real API (disabled by default)."""
import os
import pytest
from openweather_provider import OpenWeatherProvider
from weather_service import WeatherService
from pairing import recommend


@pytest.mark.skipif(
    not os.environ.get("OPENWEATHER_API_KEY"),
    reason="OPENWEATHER_API_KEY not set - skipping integration test"
)
def test_openweather_integration():
    """
    Integration test that hits the real OpenWeather API.

    Set OPENWEATHER_API_KEY environment variable to run this test.
    """
    provider = OpenWeatherProvider(api_key=os.environ.get("OPENWEATHER_API_KEY"))

    weather = provider.get_current("Cape Town, South Africa")
    forecast = provider.get_forecast("Cape Town, South Africa")

    assert weather.temperature_c is not None
    assert weather.is_synthetic is False
    assert 1 <= len(forecast) <= 5
    assert recommend(weather).styles


@pytest.mark.skipif(
    not os.environ.get("OPENWEATHER_API_KEY"),
    reason="OPENWEATHER_API_KEY not set - skipping integration test"
)
def test_weather_service_integration():
    """Integration test for WeatherService with real API."""
    provider = OpenWeatherProvider(api_key=os.environ.get("OPENWEATHER_API_KEY"))
    service = WeatherService(provider)

    # First call
    weather1 = service.get_current("Bordeaux, France")
    assert weather1.is_synthetic is False

    # Second call should use cache
    weather2 = service.get_current("bordeaux, france")
    assert weather2 is weather1
