"""OpenWeather 2.5 API provider implementation (current weather and 5 day forecast)."""
import logging
import re
import requests
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Tuple
from weather_provider import WeatherProviderBase, WeatherProviderError
from weather_data import (
    CLOUDY, COLD, OTHER, RAINY, STORMY, SUNNY,
    ForecastEntry, WeatherSnapshot,
)

# Substring rules checked in order against the lowercased description.
CONDITION_RULES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("clear", "sunny"), SUNNY),
    (("cloud",), CLOUDY),
    (("rain", "drizzle"), RAINY),
    (("snow",), COLD),
    (("thunder",), STORMY),
    (("fog", "mist"), CLOUDY),
)

MS_TO_KPH = 3.6
MAX_FORECAST_DAYS = 5
# A reading further than this from local noon does not represent the day
NOON_TOLERANCE = timedelta(minutes=90)
# Raised while reading a payload of unexpected shape or with out-of-range epochs
PARSE_ERRORS = (KeyError, IndexError, ValueError, TypeError, AttributeError, OverflowError, OSError)
APPID_PATTERN = re.compile(r"appid=[^&\s]+")


def map_condition(main: str, description: str) -> str:
    """
    Normalize an OpenWeather condition to a condition tag.

    The first matching rule in CONDITION_RULES wins. Unmatched conditions
    pass through as the lowercased provider category.

    Args:
        main: Provider category, e.g. "Clouds", "Haze"
        description: Human readable description, e.g. "broken clouds"

    Returns:
        Condition tag string
    """
    text = (description or "").lower()
    for needles, tag in CONDITION_RULES:
        if any(needle in text for needle in needles):
            return tag
    return (main or "").strip().lower() or OTHER


def redact_api_key(text: str) -> str:
    """Mask the appid query parameter in a URL or error message."""
    return APPID_PATTERN.sub("appid=***", text)


def _utc(epoch_seconds: float) -> datetime:
    return datetime.fromtimestamp(epoch_seconds, tz=timezone.utc)


def select_noon_readings(
    items: List[Dict[str, Any]],
    timezone_offset: int = 0,
    max_days: int = MAX_FORECAST_DAYS
) -> List[Tuple[date, Dict[str, Any]]]:
    """
    Pick one reading per local calendar day from the 3-hourly forecast list.

    The reading closest to local noon wins (earliest on a tie). Days without
    a reading within NOON_TOLERANCE of noon are skipped.

    Args:
        items: Forecast "list" entries, each with an epoch "dt"
        timezone_offset: Location offset from UTC in seconds
        max_days: Maximum number of days to return

    Returns:
        List of (local date, item) tuples in chronological order
    """
    offset = timedelta(seconds=timezone_offset)
    best: Dict[date, Tuple[timedelta, Dict[str, Any]]] = {}

    for item in sorted(items, key=lambda i: i["dt"]):
        local = _utc(item["dt"]) + offset
        noon = local.replace(hour=12, minute=0, second=0, microsecond=0)
        distance = abs(local - noon)
        if distance > NOON_TOLERANCE:
            continue
        day = local.date()
        if day not in best or distance < best[day][0]:
            best[day] = (distance, item)

    return [(day, best[day][1]) for day in sorted(best)][:max_days]


class OpenWeatherProvider(WeatherProviderBase):
    """
    Weather provider using the OpenWeather 2.5 API.

    Uses the free Current Weather (/weather) and 5 day / 3 hour Forecast
    (/forecast) endpoints, queried by city name.
    """

    BASE_URL = "https://api.openweathermap.org/data/2.5"

    def __init__(
        self,
        api_key: str,
        base_url: str = BASE_URL,
        units: str = "metric",
        lang: str = "en",
        timeout: int = 10
    ):
        """
        Initialize OpenWeather provider.

        Args:
            api_key: OpenWeather API key
            base_url: API root, without trailing endpoint
            units: Temperature units; pairing rules expect "metric"
            lang: Language code for descriptions (e.g., "en", "de")
            timeout: HTTP request timeout in seconds
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.units = units
        self.lang = lang
        self.timeout = timeout

    def get_current(self, location: str) -> WeatherSnapshot:
        """
        Fetch current weather from the /weather endpoint.

        Raises:
            WeatherProviderError: If the API request fails or the payload is malformed
        """
        data = self._request("weather", location)
        try:
            weather_array = data.get("weather", [])
            if not weather_array:
                logging.error("Response missing 'weather' array")
                raise WeatherProviderError("Response missing 'weather' array")
            weather = weather_array[0]

            main_data = data.get("main", {})
            if not main_data:
                raise WeatherProviderError("Response missing 'main' block")

            sys_data = data.get("sys", {}) or {}
            wind_data = data.get("wind", {}) or {}
            description = weather.get("description", "")
            observed = data.get("dt")

            snapshot = WeatherSnapshot(
                location=location,
                city=data.get("name") or location.split(",")[0].strip(),
                country=sys_data.get("country", ""),
                temperature_c=float(main_data["temp"]),
                condition=map_condition(weather.get("main", ""), description),
                description=description,
                humidity_pct=float(main_data.get("humidity", 0.0)),
                wind_speed_kph=round(float(wind_data.get("speed", 0.0)) * MS_TO_KPH, 1),
                pressure_hpa=float(main_data.get("pressure", 0.0)),
                visibility_km=float(data.get("visibility", 0)) / 1000,
                sunrise=_utc(sys_data.get("sunrise", 0)),
                sunset=_utc(sys_data.get("sunset", 0)),
                observed_at=_utc(observed) if observed else datetime.now(timezone.utc),
            )
        except PARSE_ERRORS as e:
            logging.error(f"Failed to parse current weather: {e}", exc_info=True)
            raise WeatherProviderError(f"Failed to parse response: {str(e)}")

        logging.info(f"Parsed weather for {location}: {snapshot.temperature_c}°C, {snapshot.condition}")
        return snapshot

    def get_forecast(self, location: str) -> List[ForecastEntry]:
        """
        Fetch the 5 day forecast and reduce it to one noon reading per day.

        Raises:
            WeatherProviderError: If the API request fails or the payload is malformed
        """
        data = self._request("forecast", location)
        try:
            items = data.get("list")
            if not items:
                raise WeatherProviderError("Response missing 'list' array")
            tz_offset = (data.get("city") or {}).get("timezone", 0)

            entries = []
            for day, item in select_noon_readings(items, tz_offset):
                weather = (item.get("weather") or [{}])[0]
                description = weather.get("description", "")
                entries.append(ForecastEntry(
                    date=day,
                    observed_at=_utc(item["dt"]),
                    temperature_c=float(item["main"]["temp"]),
                    condition=map_condition(weather.get("main", ""), description),
                    description=description,
                    humidity_pct=float(item["main"].get("humidity", 0.0)),
                    wind_speed_kph=round(float((item.get("wind") or {}).get("speed", 0.0)) * MS_TO_KPH, 1),
                ))
        except PARSE_ERRORS as e:
            logging.error(f"Failed to parse forecast: {e}", exc_info=True)
            raise WeatherProviderError(f"Failed to parse response: {str(e)}")

        logging.info(f"Parsed {len(entries)} forecast days for {location}")
        return entries

    def _request(self, endpoint: str, location: str) -> Dict[str, Any]:
        """Perform a GET against an endpoint and return the decoded JSON body."""
        url = f"{self.base_url}/{endpoint}"
        params = {
            "q": location,
            "appid": self.api_key,
            "units": self.units,
            "lang": self.lang,
        }

        try:
            logging.info(f"Making OpenWeather API request: {url}")
            logging.debug(f"Request parameters: q={location}, units={self.units}, lang={self.lang}")

            response = requests.get(url, params=params, timeout=self.timeout)

            logging.info(f"API response status: {response.status_code}")

            if not response.ok:
                logging.error(f"API request failed with status {response.status_code}")
                self._handle_error_response(response)

            data = response.json()
            if not isinstance(data, dict):
                raise WeatherProviderError("Response body is not a JSON object")
            logging.debug(f"API response (truncated): {str(data)[:500]}...")
            return data

        except ValueError as e:
            # Undecodable bodies and invalid URLs; the latter may quote the key
            reason = redact_api_key(str(e))
            logging.error(f"Failed to decode API response: {reason}")
            raise WeatherProviderError(f"Failed to parse response: {reason}")
        except requests.exceptions.RequestException as e:
            # Exception text carries the full URL, including the API key
            reason = redact_api_key(str(e))
            logging.error(f"Network error during API request: {reason}")
            raise WeatherProviderError(f"Network error: {reason}")

    def _handle_error_response(self, response: requests.Response) -> None:
        """Parse and raise error from OpenWeather error response."""
        try:
            error_data = response.json()
            cod = error_data.get("cod", response.status_code)
            message = error_data.get("message", "Unknown error")

            logging.error(f"OpenWeather API error response: {error_data}")

            raise WeatherProviderError(
                f"OpenWeather API error {cod}: {message}",
                status_code=response.status_code
            )
        except (ValueError, AttributeError):
            # Not a JSON object, use HTTP status
            logging.error(f"Non-JSON error response: HTTP {response.status_code}, body: {response.text[:500]}")
            raise WeatherProviderError(
                f"HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code
            )
