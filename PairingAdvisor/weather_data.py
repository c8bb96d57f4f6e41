"""Weather domain model - pure data structures independent of any API."""
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Optional, Tuple

# Condition tags used by the pairing and alert rules
SUNNY = "sunny"
CLOUDY = "cloudy"
RAINY = "rainy"
COLD = "cold"
STORMY = "stormy"
OTHER = "other"

CONDITION_TAGS = (SUNNY, CLOUDY, RAINY, COLD, STORMY, OTHER)


@dataclass(frozen=True)
class WeatherSnapshot:
    """Current conditions for one location, independent of any specific API."""
    location: str  # location string as requested, e.g. "Cape Town, South Africa"
    city: str
    country: str
    temperature_c: float
    condition: str  # one of CONDITION_TAGS, or a raw provider category
    description: str  # e.g. "broken clouds", "light rain"
    humidity_pct: float
    wind_speed_kph: float
    pressure_hpa: float
    visibility_km: float
    sunrise: datetime
    sunset: datetime
    observed_at: datetime  # UTC
    is_synthetic: bool = False  # True for locally generated demo data

    def age_seconds(self, now: Optional[datetime] = None) -> float:
        """Seconds elapsed since the observation."""
        now = now or datetime.now(timezone.utc)
        return (now - self.observed_at).total_seconds()


@dataclass(frozen=True)
class ForecastEntry:
    """One daily (mid-day) forecast reading."""
    date: date
    observed_at: datetime  # UTC timestamp of the selected reading
    temperature_c: float
    condition: str
    description: str
    humidity_pct: float
    wind_speed_kph: float
    is_synthetic: bool = False


@dataclass(frozen=True)
class CacheEntry:
    """A cached value and the epoch time it was fetched."""
    value: Any
    fetched_at: float


@dataclass(frozen=True)
class PairingRecommendation:
    """Wine pairing advice for a single weather reading."""
    band: str  # "hot", "warm", "mild" or "cold"
    temperature_c: float
    condition: str
    description: str
    styles: Tuple[str, ...]  # priority order
    tips: str
    pairing_suggestion: str
    serving_temp_range: str
    contextual_tip: str  # cruise / event service advice
