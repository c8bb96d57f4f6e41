"""Synthetic demo weather used when the real provider is unavailable."""
import random
from datetime import datetime, time, timedelta, timezone
from typing import List, Optional
from weather_data import CLOUDY, COLD, RAINY, SUNNY, ForecastEntry, WeatherSnapshot
from destinations import split_location

# (temperature_c, description, condition)
DEMO_CONDITIONS = (
    (25.0, "sunny", SUNNY),
    (18.0, "cloudy", CLOUDY),
    (12.0, "rainy", RAINY),
    (32.0, "hot", SUNNY),
    (8.0, "cold", COLD),
)


def synthetic_snapshot(location: str, rng: Optional[random.Random] = None) -> WeatherSnapshot:
    """
    Build a demo snapshot for a location.

    The condition is one of DEMO_CONDITIONS picked at random; humidity and
    wind are randomized. The result is always marked ``is_synthetic``.
    """
    rng = rng or random.Random()
    temp, description, condition = rng.choice(DEMO_CONDITIONS)
    city, country = split_location(location)
    now = datetime.now(timezone.utc)
    today = now.date()

    return WeatherSnapshot(
        location=location,
        city=city,
        country=country,
        temperature_c=temp,
        condition=condition,
        description=description,
        humidity_pct=float(rng.randint(40, 79)),
        wind_speed_kph=float(rng.randint(5, 25)),
        pressure_hpa=1013.0,
        visibility_km=10.0,
        sunrise=datetime.combine(today, time(6, 0), tzinfo=timezone.utc),
        sunset=datetime.combine(today, time(18, 0), tzinfo=timezone.utc),
        observed_at=now,
        is_synthetic=True,
    )


def synthetic_forecast(
    location: str,
    days: int = 5,
    rng: Optional[random.Random] = None
) -> List[ForecastEntry]:
    """Build a demo forecast: one noon entry per day starting today, around 20°C."""
    rng = rng or random.Random()
    today = datetime.now(timezone.utc).date()
    entries = []
    for i in range(days):
        day = today + timedelta(days=i)
        entries.append(ForecastEntry(
            date=day,
            observed_at=datetime.combine(day, time(12, 0), tzinfo=timezone.utc),
            temperature_c=float(round(20 + (rng.random() - 0.5) * 10)),
            condition=CLOUDY,
            description="partly cloudy",
            humidity_pct=float(rng.randint(40, 79)),
            wind_speed_kph=float(rng.randint(5, 25)),
            is_synthetic=True,
        ))
    return entries
