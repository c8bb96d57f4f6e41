"""Weather-driven wine pairing rules - pure functions, no I/O."""
from typing import Dict, List, Sequence, Tuple, Union
from weather_data import (
    RAINY, STORMY, SUNNY,
    ForecastEntry, PairingRecommendation, WeatherSnapshot,
)

Reading = Union[WeatherSnapshot, ForecastEntry]

# (band, lower bound in °C), checked from hottest to coldest. Each band covers
# [lower, next band's lower); "cold" is unbounded below.
BAND_THRESHOLDS: Tuple[Tuple[str, float], ...] = (
    ("hot", 30.0),
    ("warm", 20.0),
    ("mild", 10.0),
    ("cold", float("-inf")),
)

PAIRING_BANDS: Dict[str, Dict[str, object]] = {
    "hot": {
        "description": "Best for light, refreshing wines",
        "styles": ("Sparkling Wine", "Rosé", "Sauvignon Blanc", "Riesling", "Gewürztraminer"),
        "tips": "Serve well chilled, avoid high alcohol wines.",
        "pairing": "Oysters, ceviche, salads and grilled seafood",
        "serving_temp": "6-8°C",
        "contextual_tip": "Set up iced sparkling and rosé stations on the pool deck.",
    },
    "warm": {
        "description": "Great for medium-bodied wines",
        "styles": ("Chardonnay", "Pinot Noir", "Merlot", "Viognier"),
        "tips": "Slightly chilled for whites, cellar temperature for reds.",
        "pairing": "Roast chicken, salmon, mushroom risotto",
        "serving_temp": "12-16°C",
        "contextual_tip": "Offer paired tasting flights at the open-air bistro.",
    },
    "mild": {
        "description": "Ideal for bold, warming wines",
        "styles": ("Cabernet Sauvignon", "Shiraz", "Malbec", "Pinotage", "Tawny Port"),
        "tips": "Serve at room temperature, consider decanting.",
        "pairing": "Grilled steak, braised lamb, aged cheese",
        "serving_temp": "16-18°C",
        "contextual_tip": "Decant reds ahead of dinner service in the main dining room.",
    },
    "cold": {
        "description": "Perfect for rich, full-bodied wines",
        "styles": ("Barolo", "Bordeaux", "Port", "Amarone"),
        "tips": "Serve at room temperature, consider warming gently.",
        "pairing": "Slow-cooked stews, game, blue cheese and dark chocolate",
        "serving_temp": "18-20°C",
        "contextual_tip": "Host fireside tastings of fortified wines in the lounge.",
    },
}

INDOOR_TIP = "Move wine service indoors and keep bottles away from the weather."
OUTDOOR_TIP = "Great conditions for outdoor service; keep bottles shaded and on ice."


def band_for(temperature_c: float) -> str:
    """Return the band whose half-open range contains the temperature."""
    for band, lower in BAND_THRESHOLDS:
        if temperature_c >= lower:
            return band
    # NaN compares false against every bound
    raise ValueError(f"Temperature is not a number: {temperature_c!r}")


def recommend(weather: Reading) -> PairingRecommendation:
    """
    Build a pairing recommendation from temperature and condition.

    The temperature band fixes styles, serving range and base tip; the
    condition then appends an indoor (rainy/stormy) or outdoor (sunny)
    service tip to the base tip.
    """
    band = band_for(weather.temperature_c)
    rules = PAIRING_BANDS[band]

    tips = str(rules["tips"])
    if weather.condition in (RAINY, STORMY):
        tips = f"{tips} {INDOOR_TIP}"
    elif weather.condition == SUNNY:
        tips = f"{tips} {OUTDOOR_TIP}"

    return PairingRecommendation(
        band=band,
        temperature_c=weather.temperature_c,
        condition=weather.condition,
        description=str(rules["description"]),
        styles=tuple(rules["styles"]),
        tips=tips,
        pairing_suggestion=str(rules["pairing"]),
        serving_temp_range=str(rules["serving_temp"]),
        contextual_tip=str(rules["contextual_tip"]),
    )


def recommend_forecast(entries: Sequence[ForecastEntry]) -> List[Tuple[ForecastEntry, PairingRecommendation]]:
    """Pair every forecast day with its recommendation, keeping day order."""
    return [(entry, recommend(entry)) for entry in entries]
