"""Operational alerts for wine service, derived from a weather reading."""
from typing import List, Sequence, Union
from weather_data import RAINY, STORMY, ForecastEntry, WeatherSnapshot

HEAT = "heat"
COLD = "cold"
WIND = "wind"
HUMIDITY = "humidity"
STORM = "storm"

# Evaluation (and output) order
ALERT_ORDER = (HEAT, COLD, WIND, HUMIDITY, STORM)

HEAT_THRESHOLD_C = 35.0
COLD_THRESHOLD_C = 5.0
WIND_THRESHOLD_KPH = 20.0
HUMIDITY_THRESHOLD_PCT = 80.0

ALERT_MESSAGES = {
    HEAT: "High temperature alert: keep white and sparkling wines well chilled.",
    COLD: "Low temperature alert: protect reds from chilling, serve indoors.",
    WIND: "High winds alert: secure glassware and bottles on open decks.",
    HUMIDITY: "High humidity alert: check corks and labels in storage.",
    STORM: "Storm alert: move wine service indoors.",
}

# Alerts that make the whole report critical
CRITICAL_ALERTS = (HEAT, WIND)


def alerts_for(weather: Union[WeatherSnapshot, ForecastEntry]) -> List[str]:
    """
    Evaluate every alert rule independently.

    Returns:
        Alert tags in ALERT_ORDER; empty when nothing fires
    """
    alerts = []
    if weather.temperature_c >= HEAT_THRESHOLD_C:
        alerts.append(HEAT)
    if weather.temperature_c <= COLD_THRESHOLD_C:
        alerts.append(COLD)
    if weather.wind_speed_kph > WIND_THRESHOLD_KPH:
        alerts.append(WIND)
    if weather.humidity_pct > HUMIDITY_THRESHOLD_PCT:
        alerts.append(HUMIDITY)
    if weather.condition in (RAINY, STORMY):
        alerts.append(STORM)
    return alerts


def describe_alert(alert: str) -> str:
    """Banner text for an alert tag."""
    return ALERT_MESSAGES.get(alert, alert)


def alert_severity(alerts: Sequence[str]) -> str:
    """Classify a set of alerts as "error", "warning" or "success"."""
    if any(alert in CRITICAL_ALERTS for alert in alerts):
        return "error"
    if alerts:
        return "warning"
    return "success"
