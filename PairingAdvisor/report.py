"""Text report formatting - pure functions for testability."""
from typing import List, Sequence, Tuple
from alerts import describe_alert
from weather_data import ForecastEntry, PairingRecommendation, WeatherSnapshot

DEMO_LABEL = "[DEMO DATA]"

SEVERITY_MARKERS = {
    "error": "!!",
    "warning": "!",
    "success": "ok",
}


def condition_label(condition: str) -> str:
    """
    Short display text for a condition tag.

    Args:
        condition: Condition tag, e.g. "rainy"

    Returns:
        Display string (e.g., "Rain", "Clear")
    """
    condition_map = {
        "sunny": "Clear",
        "cloudy": "Cloudy",
        "rainy": "Rain",
        "cold": "Snow",
        "stormy": "Storm",
    }
    return condition_map.get(condition, condition.capitalize())


def format_weather_lines(weather: WeatherSnapshot) -> List[str]:
    header = f"{weather.city}, {weather.country}" if weather.country else weather.city
    if weather.is_synthetic:
        header = f"{header} {DEMO_LABEL}"
    return [
        header,
        f"{round(weather.temperature_c):+d}°C  {condition_label(weather.condition)} ({weather.description})",
        f"Hum {int(weather.humidity_pct)}%  Wind {weather.wind_speed_kph:.1f}km/h  "
        f"Vis {weather.visibility_km:.1f}km  {int(weather.pressure_hpa)}hPa",
        f"Sun {weather.sunrise:%H:%M}-{weather.sunset:%H:%M} UTC, observed {weather.observed_at:%Y-%m-%d %H:%M} UTC",
    ]


def format_recommendation_lines(recommendation: PairingRecommendation) -> List[str]:
    return [
        f"{recommendation.description} ({recommendation.band}, serve at {recommendation.serving_temp_range})",
        "Wines: " + ", ".join(recommendation.styles),
        f"Food: {recommendation.pairing_suggestion}",
        f"Tip: {recommendation.tips}",
        f"Cruise tip: {recommendation.contextual_tip}",
    ]


def format_alert_lines(alerts: Sequence[str], severity: str = "warning") -> List[str]:
    marker = SEVERITY_MARKERS.get(severity, "!")
    return [f"[{marker}] {describe_alert(alert)}" for alert in alerts]


def format_forecast_lines(outlook: Sequence[Tuple[ForecastEntry, PairingRecommendation]]) -> List[str]:
    """One line per forecast day: date, temperature, condition and top wine."""
    lines = []
    for entry, recommendation in outlook:
        line = (
            f"{entry.date:%a %d %b}  {round(entry.temperature_c):+d}°C  "
            f"{condition_label(entry.condition):<7} -> {recommendation.styles[0]}"
        )
        if entry.is_synthetic:
            line = f"{line} {DEMO_LABEL}"
        lines.append(line)
    return lines


def format_report(report) -> str:
    """Render a DestinationReport as a multi-line block."""
    lines = format_weather_lines(report.weather)
    lines += format_alert_lines(report.alerts, report.severity)
    lines += format_recommendation_lines(report.recommendation)
    return "\n".join(lines)
