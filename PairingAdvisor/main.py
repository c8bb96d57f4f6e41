"""Command line wine pairing advisor driven by live weather."""
import argparse
import asyncio
import logging
import os
import signal
import sys
from typing import Optional, Tuple

from dotenv import load_dotenv

from advisor import PairingAdvisor, build_advisor
from destinations import DEFAULT_LOCATION, REGIONS, filter_destinations
from openweather_provider import OpenWeatherProvider
from report import format_forecast_lines, format_report


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser("Weather-based wine pairing advisor")
    parser.add_argument("--location", help="City, Country (defaults to WEATHER_DEFAULT_LOCATION)")
    parser.add_argument("--forecast", action="store_true", help="Show the 5 day pairing outlook")
    parser.add_argument("--cruise", action="store_true", help="Report on every cruise destination")
    parser.add_argument("--region", choices=["all"] + list(REGIONS), default="all")
    parser.add_argument("--watch", action="store_true", help="Keep running and print live updates")
    parser.add_argument("--refresh", type=float, default=300.0, help="Seconds between live updates")
    parser.add_argument("--cache-ttl", type=int, default=300)
    parser.add_argument("--max-retries", type=int, default=2)
    parser.add_argument("--retry-delay", type=float, default=1.0)
    parser.add_argument("--timeout", type=int, default=10, help="HTTP timeout in seconds")
    parser.add_argument("--log-file", default=None)
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def setup_logging(log_file: Optional[str], verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers
    )


def load_config() -> Tuple[Optional[str], str, str, str]:
    load_dotenv()
    api_key = os.getenv("WEATHER_API_KEY")
    base_url = os.getenv("WEATHER_BASE_URL", OpenWeatherProvider.BASE_URL)
    location = os.getenv("WEATHER_DEFAULT_LOCATION", DEFAULT_LOCATION)
    lang = os.getenv("WEATHER_LANG", "en")

    logging.info("Configuration loaded: base_url=%s location=%s lang=%s", base_url, location, lang)
    return api_key, base_url, location, lang


def print_location(advisor: PairingAdvisor, location: str, with_forecast: bool) -> None:
    print(format_report(advisor.advise(location)))
    if with_forecast:
        print("5 day outlook:")
        for line in format_forecast_lines(advisor.forecast_outlook(location)):
            print(f"  {line}")
    print()


async def watch(advisor: PairingAdvisor, location: str, interval: float) -> None:
    """Print a report for every live update until cancelled."""
    def on_update(weather) -> None:
        recommendation = advisor.recommend(weather)
        alerts = advisor.alerts_for(weather)
        print(f"{weather.observed_at:%H:%M:%S} {location}: {round(weather.temperature_c):+d}°C "
              f"{weather.condition} -> {', '.join(recommendation.styles[:3])}"
              + (f" [alerts: {', '.join(alerts)}]" if alerts else ""),
              flush=True)

    unsubscribe = advisor.subscribe(on_update)
    stop = advisor.start_periodic_updates(location, interval)
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:  # pragma: no cover - Windows
            pass

    try:
        await advisor.updates.refresh(location)
        await stop_event.wait()
        logging.info("Received shutdown signal")
    finally:
        stop()
        unsubscribe()


def main(argv=None) -> None:
    args = parse_args(argv)
    setup_logging(args.log_file, args.verbose)
    api_key, base_url, default_location, lang = load_config()

    advisor = build_advisor(
        api_key,
        base_url=base_url,
        default_location=default_location,
        lang=lang,
        timeout=args.timeout,
        cache_ttl_seconds=args.cache_ttl,
        max_retries=args.max_retries,
        retry_delay_seconds=args.retry_delay,
        interval_seconds=args.refresh,
    )
    location = args.location or default_location

    if args.cruise:
        for destination in filter_destinations(args.region):
            print_location(advisor, destination, args.forecast)
    else:
        print_location(advisor, location, args.forecast)

    if args.watch:
        try:
            asyncio.run(watch(advisor, location, max(args.refresh, 1.0)))
        except KeyboardInterrupt:
            logging.info("Stopping live updates")


if __name__ == "__main__":
    main()
