"""Tests for the command line entry point."""
import logging
import sys
from unittest.mock import patch
import main


def test_parse_args_defaults():
    args = main.parse_args([])

    assert args.location is None
    assert args.region == "all"
    assert args.refresh == 300.0
    assert args.cache_ttl == 300
    assert args.watch is False


def test_load_config_from_environment(monkeypatch):
    monkeypatch.setenv("WEATHER_API_KEY", "abc123")
    monkeypatch.setenv("WEATHER_DEFAULT_LOCATION", "Bordeaux, France")
    monkeypatch.delenv("WEATHER_BASE_URL", raising=False)

    with patch("main.load_dotenv"):
        api_key, base_url, location, lang = main.load_config()

    assert api_key == "abc123"
    assert base_url == "https://api.openweathermap.org/data/2.5"
    assert location == "Bordeaux, France"


def test_main_demo_report(monkeypatch, capsys):
    """Without an API key the CLI prints labelled demo data."""
    monkeypatch.delenv("WEATHER_API_KEY", raising=False)
    monkeypatch.delenv("WEATHER_DEFAULT_LOCATION", raising=False)

    with patch("main.load_dotenv"), patch("openweather_provider.requests.get") as mock_get:
        main.main(["--location", "Tuscany, Italy", "--forecast"])
        mock_get.assert_not_called()

    out = capsys.readouterr().out
    assert "Tuscany, Italy [DEMO DATA]" in out
    assert "Wines: " in out
    assert "5 day outlook:" in out


def test_main_cruise_region(monkeypatch, capsys):
    monkeypatch.delenv("WEATHER_API_KEY", raising=False)

    with patch("main.load_dotenv"):
        main.main(["--cruise", "--region", "caribbean"])

    out = capsys.readouterr().out
    assert "Miami, USA" in out
    assert "Montego Bay, Jamaica" in out
    assert "Bordeaux, France" not in out


def test_setup_logging_writes_to_stderr(tmp_path):
    log_file = tmp_path / "advisor.log"

    with patch("main.logging.basicConfig") as basic_config:
        main.setup_logging(str(log_file), verbose=True)

    kwargs = basic_config.call_args.kwargs
    handlers = kwargs["handlers"]
    assert kwargs["level"] == logging.DEBUG
    assert handlers[0].stream is sys.stderr
    assert isinstance(handlers[1], logging.FileHandler)
    for handler in handlers:
        handler.close()
