import pytest
from unittest.mock import MagicMock

import requests

from lifetunes.adapters.clients.weather import (
    WeatherAPIClient, WeatherCondition, WeatherData, WMOInterpreter, describe_weather,
)
from lifetunes.core.models import Coordinate


class TestWeatherClient:
    """Test suite for Open-Meteo current conditions."""

    def setup_method(self):
        self.session = MagicMock()
        self.client = WeatherAPIClient(session=self.session)
        self.here = Coordinate(37.7749, -122.4194)

    # ========================================================================
    # 1. PARSING
    # ========================================================================

    def test_parse_current_success(self):
        result = self.client._parse_current({"current": {"weather_code": 0, "temperature_2m": 20.4}})

        assert isinstance(result, WeatherData)
        assert result.condition == "Sunny"
        assert result.condition_code is WeatherCondition.SUNNY
        assert str(result) == "Sunny, 20C"

    def test_parse_current_empty_or_malformed(self):
        assert self.client._parse_current({}) is None
        assert self.client._parse_current({"current": {}}) is None
        assert self.client._parse_current({"current": {"weather_code": 61}}) is None

    def test_unknown_wmo_code(self):
        assert WMOInterpreter.interpret(42) == ("Unknown", WeatherCondition.CLOUDY)

    # ========================================================================
    # 2. HTTP
    # ========================================================================

    def test_fetch_current(self):
        response = MagicMock()
        response.json.return_value = {"current": {"weather_code": 63, "temperature_2m": 11.0}}
        self.session.get.return_value = response

        result = self.client.fetch_current(self.here)

        assert result.condition == "Rain"
        params = self.session.get.call_args.kwargs["params"]
        assert params["latitude"] == 37.7749
        assert params["current"] == "weather_code,temperature_2m"

    def test_fetch_current_network_error(self):
        self.session.get.side_effect = requests.ConnectionError("offline")
        assert self.client.fetch_current(self.here) is None

    def test_fetch_current_http_error(self):
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError("500")
        self.session.get.return_value = response
        assert self.client.fetch_current(self.here) is None

    def test_describe_weather(self):
        response = MagicMock()
        response.json.return_value = {"current": {"weather_code": 3, "temperature_2m": 14.6}}
        self.session.get.return_value = response

        assert describe_weather(self.here, client=self.client) == "Overcast, 15C"

    def test_describe_weather_unavailable(self):
        self.session.get.side_effect = requests.Timeout("slow")
        assert describe_weather(self.here, client=self.client) is None
