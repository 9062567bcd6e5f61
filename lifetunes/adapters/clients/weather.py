"""
Current-weather lookup via the Open-Meteo API.

Used to annotate mood records with the conditions at the moment they were
logged. Every failure degrades to None; weather is optional context.
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Optional

import requests

from lifetunes.core.models import Coordinate

logger = logging.getLogger(__name__)


# ============================================================================
# CONSTANTS & CONFIGURATION
# ============================================================================

API_URL = "https://api.open-meteo.com/v1/forecast"
REQUEST_TIMEOUT = 10


# ============================================================================
# ENUMS
# ============================================================================

class WeatherCondition(IntEnum):
    """Coarse condition buckets for WMO codes."""
    SUNNY = 0
    CLOUDY = 1
    FOG = 2
    DRIZZLE = 3
    RAINY = 4
    SNOW = 5
    SHOWERS = 6
    THUNDERSTORM = 7


# ============================================================================
# DATA CLASSES
# ============================================================================

@dataclass
class WeatherData:
    """Current conditions at a coordinate."""
    condition: str
    condition_code: WeatherCondition
    temperature: float     # Celsius
    wmo_code: int

    def __str__(self) -> str:
        return f"{self.condition}, {self.temperature:.0f}C"


# ============================================================================
# WMO CODE INTERPRETER
# ============================================================================

class WMOInterpreter:
    """
    Maps WMO weather codes (0-99) to descriptions.
    Reference: https://open-meteo.com/en/docs#weather_code
    """

    CODE_MAPPINGS = {
        0: ("Sunny", WeatherCondition.SUNNY),
        1: ("Mainly Clear", WeatherCondition.CLOUDY),
        2: ("Partly Cloudy", WeatherCondition.CLOUDY),
        3: ("Overcast", WeatherCondition.CLOUDY),
        45: ("Fog", WeatherCondition.FOG),
        48: ("Rime Fog", WeatherCondition.FOG),
        51: ("Light Drizzle", WeatherCondition.DRIZZLE),
        53: ("Drizzle", WeatherCondition.DRIZZLE),
        55: ("Dense Drizzle", WeatherCondition.DRIZZLE),
        56: ("Freezing Drizzle", WeatherCondition.DRIZZLE),
        57: ("Heavy Freezing Drizzle", WeatherCondition.DRIZZLE),
        61: ("Light Rain", WeatherCondition.RAINY),
        63: ("Rain", WeatherCondition.RAINY),
        65: ("Heavy Rain", WeatherCondition.RAINY),
        66: ("Freezing Rain", WeatherCondition.RAINY),
        67: ("Heavy Freezing Rain", WeatherCondition.RAINY),
        71: ("Light Snow", WeatherCondition.SNOW),
        73: ("Snow", WeatherCondition.SNOW),
        75: ("Heavy Snow", WeatherCondition.SNOW),
        77: ("Snow Grains", WeatherCondition.SNOW),
        80: ("Light Showers", WeatherCondition.SHOWERS),
        81: ("Showers", WeatherCondition.SHOWERS),
        82: ("Violent Showers", WeatherCondition.SHOWERS),
        85: ("Light Snow Showers", WeatherCondition.SNOW),
        86: ("Heavy Snow Showers", WeatherCondition.SNOW),
        95: ("Thunderstorm", WeatherCondition.THUNDERSTORM),
        96: ("Thunderstorm with Light Hail", WeatherCondition.THUNDERSTORM),
        99: ("Thunderstorm with Heavy Hail", WeatherCondition.THUNDERSTORM),
    }

    @classmethod
    def interpret(cls, wmo_code: int):
        if wmo_code not in cls.CODE_MAPPINGS:
            logger.warning(f"Unknown WMO code: {wmo_code}")
            return "Unknown", WeatherCondition.CLOUDY
        return cls.CODE_MAPPINGS[wmo_code]


# ============================================================================
# API INTERACTION
# ============================================================================

class WeatherAPIClient:
    """Handles Open-Meteo API interactions."""

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()

    def fetch_current(self, location: Coordinate) -> Optional[WeatherData]:
        params = {
            "latitude": location.latitude,
            "longitude": location.longitude,
            "current": "weather_code,temperature_2m",
            "timezone": "auto",
        }

        try:
            response = self.session.get(API_URL, params=params, timeout=REQUEST_TIMEOUT)
            response.raise_for_status()
            return self._parse_current(response.json())
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Failed to fetch weather for {location}: {e}")
            return None

    def _parse_current(self, api_data: Dict[str, Any]) -> Optional[WeatherData]:
        current = api_data.get("current") or {}
        if not current:
            logger.warning("No current conditions in API response")
            return None

        try:
            wmo_code = int(current.get("weather_code", 0) or 0)
            temperature = float(current["temperature_2m"])
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Failed to parse current weather: {e}")
            return None

        description, condition = WMOInterpreter.interpret(wmo_code)
        return WeatherData(
            condition=description,
            condition_code=condition,
            temperature=temperature,
            wmo_code=wmo_code,
        )


# ============================================================================
# PUBLIC API
# ============================================================================

def describe_weather(location: Coordinate, client: Optional[WeatherAPIClient] = None) -> Optional[str]:
    """Human-readable current weather at `location`, or None."""
    weather = (client or WeatherAPIClient()).fetch_current(location)
    if weather is None:
        return None
    logger.info(f"Weather at {location}: {weather}")
    return str(weather)
