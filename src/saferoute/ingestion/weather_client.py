"""Live weather client providing the observed rainfall amount.

Queries the Open-Meteo forecast API for current precipitation and weather code
at the area-of-interest center and returns a :class:`LiveObservation`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional

import pytz
import requests

from saferoute.auth.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LiveObservation:
    precipitation_mm: float
    description: str
    observed_at: Optional[datetime] = None


def describe_weather_code(code: Optional[int]) -> str:
    """Map a WMO weather code to a short description."""
    if code is None:
        return "-"
    if 51 <= code <= 67:
        return "rain"
    if code >= 95:
        return "thunderstorm"
    if 1 <= code <= 3:
        return "cloudy"
    return "clear"


class WeatherAPIClient:
    """Client for the live precipitation observation.

    Attributes
    ----------
    api_url : str
        Open-Meteo forecast endpoint.
    lat, lon : float
        Observation point.
    tz : pytz timezone
        Timezone of the local timestamps returned by the service.
    """

    def __init__(self, api_url: Optional[str] = None, lat: Optional[float] = None,
                 lon: Optional[float] = None, timezone: Optional[str] = None):
        self.api_url = api_url or settings.WEATHER_API_URL
        self.lat = lat if lat is not None else settings.DEFAULT_LAT
        self.lon = lon if lon is not None else settings.DEFAULT_LON
        self.timezone_name = timezone or settings.WEATHER_TIMEZONE
        self.tz = pytz.timezone(self.timezone_name)

    def fetch_weather_data(self) -> Optional[Dict]:
        params = {
            "latitude": self.lat,
            "longitude": self.lon,
            "current": "precipitation,weather_code",
            "timezone": self.timezone_name,
        }
        try:
            response = requests.get(self.api_url, params=params, timeout=settings.REQUEST_TIMEOUT_S)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            logger.warning("Failed to fetch weather data: %s", e)
            return None
        except ValueError as e:
            logger.warning("Weather service returned invalid JSON: %s", e)
            return None

    def extract_observation(self, weather_data: Dict) -> Optional[LiveObservation]:
        current = (weather_data or {}).get("current")
        if not current:
            return None
        try:
            precip = max(0.0, float(current.get("precipitation") or 0.0))
        except (TypeError, ValueError):
            return None
        code = current.get("weather_code")
        observed_at = None
        if current.get("time"):
            try:
                observed_at = self.tz.localize(datetime.strptime(current["time"], "%Y-%m-%dT%H:%M"))
            except ValueError:
                observed_at = None
        return LiveObservation(
            precipitation_mm=precip,
            description=describe_weather_code(int(code) if code is not None else None),
            observed_at=observed_at,
        )

    def fetch_current(self) -> Optional[LiveObservation]:
        """Current observation, or ``None`` when the service cannot be read."""
        data = self.fetch_weather_data()
        if not data:
            return None
        return self.extract_observation(data)


__all__ = ["WeatherAPIClient", "LiveObservation", "describe_weather_code"]
