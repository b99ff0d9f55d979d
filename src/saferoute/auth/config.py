"""Configuration management for SafeRoute.

This module provides centralized configuration management using Pydantic Settings.
It handles environment variables for the WFS data service, the boundary file,
the routing oracle and the live weather service with automatic .env file loading.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, ClassVar
import os


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    Attributes
    ----------
    APP_NAME : str
        Application name identifier.
    API_TOKEN : str, optional
        Bearer token for API authentication.
    WFS_BASE_URL : str
        GeoServer WFS endpoint serving flood traces and shelters.
    WFS_API_KEY : str, optional
        API key appended to every WFS request.
    WFS_FLOOD_LAYER, WFS_SHELTER_LAYER : str
        Layer (typeName) identifiers for flood traces and temporary shelters.
    WFS_MAX_FEATURES : int
        ``maxFeatures`` cap applied to each WFS GetFeature request.
    CORS_PROXY_URL : str, optional
        Prefix wrapping the encoded WFS URL when the service requires a proxy.
    BOUNDARY_GEOJSON : str, optional
        Path of the administrative boundary GeoJSON file.
    BOUNDARY_CRS : str
        CRS of the boundary file coordinates (reprojected to WGS84 on load).
    OSRM_BASE_URL : str
        Base URL of the OSRM routing service.
    OSRM_PROFILE : str
        OSRM profile used for evacuation routes.
    ROUTING_TIMEOUT_S : float
        Per-request timeout for routing oracle calls, in seconds.
    WEATHER_API_URL : str
        Open-Meteo forecast endpoint used for live precipitation.
    WEATHER_TIMEZONE : str
        Timezone of the observation timestamps returned by the weather service.
    DEFAULT_LAT, DEFAULT_LON : float
        Observation point for live weather (area of interest center).
    REQUEST_TIMEOUT_S : float
        Timeout for WFS and weather requests, in seconds.
    """
    APP_NAME: str = "saferoute"
    API_TOKEN: Optional[str] = None
    WFS_BASE_URL: str = "https://climate.gg.go.kr/ols/api/geoserver/wfs"
    WFS_API_KEY: Optional[str] = None
    WFS_FLOOD_LAYER: str = "spggcee:tm_fldn_trce"
    WFS_SHELTER_LAYER: str = "spggcee:dsvctm_tmpr_hab_fclt"
    WFS_MAX_FEATURES: int = 5000
    CORS_PROXY_URL: Optional[str] = None
    BOUNDARY_GEOJSON: Optional[str] = None
    BOUNDARY_CRS: str = "EPSG:5179"
    OSRM_BASE_URL: str = "https://router.project-osrm.org"
    OSRM_PROFILE: str = "driving"
    ROUTING_TIMEOUT_S: float = 10.0
    WEATHER_API_URL: str = "https://api.open-meteo.com/v1/forecast"
    WEATHER_TIMEZONE: str = "Asia/Seoul"
    DEFAULT_LAT: float = 37.762
    DEFAULT_LON: float = 126.780
    REQUEST_TIMEOUT_S: float = 30.0

    env_path: ClassVar[str] = os.path.join(os.path.dirname(os.path.dirname(
        os.path.dirname(os.path.dirname(os.path.abspath(__file__))))), ".env")
    model_config = SettingsConfigDict(env_file=env_path, extra="ignore")


settings = Settings()
