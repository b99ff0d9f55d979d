"""WFS client for historical flood traces and the temporary-shelter directory.

Both layers are fetched as GeoJSON (``srsName=EPSG:4326``) from a GeoServer WFS
endpoint and reduced to the zone of interest with the administrative boundary:

* shelters: Point features inside the boundary -> :class:`Shelter`
* flood traces: exterior ring of every Polygon / MultiPolygon part, kept when
  its first vertex is inside the boundary -> ``(lat, lng)`` ring
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence
from urllib.parse import quote, urlencode

import requests

from saferoute.auth.config import settings
from saferoute.domain.models import Ring, Shelter, as_ring
from saferoute.exceptions import DataSourceError
from saferoute.spatial.predicates import point_in_boundary

logger = logging.getLogger(__name__)

DEFAULT_SHELTER_NAME = "Shelter"


def _ring_to_lat_lng(coordinates: Sequence) -> Ring:
    """``[[lng, lat], ...]`` to a float ``(lat, lng)`` ring; raises on malformed vertices."""
    return as_ring([(float(c[1]), float(c[0])) for c in coordinates])


def extract_exterior_rings(geometry: Optional[Dict]) -> List[Ring]:
    """Exterior rings of a GeoJSON Polygon / MultiPolygon as ``(lat, lng)`` rings.

    Rings with malformed vertices are skipped.
    """
    if not isinstance(geometry, dict):
        return []
    gtype = geometry.get("type")
    coordinates = geometry.get("coordinates") or []
    if gtype == "Polygon":
        polygons = [coordinates]
    elif gtype == "MultiPolygon":
        polygons = coordinates
    else:
        return []
    rings = []
    for polygon in polygons:
        try:
            ring = _ring_to_lat_lng(polygon[0])
        except (TypeError, ValueError, IndexError, KeyError):
            logger.debug("Skipping malformed ring in %s", gtype)
            continue
        if ring:
            rings.append(ring)
    return rings


def parse_shelters(features: Sequence[Dict], boundary_rings: Sequence = ()) -> List[Shelter]:
    shelters = []
    for feature in features:
        if not isinstance(feature, dict):
            continue
        geometry = feature.get("geometry") or {}
        try:
            coords = geometry.get("coordinates") or []
            lng, lat = float(coords[0]), float(coords[1])
        except (AttributeError, TypeError, ValueError, IndexError, KeyError):
            logger.debug("Skipping shelter feature with malformed coordinates")
            continue
        if not lat or not lng:
            continue
        if not point_in_boundary(lat, lng, boundary_rings):
            continue
        name = (feature.get("properties") or {}).get("fac_nam") or DEFAULT_SHELTER_NAME
        shelters.append(Shelter(name=name, lat=lat, lng=lng))
    return shelters


def parse_flood_traces(features: Sequence[Dict], boundary_rings: Sequence = ()) -> List[Ring]:
    traces = []
    for feature in features:
        if not isinstance(feature, dict):
            continue
        for ring in extract_exterior_rings(feature.get("geometry")):
            first_lat, first_lng = ring[0]
            if point_in_boundary(first_lat, first_lng, boundary_rings):
                traces.append(ring)
    return traces


class WFSClient:
    """Flood-trace source and shelter directory backed by a WFS service."""

    def __init__(self, base_url: Optional[str] = None, api_key: Optional[str] = None,
                 cors_proxy: Optional[str] = None, max_features: Optional[int] = None):
        self.base_url = base_url or settings.WFS_BASE_URL
        self.api_key = api_key if api_key is not None else settings.WFS_API_KEY
        self.cors_proxy = cors_proxy if cors_proxy is not None else settings.CORS_PROXY_URL
        self.max_features = max_features or settings.WFS_MAX_FEATURES

    def build_url(self, type_name: str) -> str:
        params = {}
        if self.api_key:
            params["apiKey"] = self.api_key
        params.update({
            "service": "WFS",
            "version": "1.1.0",
            "request": "GetFeature",
            "typeName": type_name,
            "outputFormat": "application/json",
            "srsName": "EPSG:4326",
            "maxFeatures": self.max_features,
        })
        url = f"{self.base_url}?{urlencode(params)}"
        if self.cors_proxy:
            return self.cors_proxy + quote(url, safe="")
        return url

    def fetch_features(self, type_name: str) -> List[Dict]:
        url = self.build_url(type_name)
        try:
            response = requests.get(url, timeout=settings.REQUEST_TIMEOUT_S)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise DataSourceError(f"WFS request for {type_name} failed: {e}") from e
        except ValueError as e:
            raise DataSourceError(f"WFS layer {type_name} returned invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise DataSourceError(f"WFS layer {type_name} returned no feature collection")
        return data.get("features") or []

    def get_shelters(self, boundary_rings: Sequence = ()) -> List[Shelter]:
        shelters = parse_shelters(self.fetch_features(settings.WFS_SHELTER_LAYER), boundary_rings)
        logger.info("Loaded %d shelters inside the boundary", len(shelters))
        return shelters

    def get_traces(self, boundary_rings: Sequence = ()) -> List[Ring]:
        traces = parse_flood_traces(self.fetch_features(settings.WFS_FLOOD_LAYER), boundary_rings)
        logger.info("Loaded %d flood trace rings inside the boundary", len(traces))
        return traces


__all__ = ["WFSClient", "parse_shelters", "parse_flood_traces", "extract_exterior_rings"]
