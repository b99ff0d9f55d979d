"""OSRM client acting as the routing oracle.

Requests a single driving route with the full GeoJSON geometry and converts it
into an :class:`~saferoute.domain.models.OracleRoute` with ``(lat, lng)`` path
points. Every request carries an explicit timeout.
"""
from __future__ import annotations

from typing import Optional

import requests

from saferoute.auth.config import settings
from saferoute.domain.models import OracleRoute
from saferoute.exceptions import RoutingError


class OSRMClient:
    """Routing oracle backed by an OSRM ``/route/v1`` endpoint.

    Attributes
    ----------
    base_url : str
        OSRM server root, e.g. ``https://router.project-osrm.org``.
    profile : str
        Routing profile (``driving``, ``foot`` ...).
    timeout : float
        Per-request timeout in seconds.
    """

    def __init__(self, base_url: Optional[str] = None, profile: Optional[str] = None,
                 timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        self.base_url = (base_url or settings.OSRM_BASE_URL).rstrip("/")
        self.profile = profile or settings.OSRM_PROFILE
        self.timeout = timeout if timeout is not None else settings.ROUTING_TIMEOUT_S
        self.session = session or requests.Session()

    def build_url(self, origin_lat: float, origin_lng: float, dest_lat: float, dest_lng: float) -> str:
        return (f"{self.base_url}/route/v1/{self.profile}/"
                f"{origin_lng},{origin_lat};{dest_lng},{dest_lat}")

    def route(self, origin_lat: float, origin_lng: float,
              dest_lat: float, dest_lng: float) -> Optional[OracleRoute]:
        """Return the first route between the two points, or ``None`` if there is none.

        Raises
        ------
        RoutingError
            On transport failures, HTTP errors or an unparseable payload.
        """
        url = self.build_url(origin_lat, origin_lng, dest_lat, dest_lng)
        try:
            response = self.session.get(
                url, params={"overview": "full", "geometries": "geojson"}, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise RoutingError(f"OSRM request failed: {e}") from e
        except ValueError as e:
            raise RoutingError(f"OSRM returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise RoutingError(f"OSRM returned a {type(data).__name__} body instead of an object")
        routes = data.get("routes") or []
        if not routes:
            return None
        route = routes[0]
        try:
            coordinates = route["geometry"]["coordinates"]
            points = tuple((float(c[1]), float(c[0])) for c in coordinates)
            distance = float(route["distance"])
        except (KeyError, TypeError, ValueError, IndexError) as e:
            raise RoutingError(f"Malformed OSRM route: {e}") from e
        if not points:
            return None
        return OracleRoute(path_points=points, distance_m=distance)


__all__ = ["OSRMClient"]
