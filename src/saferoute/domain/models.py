"""Value objects passed between the SafeRoute services.

All coordinates are WGS84 and expressed as ``(lat, lng)`` pairs, the order the
shelter directory and the route display use. Geometry objects handed to shapely
use ``(lng, lat)`` and are converted at the :mod:`saferoute.spatial` boundary.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

LatLng = Tuple[float, float]
Ring = Tuple[LatLng, ...]

MODE_ESCAPE = "escape"
MODE_SAFE = "safe"

REASON_UNAVAILABLE = "unavailable"
REASON_SEARCH_FAILED = "search failed"


@dataclass(frozen=True)
class Shelter:
    name: str
    lat: float
    lng: float

    def to_dict(self) -> Dict:
        return {"name": self.name, "lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class OracleRoute:
    """Path geometry and network distance returned by the routing oracle."""
    path_points: Tuple[LatLng, ...]
    distance_m: float


@dataclass(frozen=True)
class RouteCandidate:
    shelter: Shelter
    path_points: Tuple[LatLng, ...]
    distance_m: float
    touches_danger: bool


@dataclass(frozen=True)
class SelectedRoute:
    """The single route surfaced to the display layer."""
    path: Tuple[LatLng, ...]
    shelter_name: str
    mode: str
    distance_m: float

    @property
    def distance_km(self) -> float:
        return round(self.distance_m / 1000.0, 1)

    def summary(self) -> str:
        if self.mode == MODE_ESCAPE:
            return f"Emergency escape ({self.distance_km:.1f}km) - target: {self.shelter_name}"
        return f"Safe route ({self.distance_km:.1f}km) - target: {self.shelter_name}"

    def to_dict(self) -> Dict:
        return {
            "path": [list(p) for p in self.path],
            "shelter_name": self.shelter_name,
            "mode": self.mode,
            "distance_m": self.distance_m,
            "summary": self.summary(),
        }


_NOT_FOUND_MESSAGES = {
    REASON_UNAVAILABLE: "No shelters available: every known shelter is flooded or none are loaded.",
    REASON_SEARCH_FAILED: "Route search failed: roads may be blocked or no reachable shelter is accessible.",
}


@dataclass(frozen=True)
class RouteNotFound:
    reason: str
    message: str = field(default="")

    def __post_init__(self):
        if not self.message:
            object.__setattr__(
                self, "message", _NOT_FOUND_MESSAGES.get(self.reason, self.reason))

    def to_dict(self) -> Dict:
        return {"reason": self.reason, "message": self.message}


def as_ring(points: List) -> Ring:
    """Freeze a list of ``[lat, lng]`` pairs into an immutable ring."""
    return tuple((p[0], p[1]) for p in points)


__all__ = [
    "LatLng", "Ring", "Shelter", "OracleRoute", "RouteCandidate", "SelectedRoute",
    "RouteNotFound", "as_ring", "MODE_ESCAPE", "MODE_SAFE",
    "REASON_UNAVAILABLE", "REASON_SEARCH_FAILED",
]
