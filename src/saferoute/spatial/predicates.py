"""Spatial predicates used by the shelter filter and the route evaluator.

``point_in_region`` is boundary-inclusive (``covers``): a point exactly on the
edge of a danger polygon counts as in danger.

``point_in_boundary`` is a plain ray-casting test over the administrative
boundary rings; it needs no geometry engine and fails open when no boundary has
been loaded.
"""
from __future__ import annotations

from typing import Optional, Sequence

from shapely.geometry import Point

from saferoute.domain.region import DangerRegion, RegionCollection, SingleRegion

RAY_CAST_EPSILON = 0.000001


def point_in_region(lat: float, lng: float, region: Optional[DangerRegion]) -> bool:
    """Return True when (lat, lng) lies in the danger region."""
    if region is None:
        return False
    point = Point(lng, lat)
    if isinstance(region, SingleRegion):
        return region.geometry.covers(point)
    if isinstance(region, RegionCollection):
        return any(member.covers(point) for member in region.members)
    raise TypeError(f"Unsupported danger region type: {type(region).__name__}")


def _point_in_ring(lat: float, lng: float, ring: Sequence) -> bool:
    x, y = lng, lat
    inside = False
    j = len(ring) - 1
    for i in range(len(ring)):
        yi, xi = ring[i][0], ring[i][1]
        yj, xj = ring[j][0], ring[j][1]
        # zero-height edges would divide by zero
        dy = (yj - yi) or RAY_CAST_EPSILON
        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / dy + xi:
            inside = not inside
        j = i
    return inside


def point_in_boundary(lat: float, lng: float, boundary_rings: Sequence[Sequence]) -> bool:
    """Return True when (lat, lng) is inside any boundary ring.

    An empty boundary never blocks anything.
    """
    if not boundary_rings:
        return True
    return any(_point_in_ring(lat, lng, ring) for ring in boundary_rings)


__all__ = ["point_in_region", "point_in_boundary", "RAY_CAST_EPSILON"]
