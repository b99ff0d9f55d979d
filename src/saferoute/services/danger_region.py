"""Danger region builder.

Turns the historical flood-trace rings into the current danger region for a
rainfall amount:

1. Below 30 mm nothing is hazardous, regardless of trace data.
2. Every valid trace polygon is buffered by ``(rainfall - 30) * 5`` metres with
   64 segments per quarter circle (zero buffer at exactly 30 mm).
3. Buffered polygons are unioned left to right in input order.
4. If any union step raises, the individually buffered polygons are returned
   unmerged as a :class:`RegionCollection`; predicates still work on it.

The same (traces, rainfall) input always yields the same region.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from shapely.errors import GEOSException
from shapely.geometry.base import BaseGeometry

from saferoute.domain.region import DangerRegion, RegionCollection, SingleRegion
from saferoute.spatial.geometry import (
    build_polygons, local_metric_crs, metric_transformers, to_metric, to_wgs84,
)

logger = logging.getLogger(__name__)

RAINFALL_FLOOR_MM = 30
BUFFER_M_PER_MM = 5.0
BUFFER_QUAD_SEGS = 64


def buffer_distance_m(rainfall: float) -> float:
    """Buffer distance in metres for a rainfall amount in millimetres."""
    if rainfall < RAINFALL_FLOOR_MM:
        return 0.0
    return (rainfall - RAINFALL_FLOOR_MM) * BUFFER_M_PER_MM


def buffer_polygons(polygons: Sequence[BaseGeometry], distance_m: float) -> List[BaseGeometry]:
    if distance_m <= 0:
        return list(polygons)
    crs = local_metric_crs(polygons)
    forward, inverse = metric_transformers(crs)
    buffered = []
    for polygon in polygons:
        grown = to_metric(polygon, crs, forward).buffer(distance_m, quad_segs=BUFFER_QUAD_SEGS)
        buffered.append(to_wgs84(grown, crs, inverse))
    return buffered


def union_polygons(polygons: Sequence[BaseGeometry]) -> BaseGeometry:
    """Left fold ``merged = merged.union(next)``; raises on the first failure."""
    merged = polygons[0]
    for polygon in polygons[1:]:
        result = merged.union(polygon)
        if not result.is_empty:
            merged = result
    return merged


def build_danger_region(rainfall: float, flood_traces: Sequence[Sequence]) -> Optional[DangerRegion]:
    """Build the danger region for ``rainfall`` mm from the flood-trace rings.

    Returns
    -------
    SingleRegion | RegionCollection | None
        ``None`` when rainfall is below the floor, no traces are loaded, or no
        trace yields a valid polygon.
    """
    if rainfall < RAINFALL_FLOOR_MM:
        return None
    if not flood_traces:
        return None
    polygons = build_polygons(flood_traces)
    dropped = len(flood_traces) - len(polygons)
    if dropped:
        logger.debug("Dropped %d degenerate flood trace ring(s)", dropped)
    if not polygons:
        return None

    buffered = buffer_polygons(polygons, buffer_distance_m(rainfall))
    try:
        merged = union_polygons(buffered)
    except (GEOSException, ValueError) as exc:
        logger.warning("Polygon merge failed, keeping %d unmerged polygons: %s",
                       len(buffered), exc)
        return RegionCollection(tuple(buffered))
    return SingleRegion(merged)


__all__ = ["build_danger_region", "buffer_distance_m", "buffer_polygons",
           "union_polygons", "RAINFALL_FLOOR_MM", "BUFFER_M_PER_MM", "BUFFER_QUAD_SEGS"]
