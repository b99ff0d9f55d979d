"""Geometry adapter between raw coordinate rings and shapely polygons.

Rings arrive as sequences of ``(lat, lng)`` pairs straight from the flood-trace
source. :func:`build_polygon` swaps them into shapely's ``(x=lng, y=lat)`` order,
closes open rings and rejects degenerate input by returning ``None`` so that a
single bad ring never aborts danger-region construction.

Buffer distances are in metres, so buffering happens in a local transverse
Mercator projection centered on the data (:func:`local_metric_crs`) and the
result is projected back to WGS84.

Dependencies: shapely, pyproj
"""
from __future__ import annotations

import math
from typing import Iterable, List, Optional, Sequence, Tuple

from pyproj import CRS, Transformer
from shapely.geometry import Polygon
from shapely.geometry.base import BaseGeometry
from shapely.ops import transform

MIN_RING_POINTS = 4


def _coerce_point(point) -> Optional[tuple]:
    try:
        if len(point) < 2:
            return None
        lat = float(point[0])
        lng = float(point[1])
    except (TypeError, ValueError):
        return None
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return None
    return lng, lat


def build_polygon(ring: Sequence) -> Optional[Polygon]:
    """Convert a ``(lat, lng)`` ring into a shapely Polygon.

    Parameters
    ----------
    ring : sequence of (lat, lng)
        Exterior ring; closed automatically when the first and last points differ.

    Returns
    -------
    Polygon | None
        ``None`` when the ring has fewer than 4 points after closing or contains
        malformed coordinates.
    """
    if ring is None:
        return None
    coords = []
    try:
        for point in ring:
            xy = _coerce_point(point)
            if xy is None:
                return None
            coords.append(xy)
    except TypeError:
        return None
    if not coords:
        return None
    if coords[0] != coords[-1]:
        coords.append(coords[0])
    if len(coords) < MIN_RING_POINTS:
        return None
    try:
        return Polygon(coords)
    except ValueError:
        return None


def build_polygons(rings: Iterable[Sequence]) -> List[Polygon]:
    """Build polygons for every valid ring, preserving input order."""
    polygons = []
    for ring in rings:
        polygon = build_polygon(ring)
        if polygon is not None:
            polygons.append(polygon)
    return polygons


def local_metric_crs(geometries: Sequence[BaseGeometry]) -> CRS:
    """Transverse Mercator CRS (metres) centered on the combined bounds."""
    min_x = min(g.bounds[0] for g in geometries)
    min_y = min(g.bounds[1] for g in geometries)
    max_x = max(g.bounds[2] for g in geometries)
    max_y = max(g.bounds[3] for g in geometries)
    lon_0 = (min_x + max_x) / 2
    lat_0 = (min_y + max_y) / 2
    return CRS.from_proj4(
        f"+proj=tmerc +lat_0={lat_0:.6f} +lon_0={lon_0:.6f} +k=1 "
        "+x_0=0 +y_0=0 +ellps=WGS84 +units=m +no_defs"
    )


def metric_transformers(crs: CRS) -> Tuple[Transformer, Transformer]:
    """Forward (WGS84 -> metric) and inverse transformers for ``crs``."""
    return (Transformer.from_crs("EPSG:4326", crs, always_xy=True),
            Transformer.from_crs(crs, "EPSG:4326", always_xy=True))


def to_metric(geometry: BaseGeometry, crs: CRS, transformer: Optional[Transformer] = None) -> BaseGeometry:
    transformer = transformer or Transformer.from_crs("EPSG:4326", crs, always_xy=True)
    return transform(transformer.transform, geometry)


def to_wgs84(geometry: BaseGeometry, crs: CRS, transformer: Optional[Transformer] = None) -> BaseGeometry:
    transformer = transformer or Transformer.from_crs(crs, "EPSG:4326", always_xy=True)
    return transform(transformer.transform, geometry)


__all__ = ["build_polygon", "build_polygons", "local_metric_crs", "metric_transformers",
           "to_metric", "to_wgs84", "MIN_RING_POINTS"]
