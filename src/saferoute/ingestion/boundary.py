"""Administrative boundary loader.

Reads the boundary GeoJSON with geopandas, reprojects it to WGS84 and returns
the exterior ring of every polygon part as a ``(lat, lng)`` ring for the
ray-casting boundary test.
"""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import geopandas as gpd

from saferoute.auth.config import settings
from saferoute.domain.models import Ring, as_ring
from saferoute.exceptions import DataSourceError


def boundary_rings_from_gdf(gdf: gpd.GeoDataFrame) -> List[Ring]:
    rings: List[Ring] = []
    for geom in gdf.geometry:
        if geom is None or geom.is_empty:
            continue
        if geom.geom_type == "Polygon":
            parts = [geom]
        elif geom.geom_type == "MultiPolygon":
            parts = list(geom.geoms)
        else:
            continue
        for part in parts:
            rings.append(as_ring([(y, x) for x, y in part.exterior.coords]))
    return rings


def load_boundary_rings(path: Optional[str] = None, source_crs: Optional[str] = None) -> List[Ring]:
    """Load boundary rings from a GeoJSON file.

    Parameters
    ----------
    path : str, optional
        GeoJSON file; defaults to ``settings.BOUNDARY_GEOJSON``. No path means no
        boundary (every point is inside).
    source_crs : str, optional
        CRS of the file coordinates; defaults to ``settings.BOUNDARY_CRS``.

    Raises
    ------
    DataSourceError
        If the file is missing or unreadable.
    """
    path = path or settings.BOUNDARY_GEOJSON
    if not path:
        return []
    file_path = Path(path)
    if not file_path.exists():
        raise DataSourceError(f"Boundary file not found: {file_path}")
    try:
        gdf = gpd.read_file(file_path)
    except Exception as e:
        raise DataSourceError(f"Failed to read boundary file {file_path}: {e}") from e
    if gdf.empty:
        return []
    # GeoJSON readers report WGS84 even for projected coordinates
    gdf = gdf.set_crs(source_crs or settings.BOUNDARY_CRS, allow_override=True)
    gdf = gdf.to_crs(epsg=4326)
    return boundary_rings_from_gdf(gdf)


__all__ = ["load_boundary_rings", "boundary_rings_from_gdf"]
