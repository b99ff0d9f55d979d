"""Danger region variants.

The current danger region is one of:

* ``None``                       rainfall below threshold or no trace data
* :class:`SingleRegion`          all buffered traces unioned into one geometry
* :class:`RegionCollection`      unmerged buffered polygons (union failed)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

from shapely.geometry import mapping
from shapely.geometry.base import BaseGeometry


@dataclass(frozen=True)
class SingleRegion:
    geometry: BaseGeometry

    def to_geojson(self) -> Dict:
        return {"type": "Feature", "properties": {}, "geometry": mapping(self.geometry)}


@dataclass(frozen=True)
class RegionCollection:
    members: Tuple[BaseGeometry, ...]

    def to_geojson(self) -> Dict:
        return {
            "type": "FeatureCollection",
            "features": [
                {"type": "Feature", "properties": {}, "geometry": mapping(m)}
                for m in self.members
            ],
        }


DangerRegion = Union[SingleRegion, RegionCollection]


def region_to_geojson(region: Optional[DangerRegion]) -> Optional[Dict]:
    if region is None:
        return None
    return region.to_geojson()


__all__ = ["SingleRegion", "RegionCollection", "DangerRegion", "region_to_geojson"]
