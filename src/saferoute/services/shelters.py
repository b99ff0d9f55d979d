"""Shelter reachability filter.

Splits the shelter directory into ``reachable`` and ``flooded`` sets against
the current danger region. Floodedness is never stored on a shelter; the
partition is recomputed from scratch for every new region.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from saferoute.domain.models import Shelter
from saferoute.domain.region import DangerRegion
from saferoute.spatial.predicates import point_in_boundary, point_in_region


@dataclass(frozen=True)
class ShelterPartition:
    reachable: Tuple[Shelter, ...]
    flooded: Tuple[Shelter, ...]


def classify_shelters(shelters: Sequence[Shelter], region: Optional[DangerRegion]) -> ShelterPartition:
    reachable = []
    flooded = []
    for shelter in shelters:
        if point_in_region(shelter.lat, shelter.lng, region):
            flooded.append(shelter)
        else:
            reachable.append(shelter)
    return ShelterPartition(tuple(reachable), tuple(flooded))


def filter_to_boundary(shelters: Sequence[Shelter], boundary_rings: Sequence) -> list:
    """Keep only shelters located inside the administrative boundary."""
    return [s for s in shelters if point_in_boundary(s.lat, s.lng, boundary_rings)]


__all__ = ["ShelterPartition", "classify_shelters", "filter_to_boundary"]
