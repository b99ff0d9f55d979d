"""Route candidate evaluator.

For an origin point:

1. Rank the reachable shelters by straight-line (haversine) distance and keep
   the nearest ``MAX_CANDIDATES``. Only these are ever routed, which caps the
   number of routing-oracle calls per search.
2. Route each candidate through the oracle, in ascending distance order. A
   failed or empty answer skips the candidate without retry.
3. Sample every returned path at most ~40 times and flag it as soon as one
   sample lies in the danger region.
4. Escape mode (origin already in danger): every routed candidate is valid.
   Safe mode: only paths that never touch the danger region are valid.
5. Keep the valid candidate with the smallest oracle distance. Every candidate
   is evaluated; an early success does not stop the search.
"""
from __future__ import annotations

import logging
from functools import reduce
from typing import Optional, Protocol, Sequence, Union

import numpy as np

from saferoute.domain.models import (
    MODE_ESCAPE, MODE_SAFE, REASON_SEARCH_FAILED, REASON_UNAVAILABLE,
    OracleRoute, RouteCandidate, RouteNotFound, SelectedRoute, Shelter,
)
from saferoute.domain.region import DangerRegion
from saferoute.exceptions import RoutingError
from saferoute.spatial.predicates import point_in_region

logger = logging.getLogger(__name__)

MAX_CANDIDATES = 3
MAX_PATH_SAMPLES = 40
EARTH_RADIUS_M = 6371000.0


class RoutingOracle(Protocol):
    def route(self, origin_lat: float, origin_lng: float,
              dest_lat: float, dest_lng: float) -> Optional[OracleRoute]:
        ...


def haversine_m(lat1, lng1, lat2, lng2):
    """Great-circle distance in metres; accepts scalars or numpy arrays."""
    phi1, phi2 = np.radians(lat1), np.radians(lat2)
    dphi = phi2 - phi1
    dlambda = np.radians(np.asarray(lng2) - lng1)
    a = np.sin(dphi / 2) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(dlambda / 2) ** 2
    return 2 * EARTH_RADIUS_M * np.arcsin(np.sqrt(a))


def rank_shelters(origin_lat: float, origin_lng: float, shelters: Sequence[Shelter],
                  limit: int = MAX_CANDIDATES) -> list:
    """Nearest ``limit`` shelters by straight-line distance; ties keep input order."""
    if not shelters:
        return []
    lats = np.array([s.lat for s in shelters], dtype=float)
    lngs = np.array([s.lng for s in shelters], dtype=float)
    distances = haversine_m(origin_lat, origin_lng, lats, lngs)
    order = np.argsort(distances, kind="stable")[:limit]
    return [shelters[i] for i in order]


def sample_stride(point_count: int) -> int:
    return max(1, point_count // MAX_PATH_SAMPLES)


def path_touches_danger(path_points: Sequence, region: Optional[DangerRegion]) -> bool:
    """Test evenly spaced samples of the path, stopping at the first hit."""
    if region is None:
        return False
    step = sample_stride(len(path_points))
    for i in range(0, len(path_points), step):
        lat, lng = path_points[i]
        if point_in_region(lat, lng, region):
            return True
    return False


def evaluate_candidate(shelter: Shelter, origin_lat: float, origin_lng: float,
                       region: Optional[DangerRegion], oracle: RoutingOracle) -> Optional[RouteCandidate]:
    """Route one shelter; ``None`` when the oracle has no usable answer."""
    try:
        routed = oracle.route(origin_lat, origin_lng, shelter.lat, shelter.lng)
    except RoutingError as exc:
        logger.warning("Routing to %s failed, skipping: %s", shelter.name, exc)
        return None
    except Exception as exc:
        # any oracle failure makes only this candidate unusable
        logger.warning("Routing oracle error for %s, skipping: %r", shelter.name, exc)
        return None
    if routed is None or not routed.path_points:
        logger.info("No route to %s, skipping", shelter.name)
        return None
    return RouteCandidate(
        shelter=shelter,
        path_points=tuple(routed.path_points),
        distance_m=float(routed.distance_m),
        touches_danger=path_touches_danger(routed.path_points, region),
    )


def find_route(origin_lat: float, origin_lng: float, reachable_shelters: Sequence[Shelter],
               region: Optional[DangerRegion], oracle: RoutingOracle) -> Union[SelectedRoute, RouteNotFound]:
    """Select the best evacuation route from the origin.

    Returns
    -------
    SelectedRoute | RouteNotFound
        ``RouteNotFound("unavailable")`` when there is no reachable shelter (no
        oracle call is made), ``RouteNotFound("search failed")`` when none of
        the nearest candidates yields a valid route.
    """
    if not reachable_shelters:
        return RouteNotFound(REASON_UNAVAILABLE)

    origin_in_danger = point_in_region(origin_lat, origin_lng, region)
    candidates = rank_shelters(origin_lat, origin_lng, reachable_shelters)

    def keep_best(best: Optional[RouteCandidate], shelter: Shelter) -> Optional[RouteCandidate]:
        candidate = evaluate_candidate(shelter, origin_lat, origin_lng, region, oracle)
        if candidate is None:
            return best
        valid = origin_in_danger or not candidate.touches_danger
        if valid and (best is None or candidate.distance_m < best.distance_m):
            return candidate
        return best

    best = reduce(keep_best, candidates, None)
    if best is None:
        return RouteNotFound(REASON_SEARCH_FAILED)
    return SelectedRoute(
        path=best.path_points,
        shelter_name=best.shelter.name,
        mode=MODE_ESCAPE if origin_in_danger else MODE_SAFE,
        distance_m=best.distance_m,
    )


__all__ = ["find_route", "rank_shelters", "path_touches_danger", "evaluate_candidate",
           "haversine_m", "sample_stride", "RoutingOracle", "MAX_CANDIDATES", "MAX_PATH_SAMPLES"]
