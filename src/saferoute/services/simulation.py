"""Simulation context orchestrating one danger-region cycle at a time.

The context owns the read-only inputs (flood traces, boundary rings, shelter
directory) and publishes an immutable :class:`RegionSnapshot` whenever the
active rainfall changes, either from a user simulation or from the live
observation. Each snapshot carries a generation number; a route search reads
the snapshot current when it starts, so every predicate in that search sees
the same region. A newer snapshot supersedes the stored route.

Collaborators are injected (routing oracle, weather source, data sources) for
easier testing.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Union

from saferoute.domain.models import RouteNotFound, SelectedRoute, Shelter, as_ring
from saferoute.domain.region import DangerRegion, region_to_geojson
from saferoute.domain.severity import SeverityTier, classify_severity, describe_live, describe_rainfall
from saferoute.exceptions import DataSourceError, OutsideBoundaryError
from saferoute.services.danger_region import buffer_distance_m, build_danger_region
from saferoute.services.route_evaluator import RoutingOracle, find_route
from saferoute.services.shelters import classify_shelters
from saferoute.spatial.predicates import point_in_boundary, point_in_region

logger = logging.getLogger(__name__)

SOURCE_SIMULATION = "simulation"
SOURCE_LIVE = "live"


@dataclass(frozen=True)
class RegionSnapshot:
    generation: int
    rainfall_mm: float
    source_mode: str
    region: Optional[DangerRegion]
    severity: SeverityTier
    description: str
    reachable: Tuple[Shelter, ...]
    flooded: Tuple[Shelter, ...]
    degraded: bool = False
    weather_description: Optional[str] = None

    @property
    def buffer_m(self) -> float:
        return buffer_distance_m(self.rainfall_mm)

    def to_dict(self) -> Dict:
        return {
            "generation": self.generation,
            "rainfall_mm": self.rainfall_mm,
            "source_mode": self.source_mode,
            "buffer_m": self.buffer_m,
            "severity": self.severity.level,
            "description": self.description,
            "status_color": self.severity.status_color,
            "gauge_class": self.severity.gauge_class,
            "region_style": self.severity.region_style,
            "region": region_to_geojson(self.region),
            "reachable": [s.to_dict() for s in self.reachable],
            "flooded": [s.to_dict() for s in self.flooded],
            "degraded": self.degraded,
            "weather_description": self.weather_description,
        }


@dataclass
class DataStatus:
    """Which upstream sources failed during initialization."""
    failed_sources: List[str] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return bool(self.failed_sources)


class SimulationContext:
    """Current danger region, shelter partition and displayed route."""

    def __init__(self, flood_traces: Sequence = (), boundary_rings: Sequence = (),
                 shelters: Sequence[Shelter] = (), oracle: Optional[RoutingOracle] = None,
                 weather_source=None):
        self.flood_traces = tuple(as_ring(r) for r in flood_traces)
        self.boundary_rings = tuple(as_ring(r) for r in boundary_rings)
        self.shelters = tuple(shelters)
        self.oracle = oracle
        self.weather_source = weather_source
        self.data_status = DataStatus()
        self._generation = 0
        self._snapshot = self._make_snapshot(0, SOURCE_LIVE, degraded=False)
        self._route: Optional[Union[SelectedRoute, RouteNotFound]] = None

    # ----------------------------- Construction ---------------------------- #
    @classmethod
    def initialize_from_sources(cls, trace_source=None, shelter_source=None, boundary_loader=None,
                                oracle: Optional[RoutingOracle] = None, weather_source=None) -> "SimulationContext":
        """Load boundary, shelters and traces, continuing with empties on failure."""
        status = DataStatus()
        boundary: List = []
        if boundary_loader is not None:
            try:
                boundary = boundary_loader()
            except DataSourceError as e:
                logger.warning("Boundary unavailable, containment fails open: %s", e)
                status.failed_sources.append("boundary")
        shelters: List = []
        if shelter_source is not None:
            try:
                shelters = shelter_source.get_shelters(boundary)
            except DataSourceError as e:
                logger.warning("Shelter directory unavailable: %s", e)
                status.failed_sources.append("shelters")
        traces: List = []
        if trace_source is not None:
            try:
                traces = trace_source.get_traces(boundary)
            except DataSourceError as e:
                logger.warning("Flood traces unavailable, no danger region can be built: %s", e)
                status.failed_sources.append("flood_traces")
        context = cls(flood_traces=traces, boundary_rings=boundary, shelters=shelters,
                      oracle=oracle, weather_source=weather_source)
        context.data_status = status
        return context

    # ------------------------------- State --------------------------------- #
    @property
    def current_snapshot(self) -> RegionSnapshot:
        return self._snapshot

    @property
    def current_region(self) -> Optional[DangerRegion]:
        return self._snapshot.region

    @property
    def current_route(self) -> Optional[Union[SelectedRoute, RouteNotFound]]:
        return self._route

    def _make_snapshot(self, rainfall: float, source_mode: str, degraded: bool,
                       weather_description: Optional[str] = None) -> RegionSnapshot:
        region = build_danger_region(rainfall, self.flood_traces)
        partition = classify_shelters(self.shelters, region)
        if source_mode == SOURCE_LIVE:
            description = describe_live(rainfall, region is not None)
        else:
            description = describe_rainfall(rainfall)
        return RegionSnapshot(
            generation=self._generation,
            rainfall_mm=rainfall,
            source_mode=source_mode,
            region=region,
            severity=classify_severity(rainfall),
            description=description,
            reachable=partition.reachable,
            flooded=partition.flooded,
            degraded=degraded,
            weather_description=weather_description,
        )

    def _publish(self, rainfall: float, source_mode: str, degraded: bool = False,
                 weather_description: Optional[str] = None) -> RegionSnapshot:
        self._generation += 1
        snapshot = self._make_snapshot(rainfall, source_mode, degraded or self.data_status.degraded,
                                       weather_description)
        self._snapshot = snapshot
        self._route = None
        logger.info("Region generation %d: %s mm (%s), %d reachable / %d flooded shelters",
                    snapshot.generation, rainfall, source_mode,
                    len(snapshot.reachable), len(snapshot.flooded))
        return snapshot

    # ------------------------------ Cycles --------------------------------- #
    def run_simulation(self, amount: float) -> RegionSnapshot:
        """Switch to simulation mode with a user-supplied rainfall amount."""
        if amount is None or amount < 0:
            raise ValueError("Rainfall amount must be a non-negative number")
        return self._publish(amount, SOURCE_SIMULATION)

    def reset_to_live(self) -> RegionSnapshot:
        """Switch back to the live observation; 0 mm when it cannot be read."""
        observation = self.weather_source.fetch_current() if self.weather_source else None
        if observation is None:
            logger.warning("Live weather unavailable, assuming 0 mm")
            return self._publish(0, SOURCE_LIVE, degraded=True)
        return self._publish(observation.precipitation_mm, SOURCE_LIVE,
                             weather_description=observation.description)

    # ----------------------------- Queries --------------------------------- #
    def is_in_boundary(self, lat: float, lng: float) -> bool:
        return point_in_boundary(lat, lng, self.boundary_rings)

    def is_in_danger(self, lat: float, lng: float) -> bool:
        return point_in_region(lat, lng, self._snapshot.region)

    def find_safe_route(self, lat: float, lng: float) -> Union[SelectedRoute, RouteNotFound]:
        """Search a route from (lat, lng) against the current snapshot.

        Raises
        ------
        OutsideBoundaryError
            If the origin lies outside the loaded boundary.
        ValueError
            If no routing oracle is configured.
        """
        if not self.is_in_boundary(lat, lng):
            raise OutsideBoundaryError(lat, lng)
        if self.oracle is None:
            raise ValueError("No routing oracle configured")
        snapshot = self._snapshot
        result = find_route(lat, lng, snapshot.reachable, snapshot.region, self.oracle)
        # a newer cycle published meanwhile owns the display
        if snapshot.generation == self._generation:
            self._route = result
        return result


__all__ = ["SimulationContext", "RegionSnapshot", "DataStatus",
           "SOURCE_SIMULATION", "SOURCE_LIVE"]
