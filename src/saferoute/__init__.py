"""SafeRoute flood danger-zone modeling and evacuation route engine.

Public entry points are re-exported here for convenience::

    from saferoute import SimulationContext, build_danger_region, find_route
"""

from saferoute.services.danger_region import build_danger_region, buffer_distance_m
from saferoute.services.route_evaluator import find_route
from saferoute.services.simulation import SimulationContext

__version__ = "0.1.0"

__all__ = ["SimulationContext", "build_danger_region",
           "buffer_distance_m", "find_route", "__version__"]
