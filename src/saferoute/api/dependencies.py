"""Shared FastAPI dependencies.

The process holds one :class:`SimulationContext`; it is created on first use
from the configured collaborators, or installed explicitly by the application
lifespan (and by tests through ``dependency_overrides``).
"""
from __future__ import annotations

from typing import Optional

from saferoute.ingestion.boundary import load_boundary_rings
from saferoute.ingestion.routing_client import OSRMClient
from saferoute.ingestion.weather_client import WeatherAPIClient
from saferoute.ingestion.wfs_client import WFSClient
from saferoute.services.simulation import SimulationContext

_context: Optional[SimulationContext] = None


def build_default_context() -> SimulationContext:
    wfs = WFSClient()
    return SimulationContext.initialize_from_sources(
        trace_source=wfs,
        shelter_source=wfs,
        boundary_loader=load_boundary_rings,
        oracle=OSRMClient(),
        weather_source=WeatherAPIClient(),
    )


def set_context(context: Optional[SimulationContext]) -> None:
    global _context
    _context = context


def get_context() -> SimulationContext:
    global _context
    if _context is None:
        _context = build_default_context()
    return _context
