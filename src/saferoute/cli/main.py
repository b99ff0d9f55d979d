"""Command line interface for the SafeRoute evacuation engine.

Usage examples (from repository root):

  saferoute severity --rain 85
  saferoute simulate --rain 60 --traces data/flood_traces.geojson
  saferoute live
  saferoute route --lat 37.76 --lng 126.78 --rain 80

Flood traces and shelters are read from the configured WFS service unless local
GeoJSON files are given with ``--traces`` / ``--shelters``.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from saferoute.domain.models import RouteNotFound
from saferoute.domain.severity import classify_severity
from saferoute.exceptions import DataSourceError, OutsideBoundaryError
from saferoute.ingestion.boundary import load_boundary_rings
from saferoute.ingestion.routing_client import OSRMClient
from saferoute.ingestion.weather_client import WeatherAPIClient
from saferoute.ingestion.wfs_client import WFSClient, parse_flood_traces, parse_shelters
from saferoute.services.danger_region import buffer_distance_m
from saferoute.services.simulation import RegionSnapshot, SimulationContext


class _GeoJSONFileSource:
    """Offline stand-in for the WFS layers reading a local FeatureCollection."""

    def __init__(self, path: str):
        self.path = path

    def _features(self) -> List[dict]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise DataSourceError(f"Cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise DataSourceError(f"{self.path} is not a GeoJSON FeatureCollection")
        return data.get("features") or []

    def get_traces(self, boundary_rings) -> list:
        return parse_flood_traces(self._features(), boundary_rings)

    def get_shelters(self, boundary_rings) -> list:
        return parse_shelters(self._features(), boundary_rings)


def _build_context(args: argparse.Namespace) -> SimulationContext:
    wfs = WFSClient()
    trace_source = _GeoJSONFileSource(args.traces) if getattr(args, "traces", None) else wfs
    shelter_source = _GeoJSONFileSource(args.shelters) if getattr(args, "shelters", None) else wfs
    boundary_path = getattr(args, "boundary", None)
    context = SimulationContext.initialize_from_sources(
        trace_source=trace_source,
        shelter_source=shelter_source,
        boundary_loader=lambda: load_boundary_rings(boundary_path),
        oracle=OSRMClient(),
        weather_source=WeatherAPIClient(),
    )
    if context.data_status.degraded:
        print(f"Warning: data sources unavailable: {', '.join(context.data_status.failed_sources)}")
    print(f"Loaded {len(context.flood_traces)} flood traces, {len(context.shelters)} shelters")
    return context


def _print_snapshot(snapshot: RegionSnapshot) -> None:
    print(snapshot.description)
    print(f"  Rainfall: {snapshot.rainfall_mm} mm ({snapshot.source_mode})")
    if snapshot.weather_description:
        print(f"  Weather: {snapshot.weather_description}")
    print(f"  Buffer: {snapshot.buffer_m:.1f} m")
    print(f"  Danger region: {'none' if snapshot.region is None else type(snapshot.region).__name__}")
    print(f"  Reachable shelters: {len(snapshot.reachable)}")
    print(f"  Flooded shelters: {len(snapshot.flooded)}")


def _cmd_severity(args: argparse.Namespace) -> int:
    tier = classify_severity(args.rain)
    print(tier.describe(args.rain))
    print(f"  Tier: {tier.level}")
    print(f"  Buffer: {buffer_distance_m(args.rain):.1f} m")
    return 0


def _cmd_simulate(args: argparse.Namespace) -> int:
    if args.rain < 0:
        print("Rainfall amount must be a non-negative number")
        return 2
    context = _build_context(args)
    _print_snapshot(context.run_simulation(args.rain))
    return 0


def _cmd_live(args: argparse.Namespace) -> int:
    context = _build_context(args)
    snapshot = context.reset_to_live()
    _print_snapshot(snapshot)
    return 1 if snapshot.degraded else 0


def _cmd_route(args: argparse.Namespace) -> int:
    if args.rain is not None and args.rain < 0:
        print("Rainfall amount must be a non-negative number")
        return 2
    context = _build_context(args)
    if args.rain is None:
        snapshot = context.reset_to_live()
    else:
        snapshot = context.run_simulation(args.rain)
    _print_snapshot(snapshot)
    if context.is_in_danger(args.lat, args.lng):
        print("Origin is inside the danger zone: escaping to a safe place.")
    else:
        print("Searching the nearest safe shelter...")
    try:
        result = context.find_safe_route(args.lat, args.lng)
    except OutsideBoundaryError as e:
        print(str(e))
        return 2
    if isinstance(result, RouteNotFound):
        print(result.message)
        return 1
    print(result.summary())
    print(f"  Mode: {result.mode}")
    print(f"  Path points: {len(result.path)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="saferoute",
        description="Flood danger zones and safe evacuation routes",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_data_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("--traces", help="Local GeoJSON file of flood trace polygons")
        p.add_argument("--shelters", help="Local GeoJSON file of shelter points")
        p.add_argument("--boundary", help="Boundary GeoJSON file (defaults to BOUNDARY_GEOJSON)")

    p_sev = sub.add_parser("severity", help="Classify a rainfall amount (no data needed)")
    p_sev.add_argument("--rain", type=float, required=True, help="Rainfall amount (mm)")
    p_sev.set_defaults(func=_cmd_severity)

    p_sim = sub.add_parser("simulate", help="Build the danger region for a rainfall amount")
    p_sim.add_argument("--rain", type=int, required=True, help="Rainfall amount (mm)")
    add_data_args(p_sim)
    p_sim.set_defaults(func=_cmd_simulate)

    p_live = sub.add_parser("live", help="Build the danger region from live precipitation")
    add_data_args(p_live)
    p_live.set_defaults(func=_cmd_live)

    p_route = sub.add_parser("route", help="Find a safe evacuation route from a point")
    p_route.add_argument("--lat", type=float, required=True, help="Origin latitude")
    p_route.add_argument("--lng", type=float, required=True, help="Origin longitude")
    p_route.add_argument("--rain", type=int, default=None,
                         help="Simulated rainfall (mm); live observation when omitted")
    add_data_args(p_route)
    p_route.set_defaults(func=_cmd_route)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
