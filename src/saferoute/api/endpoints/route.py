"""Evacuation route endpoints.

``POST /route`` searches a route from a point against the current danger
region:

* 200 with the selected route (mode ``escape`` or ``safe``)
* 404 ``search failed`` when none of the nearest shelters has a valid route
* 409 ``unavailable`` when no shelter is reachable at all
* 422 when the origin lies outside the administrative boundary

``POST /point`` reports whether a point is inside the boundary and the danger
region.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from saferoute.api.dependencies import get_context
from saferoute.auth.auth import verify_token
from saferoute.domain.models import REASON_UNAVAILABLE, RouteNotFound
from saferoute.exceptions import OutsideBoundaryError
from saferoute.services.simulation import SimulationContext

router = APIRouter()


class PointRequest(BaseModel):
    lat: float = Field(..., ge=-90, le=90, description="Latitude in WGS84")
    lng: float = Field(..., ge=-180, le=180, description="Longitude in WGS84")


@router.post("/route")
def route(request: PointRequest, token: str = Depends(verify_token),
          context: SimulationContext = Depends(get_context)):
    """Find the best evacuation route from the requested origin.

    Raises
    ------
    HTTPException
        404 / 409 when no route is found, 422 when outside the boundary.
    """
    try:
        result = context.find_safe_route(request.lat, request.lng)
    except OutsideBoundaryError as e:
        raise HTTPException(status_code=422, detail=str(e))
    if isinstance(result, RouteNotFound):
        status_code = 409 if result.reason == REASON_UNAVAILABLE else 404
        raise HTTPException(status_code=status_code, detail=result.to_dict())
    return {"generation": context.current_snapshot.generation, **result.to_dict()}


@router.post("/point")
def point(request: PointRequest, token: str = Depends(verify_token),
          context: SimulationContext = Depends(get_context)):
    return {
        "lat": request.lat,
        "lng": request.lng,
        "in_boundary": context.is_in_boundary(request.lat, request.lng),
        "in_danger": context.is_in_danger(request.lat, request.lng),
        "generation": context.current_snapshot.generation,
    }
