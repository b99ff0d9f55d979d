"""Danger-region endpoints.

* ``POST /simulate`` - user rainfall amount (simulation mode)
* ``POST /live``     - switch back to the live precipitation observation
* ``GET  /region``   - current snapshot: region GeoJSON, severity, styling,
  reachable and flooded shelters
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from saferoute.api.dependencies import get_context
from saferoute.auth.auth import verify_token
from saferoute.services.simulation import SimulationContext

router = APIRouter()


class SimulateRequest(BaseModel):
    """Request body for a rainfall simulation.

    Attributes
    ----------
    rainfall_mm:
        Simulated rainfall amount in millimetres (whole number, >= 0).
    """
    rainfall_mm: int = Field(..., ge=0, examples=[80])


@router.post("/simulate")
def simulate(req: SimulateRequest, token: str = Depends(verify_token),
             context: SimulationContext = Depends(get_context)):
    """Rebuild the danger region for the requested rainfall amount."""
    return context.run_simulation(req.rainfall_mm).to_dict()


@router.post("/live")
def live(token: str = Depends(verify_token), context: SimulationContext = Depends(get_context)):
    """Rebuild the danger region from the live observation."""
    return context.reset_to_live().to_dict()


@router.get("/region")
def region(token: str = Depends(verify_token), context: SimulationContext = Depends(get_context)):
    return context.current_snapshot.to_dict()
