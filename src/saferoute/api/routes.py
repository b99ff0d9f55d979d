from fastapi import APIRouter
from saferoute.api.endpoints import simulate, route

api_router = APIRouter()
api_router.include_router(simulate.router, prefix="", tags=["simulate"])
api_router.include_router(route.router, prefix="", tags=["route"])
