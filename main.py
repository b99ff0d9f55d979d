"""FastAPI application entry point for the SafeRoute service.

This module provides the main FastAPI application. On startup the flood traces,
shelter directory and boundary are loaded once and the danger region is built
from the live precipitation observation. Loading can be skipped by setting the
SKIP_DATA_LOAD environment variable to "true", "1", or "yes", in which case the
context is created lazily on the first request.
"""

from fastapi import FastAPI
from contextlib import asynccontextmanager
from saferoute.api.routes import api_router
from saferoute.api.dependencies import build_default_context, set_context
import argparse
import os
import uvicorn


@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI application lifespan context manager.

    Loads the collaborators' data and publishes the first live snapshot.

    Parameters
    ----------
    app : FastAPI
        The FastAPI application instance.
    """
    if not os.getenv("SKIP_DATA_LOAD", "").lower() in ["true", "1", "yes"]:
        context = build_default_context()
        context.reset_to_live()
        set_context(context)
    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Mounts the API router at the /api/v1 prefix.
    """
    app = FastAPI(title="saferoute-service", lifespan=lifespan)
    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()

if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="SafeRoute evacuation service")
    parser.add_argument("--skip-data-load", action="store_true",
                        help="Do not load flood traces and shelters at startup")
    parser.add_argument("--port", type=int, default=8008)

    args = parser.parse_args()

    if args.skip_data_load:
        os.environ["SKIP_DATA_LOAD"] = "true"

    uvicorn.run(app, host="0.0.0.0", port=args.port)
