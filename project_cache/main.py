"""FastAPI application entry point.

Wiring only: logging, lifespan, routers. Request handlers of the project
backend get the shared cache through project_cache.api.v1.dependencies.get_cache.

Settings are loaded inside create_app() so that tests can set env (and
clear the get_settings cache) before calling create_app().
"""

from fastapi import FastAPI

from project_cache.api.v1.router import api_router
from project_cache.core.config import get_settings
from project_cache.core.lifespan import create_lifespan
from project_cache.shared.telemetry.logging import setup_logging


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    settings = get_settings()
    setup_logging()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )
    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()
