"""Application factory for creating and configuring the FastAPI app."""

from fastapi import FastAPI

from weather_search import __version__
from weather_search.core.lifespan import lifespan
from weather_search.core.middleware import setup_middleware
from weather_search.middleware.error_handlers import register_error_handlers
from weather_search.routers import health_router, location_router, search_router


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="Weather Search API",
        description="""
        **Weather Search** - current conditions by city name or device location

        ## Search
        - `POST /api/search/city` - search by city name
        - `POST /api/search/location` - search by device location (asks for permission first)
        - `GET /api/search/state` - current search state (loading, result, error, offline)

        ## Location
        - `POST /api/location/fix` - push a device fix; it triggers a search

        ## Health
        - `/health` - Basic health check with last known connectivity
        """,
        version=__version__,
        lifespan=lifespan,
    )

    setup_middleware(app)
    register_error_handlers(app)

    app.include_router(health_router.router, tags=["health"])
    app.include_router(search_router.router, prefix="/api/search", tags=["search"])
    app.include_router(location_router.router, prefix="/api/location", tags=["location"])

    return app
