"""FastAPI dependencies resolving the services the lifespan placed on app.state."""

from fastapi import Request

from weather_search.exceptions import ServiceUnavailableError
from weather_search.orchestrator import SearchOrchestrator
from weather_search.services.connectivity import ConnectivityMonitor
from weather_search.services.location import ConfiguredLocationSource


async def get_orchestrator(request: Request) -> SearchOrchestrator:
    """
    Get the shared search orchestrator.

    Raises:
        ServiceUnavailableError: If the lifespan has not created it.
    """
    orchestrator: SearchOrchestrator | None = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise ServiceUnavailableError("Search orchestrator")
    return orchestrator


async def get_location_source(request: Request) -> ConfiguredLocationSource:
    source: ConfiguredLocationSource | None = getattr(request.app.state, "location_source", None)
    if source is None:
        raise ServiceUnavailableError("Location source")
    return source


async def get_connectivity_monitor(request: Request) -> ConnectivityMonitor | None:
    """The connectivity monitor, or None when running without one."""
    return getattr(request.app.state, "connectivity_monitor", None)
