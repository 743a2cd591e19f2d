"""Health endpoint."""

from fastapi import APIRouter, Depends

from weather_search import __version__
from weather_search.dependencies import get_connectivity_monitor
from weather_search.models import HealthResponse
from weather_search.services.connectivity import ConnectivityMonitor

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(monitor: ConnectivityMonitor | None = Depends(get_connectivity_monitor)):
    """Basic health check endpoint.

    Reports the last status seen by the connectivity monitor, or null before
    the first probe completes.
    """
    return HealthResponse(
        status="ok",
        version=__version__,
        connectivity=monitor.status if monitor is not None else None,
    )
