"""Location API routes."""

from fastapi import APIRouter, Depends, Request

from weather_search.core.middleware import limiter
from weather_search.dependencies import get_location_source, get_orchestrator
from weather_search.models import Coordinate, LocationFixRequest, SearchState
from weather_search.orchestrator import SearchOrchestrator
from weather_search.services.location import ConfiguredLocationSource

router = APIRouter()


@router.post("/fix", response_model=SearchState, summary="Report a device location fix")
@limiter.limit("30/minute")
async def report_fix(
    request: Request,
    body: LocationFixRequest,
    source: ConfiguredLocationSource = Depends(get_location_source),
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
):
    """Push a coordinate from the device; the orchestrator searches it."""
    source.report_coordinate(Coordinate(latitude=body.latitude, longitude=body.longitude))
    await orchestrator.wait_idle()
    return orchestrator.state
