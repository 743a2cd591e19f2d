"""Search API routes.

Commands are awaited until the orchestrator settles, so each response
carries the resulting state snapshot.
"""

from fastapi import APIRouter, Depends, Request

from weather_search.core.middleware import limiter
from weather_search.dependencies import get_orchestrator
from weather_search.models import CitySearchRequest, SearchState
from weather_search.orchestrator import SearchOrchestrator

router = APIRouter()


@router.get("/state", response_model=SearchState, summary="Get current search state")
async def get_search_state(orchestrator: SearchOrchestrator = Depends(get_orchestrator)):
    """Return the current search state snapshot."""
    return orchestrator.state


@router.post(
    "/city",
    response_model=SearchState,
    summary="Search weather by city name",
    description="""
    Looks up current conditions for a city. Errors (empty input, unknown
    city, network failures) are reported in `error_message`, not as HTTP
    errors.

    **Rate Limited:** 30 requests/minute
    """,
    responses={
        200: {
            "description": "Search settled",
            "content": {
                "application/json": {
                    "example": {
                        "city_name_input": "London",
                        "current_weather": {
                            "location_name": "London",
                            "temperature_c": 20.0,
                            "temperature_min_c": 18.0,
                            "temperature_max_c": 22.0,
                            "humidity_pct": 65,
                            "conditions": [
                                {"id": 800, "category": "Clear", "description": "clear sky", "icon_code": "01d"}
                            ],
                            "icon_url": "https://openweathermap.org/img/wn/01d@2x.png",
                        },
                        "is_loading": False,
                        "is_offline": False,
                        "no_data_found": False,
                        "error_message": None,
                    }
                }
            },
        },
    },
)
@limiter.limit("30/minute")
async def search_city(
    request: Request,
    body: CitySearchRequest,
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
):
    """Submit a city search and return the settled state."""
    await orchestrator.submit_city_search(body.city_name)
    await orchestrator.wait_idle()
    return orchestrator.state


@router.post("/location", response_model=SearchState, summary="Search weather by device location")
@limiter.limit("30/minute")
async def search_location(
    request: Request,
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
):
    """Submit a location search and return the settled state."""
    await orchestrator.submit_location_search()
    await orchestrator.wait_idle()
    return orchestrator.state
