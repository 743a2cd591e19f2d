"""Weather Search models"""

from weather_search.models.base_models import CitySearchRequest, ErrorResponse, HealthResponse, LocationFixRequest
from weather_search.models.location import Coordinate, LocationPermission
from weather_search.models.state import ConnectivityStatus, SearchState
from weather_search.models.weather import (
    CityQuery,
    ConditionDetail,
    CoordinatesQuery,
    CurrentWeather,
    WeatherQuery,
    WeatherRecord,
)

__all__ = [
    "CitySearchRequest",
    "ErrorResponse",
    "HealthResponse",
    "LocationFixRequest",
    "Coordinate",
    "LocationPermission",
    "ConnectivityStatus",
    "SearchState",
    "CityQuery",
    "ConditionDetail",
    "CoordinatesQuery",
    "CurrentWeather",
    "WeatherQuery",
    "WeatherRecord",
]
