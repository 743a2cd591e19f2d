"""Pydantic models for request/response validation."""

from typing import Any

from pydantic import BaseModel, Field

from weather_search.models.state import ConnectivityStatus


class HealthResponse(BaseModel):
    """Basic health check response."""

    status: str
    version: str
    connectivity: ConnectivityStatus | None = None


class CitySearchRequest(BaseModel):
    """Body of a city search command.

    Length is not validated here; the search state truncates it.
    """

    city_name: str = Field(default="", description="City to look up")


class LocationFixRequest(BaseModel):
    """A device fix pushed by the presentation layer."""

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class ErrorResponse(BaseModel):
    """Body of the `error` object in failed responses."""

    code: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)
