"""Observable search state published to the presentation layer."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator

from weather_search.models.weather import WeatherRecord

MAX_CITY_NAME_LENGTH = 100


class ConnectivityStatus(str, Enum):
    """Two-valued network reachability status."""

    CONNECTED = "connected"
    NOT_CONNECTED = "not_connected"


class SearchState(BaseModel):
    """Single source of truth for the presentation layer.

    Assignments are validated, so the city name bound holds on every mutation,
    not only at construction.
    """

    model_config = ConfigDict(validate_assignment=True)

    city_name_input: str = ""
    current_weather: WeatherRecord | None = None
    is_loading: bool = False
    is_offline: bool = False
    no_data_found: bool = False
    error_message: str | None = None

    @field_validator("city_name_input", mode="before")
    @classmethod
    def truncate_city_name(cls, v: object) -> object:
        """Keep only the first 100 characters of the city name."""
        if isinstance(v, str) and len(v) > MAX_CITY_NAME_LENGTH:
            return v[:MAX_CITY_NAME_LENGTH]
        return v
