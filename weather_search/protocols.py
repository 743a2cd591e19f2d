"""Protocol definitions for dependency injection."""

from typing import Protocol

from weather_search.models.weather import WeatherRecord


class WeatherClientProtocol(Protocol):
    """Protocol for weather clients.

    Implementations return a WeatherRecord or raise a FetchError subclass,
    allowing the orchestrator to be tested against canned responses.
    """

    async def fetch_by_city(self, name: str) -> WeatherRecord:
        """Fetch current weather for a city name.

        Args:
            name: City name

        Returns:
            Parsed weather record
        """
        ...

    async def fetch_by_coordinates(self, lat: float, lon: float) -> WeatherRecord:
        """Fetch current weather for a coordinate pair.

        Args:
            lat: Latitude in decimal degrees
            lon: Longitude in decimal degrees

        Returns:
            Parsed weather record
        """
        ...
