"""Pytest configuration and shared fixtures."""

import asyncio
from unittest.mock import AsyncMock

import httpx
import pytest

from weather_search.config import Settings
from weather_search.models.location import Coordinate, LocationPermission
from weather_search.models.weather import ConditionDetail, WeatherRecord
from weather_search.persistence import InMemoryStore


class StubWeatherClient:
    """Weather client double returning canned records or raising canned errors.

    Calls are recorded. Setting gates[key] to an asyncio.Event holds that
    fetch until the event is set, so tests control the order in which
    concurrent fetches resolve. Keys are the city name or "lat,lon".
    """

    def __init__(self, result: WeatherRecord | Exception | None = None):
        self.result = result
        self.city_calls: list[str] = []
        self.coordinate_calls: list[tuple[float, float]] = []
        self.gates: dict[str, asyncio.Event] = {}
        self.results_by_key: dict[str, WeatherRecord | Exception] = {}

    async def _resolve(self, key: str) -> WeatherRecord:
        gate = self.gates.get(key)
        if gate is not None:
            await gate.wait()
        result = self.results_by_key.get(key, self.result)
        if isinstance(result, Exception):
            raise result
        if result is None:
            raise AssertionError(f"No canned result for {key}")
        return result

    async def fetch_by_city(self, name: str) -> WeatherRecord:
        self.city_calls.append(name)
        return await self._resolve(name)

    async def fetch_by_coordinates(self, lat: float, lon: float) -> WeatherRecord:
        self.coordinate_calls.append((lat, lon))
        return await self._resolve(f"{lat},{lon}")


class FakeLocationSource:
    """Location source double that records requests and lets tests push events."""

    def __init__(self, permission: LocationPermission = LocationPermission.NOT_DETERMINED):
        self.permission = permission
        self.permission_requests = 0
        self.location_requests = 0
        self.coordinate_listeners = []
        self.permission_listeners = []

    def request_permission(self) -> None:
        self.permission_requests += 1

    def request_location(self) -> None:
        self.location_requests += 1

    def add_coordinate_listener(self, listener) -> None:
        self.coordinate_listeners.append(listener)

    def remove_coordinate_listener(self, listener) -> None:
        self.coordinate_listeners.remove(listener)

    def add_permission_listener(self, listener) -> None:
        self.permission_listeners.append(listener)

    def remove_permission_listener(self, listener) -> None:
        self.permission_listeners.remove(listener)

    def push_coordinate(self, coordinate: Coordinate) -> None:
        for listener in list(self.coordinate_listeners):
            listener(coordinate)

    def push_permission(self, permission: LocationPermission) -> None:
        self.permission = permission
        for listener in list(self.permission_listeners):
            listener(permission)


def make_record(
    location_name: str = "London",
    conditions: list[ConditionDetail] | None = None,
    temperature_c: float = 20.0,
) -> WeatherRecord:
    """Build a WeatherRecord; pass conditions=[] for an empty result."""
    if conditions is None:
        conditions = [ConditionDetail(id=800, category="Clear", description="Clear sky", icon_code="01d")]
    return WeatherRecord(
        location_name=location_name,
        temperature_c=temperature_c,
        temperature_min_c=18.0,
        temperature_max_c=22.0,
        humidity_pct=65,
        conditions=conditions,
    )


@pytest.fixture
def london_record():
    """WeatherRecord for London with one clear-sky condition."""
    return make_record()


@pytest.fixture
def stub_weather_client(london_record):
    """Weather client stub that returns the London record by default."""
    return StubWeatherClient(london_record)


@pytest.fixture
def fake_location_source():
    """Location source with undetermined permission."""
    return FakeLocationSource()


@pytest.fixture
def memory_store():
    """Empty in-memory key-value store."""
    return InMemoryStore()


@pytest.fixture
def mock_http_client():
    """Mock httpx.AsyncClient for external API calls."""
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get = AsyncMock()
    mock_client.head = AsyncMock()
    mock_client.aclose = AsyncMock()
    return mock_client


@pytest.fixture
def mock_settings():
    """Settings instance with test values."""
    return Settings(
        api_host="127.0.0.1",
        api_port=8000,
        weather_api_key="test-weather-key",
        weather_latitude=51.5074,
        weather_longitude=-0.1278,
    )


@pytest.fixture
def mock_weather_response():
    """Mock OpenWeatherMap API response."""
    return {
        "coord": {"lon": -0.1278, "lat": 51.5074},
        "weather": [{"id": 800, "main": "Clear", "description": "Clear sky", "icon": "01d"}],
        "base": "stations",
        "main": {
            "temp": 20.0,
            "feels_like": 19.4,
            "temp_min": 18.0,
            "temp_max": 22.0,
            "pressure": 1013,
            "humidity": 65,
        },
        "visibility": 10000,
        "wind": {"speed": 3.5, "deg": 180},
        "name": "London",
        "cod": 200,
    }


@pytest.fixture
def record_factory():
    """Factory for WeatherRecord instances (see make_record)."""
    return make_record


@pytest.fixture
def stub_client_factory():
    """Factory for StubWeatherClient instances."""
    return StubWeatherClient


@pytest.fixture
def location_source_factory():
    """Factory for FakeLocationSource instances with a given permission."""
    return FakeLocationSource
