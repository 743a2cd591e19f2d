"""Application lifespan: builds the search services on startup, tears them down on shutdown."""

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI

from weather_search import __version__
from weather_search.config import Settings, get_settings
from weather_search.logging_config import get_logger, log_with_context, redact_url
from weather_search.models.location import Coordinate
from weather_search.orchestrator import SearchOrchestrator
from weather_search.persistence import JsonFileStore
from weather_search.services.connectivity import ConnectivityMonitor, HttpConnectivityProbe
from weather_search.services.location import ConfiguredLocationSource
from weather_search.services.weather_service import WeatherClient

logger = get_logger(__name__)


async def log_request(request: httpx.Request) -> None:
    log_with_context(
        logger,
        "debug",
        "Outbound request",
        method=request.method,
        url=redact_url(request.url),
        event_type="http_request",
    )


async def log_response(response: httpx.Response) -> None:
    log_with_context(
        logger,
        "debug",
        "Outbound response",
        status_code=response.status_code,
        url=redact_url(response.request.url),
        event_type="http_response",
    )


def build_http_client() -> httpx.AsyncClient:
    """Shared client for the weather API and the connectivity probe.

    Request timeouts are configured only here.
    """
    event_hooks: dict[str, list[Callable[..., Any]]] = {
        "request": [log_request],
        "response": [log_response],
    }
    return httpx.AsyncClient(  # nosec B113
        timeout=httpx.Timeout(connect=5.0, read=10.0, write=5.0, pool=5.0),
        limits=httpx.Limits(max_keepalive_connections=5, max_connections=10, keepalive_expiry=30.0),
        follow_redirects=True,
        event_hooks=event_hooks,
    )


def build_orchestrator(
    settings: Settings, client: httpx.AsyncClient
) -> tuple[SearchOrchestrator, ConfiguredLocationSource, ConnectivityMonitor]:
    coordinate = None
    if settings.weather_latitude is not None and settings.weather_longitude is not None:
        coordinate = Coordinate(latitude=settings.weather_latitude, longitude=settings.weather_longitude)

    location_source = ConfiguredLocationSource(coordinate)
    monitor = ConnectivityMonitor(
        HttpConnectivityProbe(client, settings.connectivity_probe_url),
        interval_seconds=settings.connectivity_interval_seconds,
    )
    orchestrator = SearchOrchestrator(
        WeatherClient(client, settings.weather_api_key, settings.weather_base_url),
        location_source,
        connectivity_monitor=monitor,
        store=JsonFileStore(settings.state_file),
        fence_stale_responses=settings.fence_stale_responses,
    )
    return orchestrator, location_source, monitor


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Own the HTTP client, location source, monitor and orchestrator.

    Services are published on app.state for the dependency functions.
    Shutdown runs even when the app fails; the error is logged and re-raised.
    """
    settings = get_settings()
    log_with_context(
        logger,
        "info",
        "Starting Weather Search",
        version=__version__,
        location_configured=settings.weather_latitude is not None,
        fence_stale_responses=settings.fence_stale_responses,
        event_type="app_startup",
    )

    client = build_http_client()
    orchestrator, location_source, monitor = build_orchestrator(settings, client)

    app.state.http_client = client
    app.state.location_source = location_source
    app.state.connectivity_monitor = monitor
    app.state.orchestrator = orchestrator

    await orchestrator.initialize()
    log_with_context(
        logger,
        "info",
        "Search orchestrator ready",
        state_file=str(settings.state_file),
        event_type="orchestrator_ready",
    )

    try:
        yield
    except Exception as e:
        log_with_context(
            logger,
            "error",
            "Application error during lifespan",
            error=str(e),
            error_type=type(e).__name__,
            event_type="app_error",
        )
        raise
    finally:
        await orchestrator.cleanup()
        await client.aclose()
        log_with_context(logger, "info", "Weather Search stopped", event_type="app_shutdown")
