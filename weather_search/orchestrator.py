"""Search orchestrator: the state machine behind the weather search screen.

Three asynchronous sources feed one SearchState: user commands, the
location source's coordinate/permission streams and the connectivity
monitor. Every mutation happens under a single asyncio.Lock; fetches are
awaited outside it, so a new command may start while an earlier fetch is
still loading. In-flight fetches are never cancelled, so by default the last
response to arrive wins. With fence_stale_responses enabled, a result is
dropped when a newer fetch has been dispatched since it started.

No failure propagates to callers: every outcome ends up in SearchState.
"""

import asyncio
from collections.abc import Callable, Coroutine
from typing import Any

from weather_search.exceptions import ErrorCode, FetchError
from weather_search.logging_config import get_logger, log_with_context
from weather_search.models.location import Coordinate, LocationPermission
from weather_search.models.state import ConnectivityStatus, SearchState
from weather_search.persistence import LAST_SEARCHED_CITY_KEY, InMemoryStore, KeyValueStore
from weather_search.protocols import WeatherClientProtocol
from weather_search.services.connectivity import ConnectivityMonitor
from weather_search.services.location import LocationSource

logger = get_logger(__name__)

EMPTY_CITY_MESSAGE = "City name cannot be empty."
NO_DATA_MESSAGE = "No data found for the given city."
LOCATION_DENIED_MESSAGE = "Location access is restricted or denied. Please enable location services in settings."
LOCATION_UNKNOWN_MESSAGE = "An unknown error occurred with location permissions."
OFFLINE_MESSAGE = "No internet connection."

StateListener = Callable[[SearchState], None]


class SearchOrchestrator:
    """Owns SearchState and sequences weather fetches.

    Lifecycle follows the app lifespan: initialize() on startup, cleanup()
    on shutdown.

    Presentation code reads `state` (a copy) or subscribes to snapshots;
    it never mutates the state directly.
    """

    def __init__(
        self,
        weather_client: WeatherClientProtocol,
        location_source: LocationSource,
        connectivity_monitor: ConnectivityMonitor | None = None,
        store: KeyValueStore | None = None,
        fence_stale_responses: bool = False,
    ):
        self._weather_client = weather_client
        self._location_source = location_source
        self._monitor = connectivity_monitor
        self._store: KeyValueStore = store if store is not None else InMemoryStore()
        self._fence_stale_responses = fence_stale_responses

        self._state = SearchState()
        self._lock = asyncio.Lock()
        self._listeners: list[StateListener] = []
        self._tasks: set[asyncio.Task] = set()
        self._fetch_sequence = 0
        self._awaiting_permission = False

        location_source.add_coordinate_listener(self._on_coordinate)
        location_source.add_permission_listener(self._on_permission_change)

    # Lifecycle

    async def initialize(self) -> None:
        """Restore the last searched city, then start watching connectivity.

        The restored search runs in the background; use wait_idle() to
        observe its outcome.
        """
        try:
            last_city = self._store.get_string(LAST_SEARCHED_CITY_KEY)
        except (OSError, ValueError) as e:
            log_with_context(
                logger,
                "error",
                "Could not read last searched city",
                error=str(e),
                error_type=type(e).__name__,
                event_type="search_restore_failed",
            )
            last_city = None
        if last_city:
            log_with_context(
                logger,
                "info",
                "Restoring last searched city",
                city=last_city,
                event_type="search_restore",
            )
            await self.set_city_name_input(last_city)
            self._spawn(self.submit_city_search(last_city), name="search-restore")

        if self._monitor is not None:
            await self._monitor.start(self._on_connectivity_change)

    async def cleanup(self) -> None:
        """Stop the monitor, drop listeners and cancel pending background work."""
        if self._monitor is not None:
            await self._monitor.stop()

        self._location_source.remove_coordinate_listener(self._on_coordinate)
        self._location_source.remove_permission_listener(self._on_permission_change)

        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
        self._listeners.clear()

    # Observation

    @property
    def state(self) -> SearchState:
        """Read-only snapshot of the current state."""
        return self._state.model_copy(deep=True)

    def subscribe(self, listener: StateListener) -> None:
        """Receive a snapshot after every state change."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def wait_idle(self) -> None:
        """Wait until work scheduled from event streams has settled."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _publish(self) -> None:
        snapshot = self._state.model_copy(deep=True)
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("State listener failed")

    def _spawn(self, coro: Coroutine[Any, Any, None], name: str) -> None:
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    # Commands

    async def set_city_name_input(self, name: str) -> None:
        """Update the city text without searching (truncated to 100 characters)."""
        async with self._lock:
            self._state.city_name_input = name
            self._publish()

    async def submit_city_search(self, name: str) -> None:
        """Search by city name.

        An empty (or whitespace-only) name is rejected without a network call.
        """
        async with self._lock:
            self._state.city_name_input = name
            city = self._state.city_name_input
            if not city.strip():
                self._fail_immediately(EMPTY_CITY_MESSAGE, ErrorCode.INPUT_INVALID)
                return
            sequence = self._begin_fetch()

        log_with_context(
            logger,
            "info",
            "City search started",
            city=city,
            sequence=sequence,
            event_type="search_city",
        )
        try:
            record = await self._weather_client.fetch_by_city(city)
        except Exception as e:
            await self._finish_with_error(sequence, e)
            return

        async with self._lock:
            if self._is_stale(sequence):
                return
            self._state.is_loading = False
            if not record.conditions:
                self._state.current_weather = None
                self._state.no_data_found = True
                self._state.error_message = NO_DATA_MESSAGE
                log_with_context(
                    logger,
                    "info",
                    "No weather conditions returned",
                    city=city,
                    error_code=ErrorCode.EMPTY_RESULT.value,
                    event_type="search_no_data",
                )
            else:
                self._state.current_weather = record
                self._persist_city(city)
                log_with_context(
                    logger,
                    "info",
                    "City search succeeded",
                    city=city,
                    location=record.location_name,
                    event_type="search_success",
                )
            self._publish()

    async def submit_location_search(self) -> None:
        """Search by the device location, asking for permission first if needed.

        The fix itself arrives later on the coordinate stream.
        """
        permission = self._location_source.permission

        if permission == LocationPermission.NOT_DETERMINED:
            log_with_context(
                logger,
                "info",
                "Requesting location permission",
                event_type="location_permission_request",
            )
            self._awaiting_permission = True
            self._location_source.request_permission()
            return

        if permission.is_blocked:
            async with self._lock:
                self._fail_immediately(LOCATION_DENIED_MESSAGE, ErrorCode.LOCATION_DENIED)
            return

        if permission.is_authorized:
            log_with_context(
                logger,
                "info",
                "Requesting location fix",
                permission=permission.value,
                event_type="location_request",
            )
            self._location_source.request_location()
            return

        async with self._lock:
            self._fail_immediately(LOCATION_UNKNOWN_MESSAGE, ErrorCode.LOCATION_DENIED)

    async def search_coordinates(self, coordinate: Coordinate) -> None:
        """Search by a location fix; on success the city input follows the result."""
        async with self._lock:
            sequence = self._begin_fetch()

        log_with_context(
            logger,
            "info",
            "Coordinate search started",
            latitude=coordinate.latitude,
            longitude=coordinate.longitude,
            sequence=sequence,
            event_type="search_coordinates",
        )
        try:
            record = await self._weather_client.fetch_by_coordinates(coordinate.latitude, coordinate.longitude)
        except Exception as e:
            await self._finish_with_error(sequence, e)
            return

        async with self._lock:
            if self._is_stale(sequence):
                return
            self._state.is_loading = False
            self._state.current_weather = record
            self._state.city_name_input = record.location_name
            self._persist_city(self._state.city_name_input)
            self._publish()

    async def handle_connectivity_change(self, status: ConnectivityStatus) -> None:
        """Apply a connectivity transition.

        Regaining the network re-submits the current city when no result is
        held and no fetch is already in flight.
        """
        retry_city: str | None = None
        async with self._lock:
            if status == ConnectivityStatus.NOT_CONNECTED:
                self._state.is_offline = True
                self._state.error_message = OFFLINE_MESSAGE
            else:
                self._state.is_offline = False
                if self._state.error_message == OFFLINE_MESSAGE:
                    self._state.error_message = None
                if (
                    self._state.current_weather is None
                    and self._state.city_name_input
                    and not self._state.is_loading
                ):
                    retry_city = self._state.city_name_input
            self._publish()

        if retry_city is not None:
            log_with_context(
                logger,
                "info",
                "Connection restored, re-submitting search",
                city=retry_city,
                event_type="search_reconnect_retry",
            )
            await self.submit_city_search(retry_city)

    # Event stream callbacks

    def _on_coordinate(self, coordinate: Coordinate) -> None:
        self._spawn(self.search_coordinates(coordinate), name="search-coordinates")

    def _on_permission_change(self, permission: LocationPermission) -> None:
        if not self._awaiting_permission or permission == LocationPermission.NOT_DETERMINED:
            return
        self._awaiting_permission = False
        if permission.is_blocked:
            self._spawn(self._report_location_denied(), name="location-denied")

    def _on_connectivity_change(self, status: ConnectivityStatus) -> None:
        self._spawn(self.handle_connectivity_change(status), name="connectivity-change")

    async def _report_location_denied(self) -> None:
        async with self._lock:
            self._fail_immediately(LOCATION_DENIED_MESSAGE, ErrorCode.LOCATION_DENIED)

    # Helpers (call with the lock held)

    def _begin_fetch(self) -> int:
        self._fetch_sequence += 1
        self._state.current_weather = None
        self._state.error_message = None
        self._state.no_data_found = False
        self._state.is_loading = True
        self._publish()
        return self._fetch_sequence

    def _is_stale(self, sequence: int) -> bool:
        if self._fence_stale_responses and sequence < self._fetch_sequence:
            log_with_context(
                logger,
                "info",
                "Discarding stale weather response",
                sequence=sequence,
                latest=self._fetch_sequence,
                event_type="search_stale_response",
            )
            return True
        return False

    def _fail_immediately(self, message: str, code: ErrorCode) -> None:
        self._state.current_weather = None
        self._state.no_data_found = False
        self._state.is_loading = False
        self._state.error_message = message
        log_with_context(
            logger,
            "info",
            message,
            error_code=code.value,
            event_type="search_rejected",
        )
        self._publish()

    async def _finish_with_error(self, sequence: int, error: Exception) -> None:
        if isinstance(error, FetchError):
            message = error.message
            code = error.code.value
        else:
            logger.exception("Unexpected weather client failure")
            message = str(error) or type(error).__name__
            code = ErrorCode.INTERNAL_ERROR.value

        async with self._lock:
            if self._is_stale(sequence):
                return
            self._state.is_loading = False
            self._state.current_weather = None
            self._state.error_message = message
            log_with_context(
                logger,
                "warning",
                "Weather search failed",
                error_code=code,
                error_message=message,
                event_type="search_failed",
            )
            self._publish()

    def _persist_city(self, city: str) -> None:
        try:
            self._store.set_string(LAST_SEARCHED_CITY_KEY, city)
        except (OSError, ValueError) as e:
            log_with_context(
                logger,
                "error",
                "Could not persist last searched city",
                city=city,
                error=str(e),
                error_type=type(e).__name__,
                event_type="search_persist_failed",
            )
