"""Network reachability monitor.

Polls a probe on the running event loop and reports the two-valued status
once on start and again on every transition. Only one monitor should run at a
time: starting a second instance without stopping the first leaves both
polling tasks alive.
"""

import asyncio
from collections.abc import Awaitable, Callable

import httpx

from weather_search.logging_config import get_logger, log_with_context
from weather_search.models.state import ConnectivityStatus

logger = get_logger(__name__)

ConnectivityProbe = Callable[[], Awaitable[bool]]
StatusHandler = Callable[[ConnectivityStatus], None]


class HttpConnectivityProbe:
    """Treats any HTTP response from the probe URL as connected."""

    def __init__(self, client: httpx.AsyncClient, url: str, timeout: float = 3.0):
        self._client = client
        self._url = url
        self._timeout = timeout

    async def __call__(self) -> bool:
        try:
            await self._client.head(self._url, timeout=self._timeout)
        except httpx.HTTPError as e:
            log_with_context(
                logger,
                "debug",
                "Connectivity probe failed",
                url=self._url,
                error_type=type(e).__name__,
                event_type="connectivity_probe_failed",
            )
            return False
        return True


class ConnectivityMonitor:
    """Observes reachability and emits ConnectivityStatus changes."""

    def __init__(self, probe: ConnectivityProbe, interval_seconds: float = 5.0):
        self._probe = probe
        self._interval = interval_seconds
        self._task: asyncio.Task | None = None
        self._status: ConnectivityStatus | None = None

    @property
    def status(self) -> ConnectivityStatus | None:
        """Last observed status, None until the first probe completes."""
        return self._status

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self, on_change: StatusHandler) -> None:
        """Begin observing; on_change fires for the initial status and each transition."""
        if self.is_running:
            log_with_context(
                logger,
                "warning",
                "Connectivity monitor already running",
                event_type="connectivity_already_running",
            )
            return

        self._status = None
        self._task = asyncio.create_task(self._run(on_change), name="connectivity-monitor")
        log_with_context(
            logger,
            "info",
            "Connectivity monitor started",
            interval_seconds=self._interval,
            event_type="connectivity_started",
        )

    async def stop(self) -> None:
        """Stop observing. Safe to call when not started and safe to call twice."""
        task, self._task = self._task, None
        if task is None:
            return

        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        log_with_context(
            logger,
            "info",
            "Connectivity monitor stopped",
            event_type="connectivity_stopped",
        )

    async def _evaluate(self) -> ConnectivityStatus:
        try:
            reachable = await self._probe()
        except Exception as e:
            # Evaluation never fails; an unexpected probe error reads as offline
            logger.warning("Connectivity probe raised %s", type(e).__name__, exc_info=True)
            reachable = False
        return ConnectivityStatus.CONNECTED if reachable else ConnectivityStatus.NOT_CONNECTED

    async def _run(self, on_change: StatusHandler) -> None:
        while True:
            status = await self._evaluate()
            if status != self._status:
                self._status = status
                log_with_context(
                    logger,
                    "info",
                    "Connectivity changed",
                    status=status.value,
                    event_type="connectivity_changed",
                )
                try:
                    on_change(status)
                except Exception:
                    logger.exception("Connectivity change handler failed")
            await asyncio.sleep(self._interval)
