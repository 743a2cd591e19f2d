"""Location source contract and a settings-backed implementation.

The orchestrator only consumes a location source: it reads the permission
state, asks for permission or a one-shot fix, and listens to two push streams
(coordinates and permission changes).
"""

from collections.abc import Callable
from typing import Protocol

from weather_search.logging_config import get_logger, log_with_context
from weather_search.models.location import Coordinate, LocationPermission

logger = get_logger(__name__)

CoordinateListener = Callable[[Coordinate], None]
PermissionListener = Callable[[LocationPermission], None]


class LocationSource(Protocol):
    """Protocol for device location providers."""

    @property
    def permission(self) -> LocationPermission: ...

    def request_permission(self) -> None:
        """Ask for authorization; the outcome arrives on the permission stream."""
        ...

    def request_location(self) -> None:
        """Ask for a one-shot fix; the result arrives on the coordinate stream."""
        ...

    def add_coordinate_listener(self, listener: CoordinateListener) -> None: ...

    def remove_coordinate_listener(self, listener: CoordinateListener) -> None: ...

    def add_permission_listener(self, listener: PermissionListener) -> None: ...

    def remove_permission_listener(self, listener: PermissionListener) -> None: ...


class ConfiguredLocationSource:
    """Location source for a host whose position comes from configuration.

    Permission starts undetermined. Requesting it grants access when a
    coordinate is configured and denies it otherwise; a grant immediately
    pushes the configured fix. The presentation layer may also push device
    fixes through report_coordinate().
    """

    def __init__(
        self,
        coordinate: Coordinate | None = None,
        permission: LocationPermission = LocationPermission.NOT_DETERMINED,
    ):
        self._coordinate = coordinate
        self._permission = permission
        self._coordinate_listeners: list[CoordinateListener] = []
        self._permission_listeners: list[PermissionListener] = []

    @property
    def permission(self) -> LocationPermission:
        return self._permission

    def set_permission(self, permission: LocationPermission) -> None:
        """Change the permission state and notify listeners if it changed."""
        if permission == self._permission:
            return
        self._permission = permission
        log_with_context(
            logger,
            "info",
            "Location permission changed",
            permission=permission.value,
            event_type="location_permission_changed",
        )
        for listener in list(self._permission_listeners):
            listener(permission)

    def request_permission(self) -> None:
        if self._permission != LocationPermission.NOT_DETERMINED:
            return
        if self._coordinate is None:
            self.set_permission(LocationPermission.DENIED)
            return
        self.set_permission(LocationPermission.AUTHORIZED_WHEN_IN_USE)
        self.request_location()

    def request_location(self) -> None:
        if not self._permission.is_authorized:
            log_with_context(
                logger,
                "warning",
                "Location requested without authorization",
                permission=self._permission.value,
                event_type="location_unauthorized",
            )
            return
        if self._coordinate is None:
            log_with_context(
                logger,
                "warning",
                "No device coordinate available",
                event_type="location_unavailable",
            )
            return
        self._emit(self._coordinate)

    def report_coordinate(self, coordinate: Coordinate) -> None:
        """Record a fix from the device and push it to listeners."""
        self._coordinate = coordinate
        self._emit(coordinate)

    def _emit(self, coordinate: Coordinate) -> None:
        log_with_context(
            logger,
            "debug",
            "Location fix",
            latitude=coordinate.latitude,
            longitude=coordinate.longitude,
            event_type="location_fix",
        )
        for listener in list(self._coordinate_listeners):
            listener(coordinate)

    def add_coordinate_listener(self, listener: CoordinateListener) -> None:
        self._coordinate_listeners.append(listener)

    def remove_coordinate_listener(self, listener: CoordinateListener) -> None:
        if listener in self._coordinate_listeners:
            self._coordinate_listeners.remove(listener)

    def add_permission_listener(self, listener: PermissionListener) -> None:
        self._permission_listeners.append(listener)

    def remove_permission_listener(self, listener: PermissionListener) -> None:
        if listener in self._permission_listeners:
            self._permission_listeners.remove(listener)
