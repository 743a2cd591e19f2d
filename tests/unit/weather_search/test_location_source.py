"""Unit tests for the configured location source."""

from weather_search.models.location import Coordinate, LocationPermission
from weather_search.services.location import ConfiguredLocationSource

LONDON = Coordinate(latitude=51.5074, longitude=-0.1278)


def _recording_source(coordinate=None, permission=LocationPermission.NOT_DETERMINED):
    source = ConfiguredLocationSource(coordinate, permission)
    fixes, permissions = [], []
    source.add_coordinate_listener(fixes.append)
    source.add_permission_listener(permissions.append)
    return source, fixes, permissions


def test_request_permission_grants_and_pushes_fix():
    """Test a configured coordinate grants access and delivers the fix."""
    source, fixes, permissions = _recording_source(LONDON)

    source.request_permission()

    assert source.permission == LocationPermission.AUTHORIZED_WHEN_IN_USE
    assert permissions == [LocationPermission.AUTHORIZED_WHEN_IN_USE]
    assert fixes == [LONDON]


def test_request_permission_denies_without_coordinate():
    """Test no configured coordinate means denial and no fix."""
    source, fixes, permissions = _recording_source()

    source.request_permission()

    assert source.permission == LocationPermission.DENIED
    assert permissions == [LocationPermission.DENIED]
    assert fixes == []


def test_request_permission_only_when_undetermined():
    """Test an already decided permission is not asked again."""
    source, fixes, permissions = _recording_source(LONDON, LocationPermission.DENIED)

    source.request_permission()

    assert source.permission == LocationPermission.DENIED
    assert permissions == []
    assert fixes == []


def test_request_location_requires_authorization():
    """Test no fix is delivered without authorization."""
    source, fixes, _ = _recording_source(LONDON)

    source.request_location()

    assert fixes == []


def test_request_location_when_authorized():
    """Test an authorized source delivers the configured fix."""
    source, fixes, _ = _recording_source(LONDON, LocationPermission.AUTHORIZED_ALWAYS)

    source.request_location()

    assert fixes == [LONDON]


def test_report_coordinate_pushes_and_remembers():
    """Test device fixes are pushed and used for later requests."""
    source, fixes, _ = _recording_source(permission=LocationPermission.AUTHORIZED_WHEN_IN_USE)
    paris = Coordinate(latitude=48.8566, longitude=2.3522)

    source.report_coordinate(paris)
    source.request_location()

    assert fixes == [paris, paris]


def test_removed_listeners_not_called():
    """Test removed listeners receive nothing."""
    source, fixes, permissions = _recording_source(LONDON)
    source.remove_coordinate_listener(fixes.append)
    source.remove_permission_listener(permissions.append)

    source.request_permission()

    assert fixes == []
    assert permissions == []


def test_set_permission_same_value_is_silent():
    """Test re-setting the same permission does not notify."""
    source, _, permissions = _recording_source(permission=LocationPermission.RESTRICTED)

    source.set_permission(LocationPermission.RESTRICTED)

    assert permissions == []


def test_permission_helpers():
    """Test permission grouping helpers."""
    assert LocationPermission.AUTHORIZED_ALWAYS.is_authorized
    assert LocationPermission.AUTHORIZED_WHEN_IN_USE.is_authorized
    assert LocationPermission.DENIED.is_blocked
    assert LocationPermission.RESTRICTED.is_blocked
    assert not LocationPermission.UNKNOWN.is_authorized
    assert not LocationPermission.UNKNOWN.is_blocked
    assert not LocationPermission.NOT_DETERMINED.is_blocked
