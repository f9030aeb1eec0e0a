"""Tests for location provider events."""
from location_provider import AuthorizationStatus, FixedLocationProvider
from weather_data import Coordinates


def test_initial_status():
    """Test that permission starts undetermined."""
    provider = FixedLocationProvider(10.0, 20.0)
    assert provider.authorization_status == AuthorizationStatus.NOT_DETERMINED
    assert provider.last_location is None


def test_request_permission_emits_status():
    """Test that subscribers see the authorization change."""
    provider = FixedLocationProvider(10.0, 20.0)
    statuses = []
    provider.subscribe_authorization(statuses.append)

    provider.request_permission()

    assert statuses == [AuthorizationStatus.AUTHORIZED]
    assert provider.authorization_status == AuthorizationStatus.AUTHORIZED


def test_start_updates_emits_location():
    """Test that start_updates reports the configured coordinates."""
    provider = FixedLocationProvider(10.0, 20.0)
    locations = []
    provider.subscribe_location(locations.append)

    provider.start_updates()

    assert locations == [Coordinates(lat=10.0, lon=20.0)]
    assert provider.last_location == Coordinates(lat=10.0, lon=20.0)


def test_denied_provider_does_not_emit_location():
    """Test that a denied provider stays silent."""
    provider = FixedLocationProvider(10.0, 20.0, granted=False)
    locations = []
    provider.subscribe_location(locations.append)

    provider.request_permission()
    provider.start_updates()

    assert provider.authorization_status == AuthorizationStatus.DENIED
    assert locations == []


def test_unsubscribe_location():
    """Test that unsubscribed callbacks are not called."""
    provider = FixedLocationProvider(10.0, 20.0)
    locations = []
    unsubscribe = provider.subscribe_location(locations.append)
    unsubscribe()
    unsubscribe()

    provider.start_updates()

    assert locations == []
