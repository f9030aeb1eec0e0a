"""Tests for weather_data module."""
from datetime import timedelta

import pytest

from weather_data import GeoLocation, WeatherSnapshot, icon_url


def test_snapshot_from_dict_maps_snake_case_fields(sample_snapshot):
    """Test that API keys map onto the temperature fields."""
    temperature = sample_snapshot.temperature
    assert temperature.current == 300.0
    assert temperature.feels_like == 301.2
    assert temperature.minimum == 298.4
    assert temperature.maximum == 302.1
    assert temperature.pressure == 1014
    assert temperature.humidity == 61
    assert temperature.sea_level == 1014
    assert temperature.ground_level == 1010


def test_snapshot_from_dict_other_fields(sample_snapshot):
    """Test remaining snapshot fields."""
    assert sample_snapshot.coordinates.lat == 51.51
    assert sample_snapshot.coordinates.lon == -0.13
    assert sample_snapshot.wind.speed == 3.13
    assert sample_snapshot.wind.direction_degrees == 93
    assert sample_snapshot.cloudiness == 75
    assert sample_snapshot.visibility == 10000
    assert sample_snapshot.observed_at == 1684929490
    assert sample_snapshot.system.country_code == "GB"
    assert sample_snapshot.system.sunrise == 1684900000
    assert sample_snapshot.timezone_offset == 3600
    assert sample_snapshot.city_id == 2643743
    assert sample_snapshot.city_name == "London"
    assert sample_snapshot.status_code == 200
    assert sample_snapshot.primary_condition.main == "Clouds"


def test_snapshot_optional_pressure_levels(sample_weather_response):
    """Test that sea_level and grnd_level are optional."""
    del sample_weather_response["main"]["sea_level"]
    del sample_weather_response["main"]["grnd_level"]

    snapshot = WeatherSnapshot.from_dict(sample_weather_response)

    assert snapshot.temperature.sea_level is None
    assert snapshot.temperature.ground_level is None
    assert "sea_level" not in snapshot.to_dict()["main"]


def test_snapshot_to_dict_round_trip(sample_snapshot):
    """Test that to_dict() output decodes to an equal snapshot."""
    assert WeatherSnapshot.from_dict(sample_snapshot.to_dict()) == sample_snapshot


def test_snapshot_missing_required_field(sample_weather_response):
    """Test that a missing required field raises KeyError."""
    del sample_weather_response["main"]["temp_min"]

    with pytest.raises(KeyError):
        WeatherSnapshot.from_dict(sample_weather_response)


def test_snapshot_icon_url(sample_snapshot):
    """Test icon URL for the primary condition."""
    assert sample_snapshot.icon_url == "https://openweathermap.org/img/wn/04d@2x.png"
    assert icon_url("10n") == "https://openweathermap.org/img/wn/10n@2x.png"


def test_snapshot_without_conditions(sample_weather_response):
    """Test snapshot with an empty weather array."""
    sample_weather_response["weather"] = []
    snapshot = WeatherSnapshot.from_dict(sample_weather_response)

    assert snapshot.conditions == ()
    assert snapshot.primary_condition is None
    assert snapshot.icon_url is None


def test_snapshot_local_time(sample_snapshot):
    """Test that local_time applies the timezone offset."""
    local = sample_snapshot.local_time
    assert local.utcoffset() == timedelta(hours=1)
    assert local == sample_snapshot.observed_at_utc


def test_geolocation_from_dict(sample_geocoding_response):
    """Test decoding a geocoding entry."""
    location = GeoLocation.from_dict(sample_geocoding_response[0])

    assert location.name == "London"
    assert location.latitude == 51.51
    assert location.longitude == -0.13
    assert location.country == "GB"
    assert location.state == "England"
    assert location.local_names == {"en": "London", "fr": "Londres", "ru": "Лондон"}
    assert location.localized_name("fr") == "Londres"
    assert location.localized_name("de") == "London"
    assert location.display_name == "London, England, GB"


def test_geolocation_without_optional_fields():
    """Test that state and local_names are optional."""
    location = GeoLocation.from_dict({"name": "Paris", "lat": 48.85, "lon": 2.35, "country": "FR"})

    assert location.state is None
    assert location.local_names == {}
    assert location.display_name == "Paris, FR"


def test_geolocation_missing_coordinates():
    """Test that a location without coordinates is rejected."""
    with pytest.raises(KeyError):
        GeoLocation.from_dict({"name": "Nowhere", "country": "XX"})


def test_geolocation_equality_includes_local_names():
    """Test that locations differing only in localized names are not equal."""
    plain = GeoLocation(name="London", latitude=51.51, longitude=-0.13, country="GB")
    localized = GeoLocation(
        name="London", latitude=51.51, longitude=-0.13, country="GB", local_names={"fr": "Londres"}
    )

    assert plain != localized
    assert hash(plain) == hash(localized)
