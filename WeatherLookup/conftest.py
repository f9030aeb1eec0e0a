"""Shared fixtures for weather lookup tests."""
import copy

import pytest

from weather_data import WeatherSnapshot

SAMPLE_WEATHER_RESPONSE = {
    "coord": {"lon": -0.13, "lat": 51.51},
    "weather": [
        {
            "id": 803,
            "main": "Clouds",
            "description": "broken clouds",
            "icon": "04d"
        }
    ],
    "base": "stations",
    "main": {
        "temp": 300.0,
        "feels_like": 301.2,
        "temp_min": 298.4,
        "temp_max": 302.1,
        "pressure": 1014,
        "humidity": 61,
        "sea_level": 1014,
        "grnd_level": 1010
    },
    "visibility": 10000,
    "wind": {"speed": 3.13, "deg": 93},
    "clouds": {"all": 75},
    "dt": 1684929490,
    "sys": {"type": 2, "id": 2075535, "country": "GB", "sunrise": 1684900000, "sunset": 1684959000},
    "timezone": 3600,
    "id": 2643743,
    "name": "London",
    "cod": 200
}

SAMPLE_GEOCODING_RESPONSE = [
    {
        "name": "London",
        "local_names": {"en": "London", "fr": "Londres", "ru": "Лондон", "xx": "ignored"},
        "lat": 51.51,
        "lon": -0.13,
        "country": "GB",
        "state": "England"
    },
    {
        "name": "London",
        "lat": 42.98,
        "lon": -81.25,
        "country": "CA",
        "state": "Ontario"
    }
]


@pytest.fixture
def sample_weather_response():
    """Sample OpenWeather Current Weather API response."""
    return copy.deepcopy(SAMPLE_WEATHER_RESPONSE)


@pytest.fixture
def sample_geocoding_response():
    """Sample OpenWeather Geocoding API response."""
    return copy.deepcopy(SAMPLE_GEOCODING_RESPONSE)


@pytest.fixture
def sample_snapshot():
    """Decoded sample snapshot."""
    return WeatherSnapshot.from_dict(copy.deepcopy(SAMPLE_WEATHER_RESPONSE))
