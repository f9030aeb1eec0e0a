"""OpenWeather Geocoding and Current Weather API clients."""
import logging
from typing import Any, List, Optional

import requests

from weather_data import GeoLocation, WeatherSnapshot
from weather_provider import (
    DecodeError,
    GeocoderBase,
    InvalidInputError,
    NetworkError,
    WeatherProviderBase,
)


def _get_json(url: str, params: Optional[dict], timeout: Optional[float]) -> Any:
    """
    Issue one GET request and return the decoded JSON body.

    Raises:
        NetworkError: On transport failure or a non-2xx status
        DecodeError: If the body is not JSON
    """
    try:
        response = requests.get(url, params=params, timeout=timeout)
    except requests.exceptions.RequestException as e:
        logging.error(f"Network error during API request: {e}")
        raise NetworkError(f"Network error: {str(e)}") from e

    logging.info(f"API response status: {response.status_code}")

    if not response.ok:
        logging.error(f"API request failed with status {response.status_code}")
        _raise_error_response(response)

    try:
        return response.json()
    except ValueError as e:
        logging.error(f"Response body is not JSON: {response.text[:200]}")
        raise DecodeError(f"Failed to parse response: {str(e)}") from e


def _raise_error_response(response: requests.Response) -> None:
    """Parse and raise error from OpenWeather error response."""
    try:
        error_data = response.json()
        cod = error_data.get("cod", response.status_code)
        message = error_data.get("message", "Unknown error")
    except (ValueError, AttributeError):
        # Not a JSON object, use HTTP status
        logging.error(f"Non-JSON error response: HTTP {response.status_code}, body: {response.text[:500]}")
        raise NetworkError(
            f"HTTP {response.status_code}: {response.text[:200]}",
            status_code=response.status_code,
        )

    logging.error(f"OpenWeather API error response: {error_data}")
    raise NetworkError(f"OpenWeather API error {cod}: {message}", status_code=response.status_code)


class OpenWeatherGeocoder(GeocoderBase):
    """
    Geocoder using the OpenWeather Geocoding API.

    Direct geocoding: https://openweathermap.org/api/geocoding-api
    Returns up to RESULT_LIMIT candidates per query.
    """

    BASE_URL = "https://api.openweathermap.org/geo/1.0/direct"
    RESULT_LIMIT = 5

    def __init__(self, api_key: str, base_url: Optional[str] = None, timeout: Optional[float] = None):
        """
        Initialize OpenWeather geocoder.

        Args:
            api_key: OpenWeather API key
            base_url: Override for the geocoding endpoint
            timeout: HTTP request timeout in seconds (None keeps the library default)
        """
        self.api_key = api_key
        self.base_url = base_url or self.BASE_URL
        self.timeout = timeout

    def build_url(self, city_name: str) -> str:
        """
        Build the percent-encoded geocoding request URL for a city name.

        Raises:
            InvalidInputError: If the name is empty or the URL cannot be built
        """
        query = (city_name or "").strip()
        if not query:
            raise InvalidInputError("City name must not be empty")

        params = {"q": query, "limit": self.RESULT_LIMIT, "appid": self.api_key}
        try:
            prepared = requests.Request("GET", self.base_url, params=params).prepare()
        except (requests.exceptions.RequestException, ValueError) as e:
            raise InvalidInputError(f"Invalid geocoding URL for {query!r}: {e}") from e
        return prepared.url

    def geocode(self, city_name: str) -> List[GeoLocation]:
        """
        Resolve a city name with the Geocoding API.

        Returns:
            List[GeoLocation]: Candidates in API order (may be empty)

        Raises:
            InvalidInputError: If the name is empty or unencodable
            NetworkError: If the API request fails
            DecodeError: If the response is not a list of locations
        """
        url = self.build_url(city_name)
        logging.info(f"Making OpenWeather geocoding request: {self.base_url}")
        logging.debug(f"Geocoding query: {city_name!r}, limit={self.RESULT_LIMIT}")

        data = _get_json(url, None, self.timeout)
        if not isinstance(data, list):
            logging.error(f"Geocoding response is not a list: {str(data)[:200]}")
            raise DecodeError("Geocoding response is not a list")

        try:
            locations = [GeoLocation.from_dict(item) for item in data]
        except (KeyError, ValueError, TypeError, AttributeError, OverflowError) as e:
            logging.error(f"Failed to parse geocoding response: {e}", exc_info=True)
            raise DecodeError(f"Failed to parse geocoding response: {str(e)}") from e

        logging.info(f"Geocoding returned {len(locations)} location(s) for {city_name!r}")
        return locations


class OpenWeatherProvider(WeatherProviderBase):
    """
    Weather provider using OpenWeather Current Weather API.

    Uses the free Current Weather API: https://openweathermap.org/current
    No "units" parameter is sent, so temperatures come back in Kelvin.
    """

    BASE_URL = "https://api.openweathermap.org/data/2.5/weather"

    def __init__(self, api_key: str, base_url: Optional[str] = None, timeout: Optional[float] = None):
        """
        Initialize OpenWeather provider.

        Args:
            api_key: OpenWeather API key
            base_url: Override for the weather endpoint
            timeout: HTTP request timeout in seconds (None keeps the library default)
        """
        self.api_key = api_key
        self.base_url = base_url or self.BASE_URL
        self.timeout = timeout

    def fetch_weather(self, lat: float, lon: float) -> WeatherSnapshot:
        """
        Fetch current weather from OpenWeather Current Weather API.

        Returns:
            WeatherSnapshot: Current weather information

        Raises:
            NetworkError: If the API request fails
            DecodeError: If the response does not match the expected shape
        """
        params = {
            "lat": lat,
            "lon": lon,
            "appid": self.api_key,
        }

        logging.info(f"Making OpenWeather API request: {self.base_url}")
        logging.debug(f"Request parameters: lat={lat}, lon={lon}")

        data = _get_json(self.base_url, params, self.timeout)
        if not isinstance(data, dict):
            raise DecodeError("Weather response is not a JSON object")
        logging.debug(f"API response (truncated): {str(data)[:500]}...")

        try:
            snapshot = WeatherSnapshot.from_dict(data)
        except KeyError as e:
            logging.error(f"Response missing field {e}")
            raise DecodeError(f"Response missing field {e}") from e
        except (ValueError, TypeError, AttributeError, OverflowError) as e:
            logging.error(f"Failed to parse API response: {e}", exc_info=True)
            raise DecodeError(f"Failed to parse response: {str(e)}") from e

        logging.info(f"Successfully parsed weather data: {snapshot.city_name}, {snapshot.temperature.current}K")
        return snapshot
