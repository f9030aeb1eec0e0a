"""Weather provider abstraction - lets the session swap geocoding and weather APIs."""
from abc import ABC, abstractmethod
from typing import List, Optional

from weather_data import GeoLocation, WeatherSnapshot


class WeatherLookupError(Exception):
    """Base class for every error raised by the lookup pipeline."""
    pass


class InvalidInputError(WeatherLookupError):
    """Raised when a query is empty or cannot be turned into a request URL."""
    pass


class NetworkError(WeatherLookupError):
    """Raised on transport failures and non-2xx responses."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(WeatherLookupError):
    """Raised when a response body does not have the expected shape."""
    pass


class NotFoundError(WeatherLookupError):
    """Raised when geocoding returns no candidate locations."""
    pass


class GeocoderBase(ABC):
    """Abstract base class for city-name geocoders."""

    @abstractmethod
    def geocode(self, city_name: str) -> List[GeoLocation]:
        """
        Resolve a free-text city name to candidate locations.

        Returns:
            List[GeoLocation]: Candidates in provider order, best match first

        Raises:
            InvalidInputError: If the name is empty or unencodable
            NetworkError: If the request fails
            DecodeError: If the response cannot be parsed
        """
        pass


class WeatherProviderBase(ABC):
    """Abstract base class for current-weather providers."""

    @abstractmethod
    def fetch_weather(self, lat: float, lon: float) -> WeatherSnapshot:
        """
        Fetch current weather for a coordinate pair.

        Returns:
            WeatherSnapshot: Current conditions, temperatures in Kelvin

        Raises:
            NetworkError: If the request fails
            DecodeError: If the response cannot be parsed
        """
        pass
