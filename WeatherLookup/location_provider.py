"""Device location abstraction - permission state and coordinate events."""
import logging
import threading
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, List, Optional

from weather_data import Coordinates

LocationCallback = Callable[[Coordinates], None]
AuthorizationCallback = Callable[["AuthorizationStatus"], None]


class AuthorizationStatus(Enum):
    NOT_DETERMINED = "not_determined"
    AUTHORIZED = "authorized"
    DENIED = "denied"


class LocationProvider(ABC):
    """
    Source of device coordinates.

    Subscribers register callbacks instead of implementing a delegate; every
    subscribe_* call returns a function that removes the subscription.
    """

    def __init__(self):
        self._location_callbacks: List[LocationCallback] = []
        self._authorization_callbacks: List[AuthorizationCallback] = []
        self._lock = threading.Lock()
        self.authorization_status = AuthorizationStatus.NOT_DETERMINED
        self.last_location: Optional[Coordinates] = None

    @abstractmethod
    def request_permission(self) -> None:
        """Ask for permission to read the device location."""
        pass

    @abstractmethod
    def start_updates(self) -> None:
        """Start delivering coordinates to location subscribers."""
        pass

    def subscribe_location(self, callback: LocationCallback) -> Callable[[], None]:
        with self._lock:
            self._location_callbacks.append(callback)
        return lambda: self._unsubscribe(self._location_callbacks, callback)

    def subscribe_authorization(self, callback: AuthorizationCallback) -> Callable[[], None]:
        with self._lock:
            self._authorization_callbacks.append(callback)
        return lambda: self._unsubscribe(self._authorization_callbacks, callback)

    def _unsubscribe(self, callbacks: list, callback) -> None:
        with self._lock:
            if callback in callbacks:
                callbacks.remove(callback)

    def _emit_location(self, coordinates: Coordinates) -> None:
        self.last_location = coordinates
        with self._lock:
            callbacks = list(self._location_callbacks)
        for callback in callbacks:
            callback(coordinates)

    def _emit_authorization(self, status: AuthorizationStatus) -> None:
        self.authorization_status = status
        with self._lock:
            callbacks = list(self._authorization_callbacks)
        for callback in callbacks:
            callback(status)


class FixedLocationProvider(LocationProvider):
    """
    Location provider reporting one configured coordinate pair.

    Used where no location service exists; the coordinates normally come
    from WEATHER_LAT / WEATHER_LON.
    """

    def __init__(self, lat: float, lon: float, granted: bool = True):
        super().__init__()
        self.coordinates = Coordinates(lat=lat, lon=lon)
        self.granted = granted

    def request_permission(self) -> None:
        status = AuthorizationStatus.AUTHORIZED if self.granted else AuthorizationStatus.DENIED
        logging.info(f"Location permission: {status.value}")
        self._emit_authorization(status)

    def start_updates(self) -> None:
        if self.authorization_status == AuthorizationStatus.DENIED:
            logging.warning("Location access denied, not starting updates")
            return
        logging.debug(f"Reporting fixed location {self.coordinates.lat}, {self.coordinates.lon}")
        self._emit_location(self.coordinates)
