"""Weather session - drives geocode, fetch and persist, and publishes the result state."""
import logging
import threading
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from location_provider import AuthorizationStatus, LocationProvider
from weather_data import Coordinates, GeoLocation, WeatherSnapshot
from weather_provider import (
    GeocoderBase,
    NotFoundError,
    WeatherLookupError,
    WeatherProviderBase,
)
from weather_store import LastWeatherStore


class SessionStatus(Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class SessionState:
    """What the presentation layer should show right now."""
    status: SessionStatus
    snapshot: Optional[WeatherSnapshot] = None
    error: Optional[Exception] = None

    @classmethod
    def idle(cls) -> "SessionState":
        return cls(SessionStatus.IDLE)

    @classmethod
    def loading(cls) -> "SessionState":
        return cls(SessionStatus.LOADING)

    @classmethod
    def ready(cls, snapshot: WeatherSnapshot) -> "SessionState":
        return cls(SessionStatus.READY, snapshot=snapshot)

    @classmethod
    def failed(cls, error: Exception) -> "SessionState":
        return cls(SessionStatus.FAILED, error=error)

    @property
    def message(self) -> Optional[str]:
        """Human-readable error text for a FAILED state."""
        if self.error is None:
            return None
        return f"Error fetching data: {self.error}"


StateListener = Callable[[SessionState], None]


class WeatherSession:
    """
    Orchestrates one user's weather lookups.

    Every request re-enters LOADING and ends in READY or FAILED. Requests are
    not sequenced or cancelled: when two overlap, the one that finishes last
    sets the state. A successful fetch is also written to the last-result
    store, which is independent of the published state.
    """

    def __init__(
        self,
        geocoder: GeocoderBase,
        provider: WeatherProviderBase,
        store: LastWeatherStore,
        executor: Optional[Executor] = None,
    ):
        """
        Initialize weather session.

        Args:
            geocoder: City name to location resolver
            provider: Current weather source
            store: Last-result store, written after every successful fetch
            executor: Runs submit_* requests off the caller's thread
        """
        self.geocoder = geocoder
        self.provider = provider
        self.store = store
        self.executor = executor

        self.locations: List[GeoLocation] = []
        self.last_search_city: Optional[str] = None
        self.authorization_status = AuthorizationStatus.NOT_DETERMINED

        self._state = SessionState.idle()
        self._listeners: List[StateListener] = []
        self._lock = threading.Lock()

    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a state listener; returns a function that unregisters it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, state: SessionState) -> SessionState:
        with self._lock:
            self._state = state
            listeners = list(self._listeners)
        logging.debug(f"Session state -> {state.status.value}")
        for listener in listeners:
            try:
                listener(state)
            except Exception as e:
                logging.exception(f"State listener failed: {e}")
        return state

    def _fail(self, error: Exception) -> SessionState:
        if isinstance(error, WeatherLookupError):
            logging.error(f"Weather lookup failed: {error}")
        else:
            logging.exception(f"Unexpected error during weather lookup: {error}")
        return self._publish(SessionState.failed(error))

    def restore_last(self) -> SessionState:
        """
        Publish the stored snapshot, if any, without touching the network.

        Returns:
            SessionState: READY with the stored snapshot, or the current state
        """
        snapshot = self.store.load_last()
        if snapshot is None:
            logging.info("No stored weather to restore")
            return self.state
        return self._publish(SessionState.ready(snapshot))

    def search_by_city(self, name: str) -> SessionState:
        """
        Geocode name, then fetch weather for the best match.

        Returns:
            SessionState: The state this request ended in
        """
        self._publish(SessionState.loading())
        logging.info(f"Searching weather for city {name!r}")
        try:
            locations = self.geocoder.geocode(name)
        except Exception as e:
            return self._fail(e)

        self.locations = locations
        self.last_search_city = name
        if not locations:
            return self._fail(NotFoundError(f"No locations found for {name!r}"))

        best = locations[0]
        logging.info(f"Using {best.display_name} ({best.latitude}, {best.longitude})")
        return self.search_by_coordinates(best.latitude, best.longitude)

    def search_by_coordinates(self, lat: float, lon: float) -> SessionState:
        """
        Fetch weather for a coordinate pair and persist it on success.

        Returns:
            SessionState: The state this request ended in
        """
        if self.state.status != SessionStatus.LOADING:
            self._publish(SessionState.loading())
        try:
            snapshot = self.provider.fetch_weather(lat, lon)
        except Exception as e:
            return self._fail(e)

        self.store.save(snapshot)
        return self._publish(SessionState.ready(snapshot))

    def submit_search_by_city(self, name: str) -> "Future[SessionState]":
        return self._submit(self.search_by_city, name)

    def submit_search_by_coordinates(self, lat: float, lon: float) -> "Future[SessionState]":
        return self._submit(self.search_by_coordinates, lat, lon)

    def _submit(self, fn, *args) -> "Future[SessionState]":
        if self.executor is None:
            raise RuntimeError("WeatherSession was created without an executor")
        return self.executor.submit(fn, *args)

    def attach_location_provider(self, provider: LocationProvider) -> Callable[[], None]:
        """
        Follow a location provider: every coordinate it reports starts a fetch.

        The fetch runs on whatever thread the provider reports from.

        Returns:
            A function that detaches the session from the provider
        """

        def on_location(coordinates: Coordinates) -> None:
            logging.info(f"Location update: {coordinates.lat}, {coordinates.lon}")
            self.search_by_coordinates(coordinates.lat, coordinates.lon)

        def on_authorization(status: AuthorizationStatus) -> None:
            self.authorization_status = status
            if status == AuthorizationStatus.AUTHORIZED:
                provider.start_updates()
            elif status == AuthorizationStatus.DENIED:
                logging.warning("Location access denied; only city search is available")

        detach_location = provider.subscribe_location(on_location)
        detach_authorization = provider.subscribe_authorization(on_authorization)

        def detach() -> None:
            detach_location()
            detach_authorization()

        return detach
