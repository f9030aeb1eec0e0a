"""Console front end for weather lookups - builds the object graph and prints the weather card."""
import argparse
import logging
import os
import sys
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from image_cache import IconLoader, ImageCache
from layout import build_weather_card
from location_provider import FixedLocationProvider
from openweather_provider import OpenWeatherGeocoder, OpenWeatherProvider
from weather_provider import WeatherLookupError
from weather_service import SessionState, SessionStatus, WeatherSession
from weather_store import JsonSettingsStore, LastWeatherStore

DEFAULT_STATE_FILE = os.path.join(os.path.expanduser("~"), ".weather_lookup.json")


@dataclass
class AppConfig:
    api_key: str
    state_file: Path
    lat: Optional[float] = None
    lon: Optional[float] = None
    timeout: Optional[float] = None


@dataclass
class App:
    """Everything main() wires together, owned by the composition root."""
    session: WeatherSession
    icons: IconLoader
    image_cache: ImageCache
    location: Optional[FixedLocationProvider]
    executor: ThreadPoolExecutor


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser("Current weather lookup")
    parser.add_argument("--city", help="City name to search for")
    parser.add_argument("--lat", type=float, help="Latitude (use with --lon)")
    parser.add_argument("--lon", type=float, help="Longitude (use with --lat)")
    parser.add_argument("--here", action="store_true", help="Use WEATHER_LAT/WEATHER_LON as device location")
    parser.add_argument("--restore-only", action="store_true", help="Only show the last stored result")
    parser.add_argument("--clear", action="store_true", help="Forget the last stored result and exit")
    parser.add_argument("--icon", action="store_true", help="Also fetch the condition icon")
    parser.add_argument("--log-file", default=None)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)
    if (args.lat is None) != (args.lon is None):
        parser.error("--lat and --lon must be given together")
    return args


def setup_logging(log_file: Optional[str], verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def load_config() -> AppConfig:
    load_dotenv()
    api_key = os.getenv("WEATHER_API_KEY")
    lat = os.getenv("WEATHER_LAT")
    lon = os.getenv("WEATHER_LON")
    timeout = os.getenv("WEATHER_TIMEOUT")
    state_file = os.getenv("WEATHER_STATE_FILE", DEFAULT_STATE_FILE)

    if not api_key:
        raise SystemExit("Missing WEATHER_API_KEY in environment")

    lat_val = lon_val = None
    if lat or lon:
        if not lat or not lon:
            raise SystemExit("WEATHER_LAT and WEATHER_LON must be set together")
        try:
            lat_val = float(lat)
            lon_val = float(lon)
        except ValueError as exc:
            raise SystemExit(f"Invalid coordinates: {exc}") from exc

    timeout_val = None
    if timeout:
        try:
            timeout_val = float(timeout)
        except ValueError as exc:
            raise SystemExit(f"Invalid WEATHER_TIMEOUT: {exc}") from exc

    logging.info("Configuration loaded: state_file=%s lat=%s lon=%s", state_file, lat_val, lon_val)
    return AppConfig(
        api_key=api_key,
        state_file=Path(state_file),
        lat=lat_val,
        lon=lon_val,
        timeout=timeout_val,
    )


def build_app(config: AppConfig) -> App:
    geocoder = OpenWeatherGeocoder(api_key=config.api_key, timeout=config.timeout)
    provider = OpenWeatherProvider(api_key=config.api_key, timeout=config.timeout)
    store = LastWeatherStore(JsonSettingsStore(config.state_file))
    executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="weather")
    session = WeatherSession(geocoder, provider, store, executor=executor)

    image_cache = ImageCache()
    icons = IconLoader(image_cache, timeout=config.timeout)

    location = None
    if config.lat is not None and config.lon is not None:
        location = FixedLocationProvider(config.lat, config.lon)

    logging.info("Weather session ready (state file=%s)", config.state_file)
    return App(session=session, icons=icons, image_cache=image_cache, location=location, executor=executor)


def print_state(state: SessionState, out=None) -> None:
    if out is None:
        out = sys.stdout
    if state.status == SessionStatus.READY and state.snapshot is not None:
        for row in build_weather_card(state.snapshot):
            print(f"{row.title:<12} {row.value}", file=out)
    elif state.status == SessionStatus.FAILED:
        print(state.message, file=out)
    else:
        print(f"No weather data ({state.status.value})", file=out)


def run(app: App, args: argparse.Namespace) -> SessionState:
    session = app.session
    state = session.restore_last()
    if args.restore_only:
        return state

    if args.city:
        state = session.submit_search_by_city(args.city).result()
    elif args.lat is not None:
        state = session.submit_search_by_coordinates(args.lat, args.lon).result()
    elif args.here:
        if app.location is None:
            raise SystemExit("--here needs WEATHER_LAT/WEATHER_LON in environment")
        detach = session.attach_location_provider(app.location)
        try:
            # FixedLocationProvider reports synchronously, so the fetch runs inline
            app.location.request_permission()
        finally:
            detach()
        state = session.state
    return state


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_file, args.verbose)
    config = load_config()
    app = build_app(config)

    try:
        if args.clear:
            app.session.store.clear()
            print("Stored weather cleared")
            return 0

        state = run(app, args)
        print_state(state)

        if args.icon and state.snapshot is not None:
            try:
                image = app.icons.load_for_snapshot(state.snapshot)
            except WeatherLookupError as err:
                logging.error("Icon fetch failed: %s", err)
            else:
                if image is not None:
                    print(f"{'Icon':<12} {state.snapshot.icon_url} ({image.width}x{image.height})")
        return 1 if state.status == SessionStatus.FAILED else 0
    finally:
        app.executor.shutdown(wait=True)


if __name__ == "__main__":
    sys.exit(main())
