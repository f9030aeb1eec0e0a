"""Persistence for the most recent weather snapshot.

A flat JSON file stands in for the platform's key-value settings store.
The last successful snapshot lives under one fixed key and is overwritten on
every save. Loading is lenient: anything that goes wrong is logged and
reported as "nothing stored" so a stale or broken file never blocks startup.
"""
import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from weather_data import WeatherSnapshot

LAST_WEATHER_KEY = "LastWeatherData"


class JsonSettingsStore:
    """Simple string key-value store persisted as one JSON object on disk."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        with self.path.open(encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Settings file {self.path} does not hold a JSON object")
        return data

    def _write_all(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        tmp_path.replace(self.path)

    def get(self, key: str) -> Optional[str]:
        """
        Return the value stored under key, or None if absent.

        Raises:
            OSError: If the file cannot be read
            ValueError: If the file is not a JSON object
        """
        with self._lock:
            value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        with self._lock:
            try:
                data = self._read_all()
            except ValueError:
                logging.warning(f"Settings file {self.path} is corrupt, starting from an empty store")
                data = {}
            data[key] = value
            self._write_all(data)

    def remove(self, key: str) -> None:
        with self._lock:
            data = self._read_all()
            if key in data:
                del data[key]
                self._write_all(data)


class LastWeatherStore:
    """Single-slot store for the last successfully fetched WeatherSnapshot."""

    def __init__(self, settings: JsonSettingsStore, key: str = LAST_WEATHER_KEY):
        self.settings = settings
        self.key = key

    def save(self, snapshot: WeatherSnapshot) -> None:
        """
        Serialize and store the snapshot, overwriting the previous one.

        Failures are logged and not raised; a snapshot that cannot be
        persisted only costs the next restore.
        """
        try:
            encoded = json.dumps(snapshot.to_dict())
        except (TypeError, ValueError) as e:
            logging.warning(f"Could not serialize weather snapshot: {e}")
            return

        try:
            self.settings.set(self.key, encoded)
        except OSError as e:
            logging.warning(f"Could not write last weather data to {self.settings.path}: {e}")
            return
        logging.debug(f"Saved last weather data for {snapshot.city_name} under {self.key!r}")

    def load_last(self) -> Optional[WeatherSnapshot]:
        """
        Return the stored snapshot, or None if missing or unreadable.
        """
        try:
            encoded = self.settings.get(self.key)
        except (OSError, ValueError) as e:
            logging.warning(f"Could not read settings file {self.settings.path}: {e}")
            return None

        if encoded is None:
            logging.debug(f"No last weather data under {self.key!r}")
            return None

        try:
            snapshot = WeatherSnapshot.from_dict(json.loads(encoded))
        except (KeyError, TypeError, ValueError, AttributeError, OverflowError) as e:
            logging.warning(f"Ignoring unreadable last weather data: {e}")
            return None

        logging.info(f"Restored last weather data for {snapshot.city_name}")
        return snapshot

    def clear(self) -> None:
        try:
            self.settings.remove(self.key)
        except (OSError, ValueError) as e:
            logging.warning(f"Could not clear last weather data: {e}")
