"""Weather domain model - immutable records decoded from the OpenWeather JSON shapes."""
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

ICON_BASE_URL = "https://openweathermap.org/img/wn/"
ICON_SUFFIX = "@2x.png"

# Language codes the geocoding API may return under "local_names".
# "feature_name" and "ascii" are not languages but arrive in the same object.
LOCAL_NAME_CODES = frozenset([
    "af", "am", "an", "ar", "ay", "az", "ba", "be", "bg", "bi", "bn", "br",
    "bs", "ce", "co", "cs", "cy", "da", "de", "el", "en", "eo", "es", "et",
    "eu", "fa", "ff", "fi", "fj", "fo", "fr", "ga", "gd", "gl", "gu", "he",
    "hi", "hr", "ht", "hu", "hy", "ia", "id", "ig", "is", "it", "ja", "ka",
    "kk", "km", "kn", "ko", "kv", "la", "lb", "ln", "lo", "lt", "lv", "mk",
    "ml", "mn", "mr", "ms", "mt", "my", "na", "ne", "nl", "nn", "no", "ny",
    "oc", "om", "pa", "pl", "pt", "rm", "ro", "ru", "sa", "sc", "sd", "se",
    "sh", "si", "sk", "sl", "sq", "sr", "sv", "sw", "ta", "te", "th", "tl",
    "tr", "ug", "uk", "ur", "uz", "vi", "wa", "wo", "yi", "yo", "zh", "zu",
    "feature_name", "ascii",
])


def icon_url(icon_code: str) -> str:
    """Build the 2x PNG URL for an OpenWeather icon code (e.g. "10n")."""
    return f"{ICON_BASE_URL}{icon_code}{ICON_SUFFIX}"


def _optional_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)


@dataclass(frozen=True)
class GeoLocation:
    """One candidate location returned by the geocoding API."""
    name: str
    latitude: float
    longitude: float
    country: str  # ISO 3166 country code, e.g. "GB"
    state: Optional[str] = None
    local_names: Dict[str, str] = field(default_factory=dict, hash=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GeoLocation":
        """
        Decode one element of the geocoding response array.

        Raises:
            KeyError: If name, lat, lon or country is missing
            TypeError, ValueError: If a field has the wrong type
        """
        raw_names = data.get("local_names") or {}
        local_names = {
            code: str(value)
            for code, value in raw_names.items()
            if code in LOCAL_NAME_CODES and value is not None
        }
        state = data.get("state")
        return cls(
            name=str(data["name"]),
            latitude=float(data["lat"]),
            longitude=float(data["lon"]),
            country=str(data["country"]),
            state=str(state) if state is not None else None,
            local_names=local_names,
        )

    def localized_name(self, language: str) -> str:
        """Name in the given language, falling back to the default name."""
        return self.local_names.get(language, self.name)

    @property
    def display_name(self) -> str:
        parts = [self.name]
        if self.state:
            parts.append(self.state)
        parts.append(self.country)
        return ", ".join(parts)


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lon: float


@dataclass(frozen=True)
class WeatherCondition:
    """A single weather condition entry."""
    id: int  # OpenWeather condition code, e.g. 803
    main: str  # e.g., "Clouds", "Rain", "Clear"
    description: str  # e.g., "broken clouds", "light rain"
    icon: str  # e.g., "04d"

    @property
    def icon_url(self) -> str:
        return icon_url(self.icon)


@dataclass(frozen=True)
class Temperature:
    """Temperature block. All temperatures are Kelvin."""
    current: float
    feels_like: float
    minimum: float
    maximum: float
    pressure: int  # hPa
    humidity: int  # percentage
    sea_level: Optional[int] = None  # hPa
    ground_level: Optional[int] = None  # hPa


@dataclass(frozen=True)
class Wind:
    speed: float  # m/s
    direction_degrees: int  # meteorological


@dataclass(frozen=True)
class SystemInfo:
    country_code: str
    sunrise: int  # UNIX timestamp (UTC)
    sunset: int  # UNIX timestamp (UTC)


@dataclass(frozen=True)
class WeatherSnapshot:
    """One current-weather fetch result, independent of how it is displayed."""
    coordinates: Coordinates
    conditions: Tuple[WeatherCondition, ...]
    temperature: Temperature
    wind: Wind
    cloudiness: int  # percentage
    visibility: int  # meters
    observed_at: int  # UNIX timestamp (UTC)
    system: SystemInfo
    timezone_offset: int  # Offset from UTC in seconds
    city_id: int
    city_name: str
    status_code: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WeatherSnapshot":
        """
        Decode a Current Weather API response (or a stored copy of one).

        The API uses snake_case keys inside "main" (feels_like, temp_min,
        temp_max, sea_level, grnd_level); they map onto Temperature fields.

        Raises:
            KeyError: If a required field is missing
            TypeError, ValueError: If a field has the wrong type
        """
        main = data["main"]
        coord = data["coord"]
        wind = data["wind"]
        sys_data = data["sys"]
        conditions = tuple(
            WeatherCondition(
                id=int(item["id"]),
                main=str(item["main"]),
                description=str(item["description"]),
                icon=str(item["icon"]),
            )
            for item in data["weather"]
        )
        return cls(
            coordinates=Coordinates(lat=float(coord["lat"]), lon=float(coord["lon"])),
            conditions=conditions,
            temperature=Temperature(
                current=float(main["temp"]),
                feels_like=float(main["feels_like"]),
                minimum=float(main["temp_min"]),
                maximum=float(main["temp_max"]),
                pressure=int(main["pressure"]),
                humidity=int(main["humidity"]),
                sea_level=_optional_int(main.get("sea_level")),
                ground_level=_optional_int(main.get("grnd_level")),
            ),
            wind=Wind(speed=float(wind["speed"]), direction_degrees=int(wind["deg"])),
            cloudiness=int(data["clouds"]["all"]),
            visibility=int(data["visibility"]),
            observed_at=int(data["dt"]),
            system=SystemInfo(
                country_code=str(sys_data["country"]),
                sunrise=int(sys_data["sunrise"]),
                sunset=int(sys_data["sunset"]),
            ),
            timezone_offset=int(data["timezone"]),
            city_id=int(data["id"]),
            city_name=str(data["name"]),
            status_code=int(data["cod"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Encode back into the API shape accepted by from_dict()."""
        main: Dict[str, Any] = {
            "temp": self.temperature.current,
            "feels_like": self.temperature.feels_like,
            "temp_min": self.temperature.minimum,
            "temp_max": self.temperature.maximum,
            "pressure": self.temperature.pressure,
            "humidity": self.temperature.humidity,
        }
        if self.temperature.sea_level is not None:
            main["sea_level"] = self.temperature.sea_level
        if self.temperature.ground_level is not None:
            main["grnd_level"] = self.temperature.ground_level

        return {
            "coord": {"lat": self.coordinates.lat, "lon": self.coordinates.lon},
            "weather": [
                {
                    "id": condition.id,
                    "main": condition.main,
                    "description": condition.description,
                    "icon": condition.icon,
                }
                for condition in self.conditions
            ],
            "main": main,
            "visibility": self.visibility,
            "wind": {"speed": self.wind.speed, "deg": self.wind.direction_degrees},
            "clouds": {"all": self.cloudiness},
            "dt": self.observed_at,
            "sys": {
                "country": self.system.country_code,
                "sunrise": self.system.sunrise,
                "sunset": self.system.sunset,
            },
            "timezone": self.timezone_offset,
            "id": self.city_id,
            "name": self.city_name,
            "cod": self.status_code,
        }

    @property
    def primary_condition(self) -> Optional[WeatherCondition]:
        return self.conditions[0] if self.conditions else None

    @property
    def icon_url(self) -> Optional[str]:
        condition = self.primary_condition
        return condition.icon_url if condition else None

    @property
    def observed_at_utc(self) -> datetime:
        return datetime.fromtimestamp(self.observed_at, tz=timezone.utc)

    @property
    def local_time(self) -> datetime:
        """Observation time in the location's own UTC offset."""
        tz = timezone(timedelta(seconds=self.timezone_offset))
        return datetime.fromtimestamp(self.observed_at, tz=tz)
