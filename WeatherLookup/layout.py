"""Presentation helpers for weather display - pure functions for testability."""
from typing import List, NamedTuple

from weather_data import WeatherSnapshot

KELVIN_OFFSET = 273.15


class CardRow(NamedTuple):
    """One labelled value on the weather card."""
    title: str
    value: str


def kelvin_to_celsius(kelvin: float) -> float:
    return kelvin - KELVIN_OFFSET


def format_celsius(kelvin: float) -> str:
    """
    Format a Kelvin temperature as Celsius with two decimals.

    Args:
        kelvin: Temperature in Kelvin

    Returns:
        Display string, e.g. "26.85°C" for 300.0
    """
    return f"{kelvin_to_celsius(kelvin):.2f}°C"


def get_condition_text(snapshot: WeatherSnapshot) -> str:
    """
    Get short text representation of the primary weather condition.

    Args:
        snapshot: Weather data

    Returns:
        Short condition string (e.g., "Cloudy", "Rain", "Clear")
    """
    condition = snapshot.primary_condition
    if condition is None:
        return "Unknown"
    main = condition.main.lower()

    # Map common conditions to short display strings
    condition_map = {
        "clear": "Clear",
        "clouds": "Cloudy",
        "rain": "Rain",
        "drizzle": "Drizzle",
        "thunderstorm": "Storm",
        "snow": "Snow",
        "mist": "Mist",
        "fog": "Fog",
        "haze": "Haze",
    }

    return condition_map.get(main, condition.main.capitalize())


def build_weather_card(snapshot: WeatherSnapshot) -> List[CardRow]:
    """
    Lay out the weather card for a snapshot.

    Rows follow the order the card is read in: place, current temperature,
    then paired detail tiles.
    """
    temperature = snapshot.temperature
    condition = snapshot.primary_condition
    description = condition.description if condition else ""

    return [
        CardRow("City", snapshot.city_name),
        CardRow("Temperature", format_celsius(temperature.current)),
        CardRow("Condition", get_condition_text(snapshot)),
        CardRow("Min Temp", format_celsius(temperature.minimum)),
        CardRow("Max Temp", format_celsius(temperature.maximum)),
        CardRow("Feels Like", format_celsius(temperature.feels_like)),
        CardRow("Weather", description),
        CardRow("Humidity", f"{temperature.humidity}"),
        CardRow("Wind Speed", f"{snapshot.wind.speed:.2f} m/s"),
    ]
