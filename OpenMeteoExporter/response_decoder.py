"""Decode Open-Meteo JSON bodies into typed responses."""
import json
from typing import Any, Dict, Optional

from weather_data import (
    AlternateResponse,
    CurrentWeatherAlt,
    CurrentWeatherDefault,
    DefaultResponse,
    FetchMethod,
    WeatherResponse,
)
from weather_provider import WeatherProviderError


class ResponseDecodeError(WeatherProviderError):
    """Raised when a response body can't be turned into a WeatherResponse."""
    pass


# JSON key in the "current" block -> CurrentWeatherAlt field
ALT_JSON_FIELDS = {
    "temperature_2m": "temperature",
    "apparent_temperature": "apparent_temperature",
    "relative_humidity_2m": "relative_humidity",
    "precipitation": "precipitation",
    "rain": "rain",
    "showers": "showers",
    "snowfall": "snowfall",
    "cloud_cover": "cloud_cover",
    "surface_pressure": "surface_pressure",
    "pressure_msl": "pressure_msl",
    "wind_speed_10m": "wind_speed",
    "wind_direction_10m": "wind_direction",
    "wind_gusts_10m": "wind_gusts",
    "weather_code": "weather_code",
    "is_day": "is_day",
}


def decode_response(data: bytes, method: FetchMethod) -> WeatherResponse:
    """
    Decode a response body into the shape selected by method.

    Args:
        data: Raw response body
        method: Fetch method the body was requested with

    Returns:
        DefaultResponse or AlternateResponse

    Raises:
        ResponseDecodeError: On malformed JSON or a missing/mistyped required field
    """
    try:
        payload = json.loads(data)
    except (ValueError, RecursionError) as e:
        raise ResponseDecodeError(f"Invalid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise ResponseDecodeError(f"Expected a JSON object, got {type(payload).__name__}")

    if method is FetchMethod.ALTERNATE:
        return _decode_alternate(payload)
    return _decode_default(payload)


def _decode_default(payload: Dict[str, Any]) -> DefaultResponse:
    current = _block(payload, "current_weather")
    return DefaultResponse(
        latitude=_required(payload, "latitude"),
        longitude=_required(payload, "longitude"),
        current_weather=CurrentWeatherDefault(
            temperature=_required(current, "temperature"),
            wind_speed=_required(current, "windspeed"),
            wind_direction=_required(current, "winddirection"),
        ),
    )


def _decode_alternate(payload: Dict[str, Any]) -> AlternateResponse:
    current = _block(payload, "current")
    values = {attr: _optional(current, key) for key, attr in ALT_JSON_FIELDS.items()}
    return AlternateResponse(
        latitude=_required(payload, "latitude"),
        longitude=_required(payload, "longitude"),
        current=CurrentWeatherAlt(**values),
    )


def _block(payload: Dict[str, Any], key: str) -> Dict[str, Any]:
    block = payload.get(key)
    if not isinstance(block, dict):
        raise ResponseDecodeError(f"Response missing '{key}' block")
    return block


def _required(block: Dict[str, Any], key: str) -> float:
    value = _optional(block, key)
    if value is None:
        raise ResponseDecodeError(f"Response missing required field '{key}'")
    return value


def _optional(block: Dict[str, Any], key: str) -> Optional[float]:
    value = block.get(key)
    if value is None:
        return None
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ResponseDecodeError(
            f"Field '{key}' must be a number, got {type(value).__name__}"
        )
    try:
        return float(value)
    except OverflowError as e:
        raise ResponseDecodeError(f"Field '{key}' out of range") from e
