"""Exporter configuration loaded from a YAML file."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

import yaml

from openmeteo_provider import OpenMeteoProvider
from weather_data import FetchMethod, Location


class ConfigError(Exception):
    """Raised when the configuration file is missing or invalid."""
    pass


@dataclass(frozen=True)
class ExporterConfig:
    locations: List[Location] = field(default_factory=list)
    base_url: str = OpenMeteoProvider.BASE_URL


def load_config(path: str) -> ExporterConfig:
    """
    Load exporter configuration from a YAML file.

    Example:
        locations:
          - name: Vienna
            latitude: 48.21
            longitude: 16.37
            ttlminutes: 15
            method: alt

    Raises:
        ConfigError: If the file can't be read or doesn't describe valid locations
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    return parse_config(data)


def parse_config(data: Any) -> ExporterConfig:
    if not isinstance(data, Mapping):
        raise ConfigError("Config must be a mapping with a 'locations' list")

    raw_locations = data.get("locations")
    if not isinstance(raw_locations, list):
        raise ConfigError("Config is missing a 'locations' list")

    locations = []
    seen = set()
    for index, raw in enumerate(raw_locations):
        location = _parse_location(raw, index)
        if location.name in seen:
            raise ConfigError(f"Duplicate location name: {location.name!r}")
        seen.add(location.name)
        locations.append(location)

    base_url = data.get("base_url") or OpenMeteoProvider.BASE_URL
    if not isinstance(base_url, str):
        raise ConfigError("'base_url' must be a string")

    return ExporterConfig(locations=locations, base_url=base_url)


def _parse_location(raw: Any, index: int) -> Location:
    if not isinstance(raw, Mapping):
        raise ConfigError(f"Location #{index} must be a mapping")

    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ConfigError(f"Location #{index} has no name")

    latitude = _coordinate(raw, "latitude", name, 90)
    longitude = _coordinate(raw, "longitude", name, 180)

    ttl = raw.get("ttlminutes", raw.get("ttl_minutes")) or 0
    if isinstance(ttl, bool) or not isinstance(ttl, int) or ttl < 0:
        raise ConfigError(f"Location {name!r}: ttlminutes must be a non-negative integer")

    try:
        method = FetchMethod.parse(raw.get("method"))
    except ValueError as e:
        raise ConfigError(f"Location {name!r}: {e}") from e

    return Location(
        name=name,
        latitude=latitude,
        longitude=longitude,
        ttl_minutes=ttl,
        method=method,
    )


def _coordinate(raw: Dict[str, Any], key: str, name: str, limit: float) -> float:
    value = raw.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"Location {name!r}: {key} must be a number")
    if not -limit <= value <= limit:
        raise ConfigError(f"Location {name!r}: {key} {value} out of range")
    return float(value)
