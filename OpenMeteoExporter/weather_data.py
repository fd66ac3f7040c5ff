"""Weather domain model - locations, decoded API responses and cache entries."""
from dataclasses import dataclass, fields
from enum import Enum
from typing import ClassVar, Dict, Optional, Union

DEFAULT_TTL_MINUTES = 10


class FetchMethod(Enum):
    """Selects which Open-Meteo response shape a location is fetched with."""
    DEFAULT = "default"
    ALTERNATE = "alt"

    @classmethod
    def parse(cls, value: Optional[str]) -> "FetchMethod":
        """Parse a configured method name; missing means DEFAULT."""
        if value is None or value == "":
            return cls.DEFAULT
        normalized = str(value).strip().lower()
        if normalized == "default":
            return cls.DEFAULT
        if normalized in ("alt", "alternate"):
            return cls.ALTERNATE
        raise ValueError(f"Unknown fetch method: {value!r}")


@dataclass(frozen=True)
class Location:
    """A configured target. The name is both metric label value and cache key."""
    name: str
    latitude: float
    longitude: float
    ttl_minutes: int = 0  # 0 means unset
    method: FetchMethod = FetchMethod.DEFAULT

    @property
    def ttl_seconds(self) -> int:
        return (self.ttl_minutes or DEFAULT_TTL_MINUTES) * 60


@dataclass(frozen=True)
class CurrentWeatherDefault:
    temperature: float
    wind_speed: float
    wind_direction: float


@dataclass(frozen=True)
class CurrentWeatherAlt:
    """Current conditions from the explicit field list. None means absent."""
    temperature: Optional[float] = None
    apparent_temperature: Optional[float] = None
    relative_humidity: Optional[float] = None
    precipitation: Optional[float] = None
    rain: Optional[float] = None
    showers: Optional[float] = None
    snowfall: Optional[float] = None
    cloud_cover: Optional[float] = None
    surface_pressure: Optional[float] = None
    pressure_msl: Optional[float] = None
    wind_speed: Optional[float] = None
    wind_direction: Optional[float] = None
    wind_gusts: Optional[float] = None
    weather_code: Optional[float] = None
    is_day: Optional[float] = None


# CurrentWeatherAlt field -> gauge key (see exporter_metrics.CURRENT_GAUGES)
ALT_GAUGE_FIELDS = {
    "temperature": "temperature",
    "apparent_temperature": "apparent_temperature",
    "relative_humidity": "relative_humidity",
    "precipitation": "precipitation",
    "rain": "rain",
    "showers": "showers",
    "snowfall": "snowfall",
    "cloud_cover": "cloud_cover",
    "surface_pressure": "surface_pressure",
    "pressure_msl": "pressure_msl",
    "wind_speed": "wind_speed",
    "wind_direction": "wind_dir",
    "wind_gusts": "wind_gusts",
}


@dataclass(frozen=True)
class DefaultResponse:
    """Response to a `current_weather=true` request."""
    method: ClassVar[FetchMethod] = FetchMethod.DEFAULT

    latitude: float
    longitude: float
    current_weather: CurrentWeatherDefault

    def gauge_values(self) -> Dict[str, float]:
        return {
            "temperature": self.current_weather.temperature,
            "wind_speed": self.current_weather.wind_speed,
            "wind_dir": self.current_weather.wind_direction,
        }


@dataclass(frozen=True)
class AlternateResponse:
    """Response to a `current=<field list>` request."""
    method: ClassVar[FetchMethod] = FetchMethod.ALTERNATE

    latitude: float
    longitude: float
    current: CurrentWeatherAlt

    def gauge_values(self) -> Dict[str, float]:
        """Only the fields the API actually reported."""
        values = {}
        for field in fields(self.current):
            gauge = ALT_GAUGE_FIELDS.get(field.name)
            value = getattr(self.current, field.name)
            if gauge is not None and value is not None:
                values[gauge] = value
        return values


WeatherResponse = Union[DefaultResponse, AlternateResponse]


@dataclass(frozen=True)
class CacheEntry:
    response: WeatherResponse
    last_update: float  # epoch seconds of the fetch

    def is_fresh(self, now: float, ttl_seconds: float) -> bool:
        """Check if this entry can still be served instead of fetching."""
        return now < self.last_update + ttl_seconds
