"""Tests for weather_data module."""
import pytest
from weather_data import (
    AlternateResponse,
    CacheEntry,
    CurrentWeatherAlt,
    CurrentWeatherDefault,
    DefaultResponse,
    FetchMethod,
    Location,
)


def test_fetch_method_parse():
    """Test parsing configured method names."""
    assert FetchMethod.parse(None) is FetchMethod.DEFAULT
    assert FetchMethod.parse("") is FetchMethod.DEFAULT
    assert FetchMethod.parse("default") is FetchMethod.DEFAULT
    assert FetchMethod.parse("alt") is FetchMethod.ALTERNATE
    assert FetchMethod.parse("Alternate") is FetchMethod.ALTERNATE

    with pytest.raises(ValueError):
        FetchMethod.parse("hourly")


def test_location_ttl_default():
    """Unset or zero TTL falls back to 10 minutes."""
    assert Location(name="Vienna", latitude=48.2, longitude=16.4).ttl_seconds == 600
    assert Location(name="Vienna", latitude=48.2, longitude=16.4, ttl_minutes=0).ttl_seconds == 600
    assert Location(name="Vienna", latitude=48.2, longitude=16.4, ttl_minutes=3).ttl_seconds == 180


def test_default_response_gauge_values():
    response = DefaultResponse(
        latitude=48.2,
        longitude=16.4,
        current_weather=CurrentWeatherDefault(temperature=-0.1, wind_speed=5.9, wind_direction=137.0),
    )

    assert response.method is FetchMethod.DEFAULT
    assert response.gauge_values() == {
        "temperature": -0.1,
        "wind_speed": 5.9,
        "wind_dir": 137.0,
    }


def test_alternate_response_gauge_values_skip_absent():
    """Absent fields are left out, zero is kept."""
    response = AlternateResponse(
        latitude=48.2,
        longitude=16.4,
        current=CurrentWeatherAlt(temperature=3.5, rain=0.0, wind_direction=270.0, weather_code=3.0),
    )

    values = response.gauge_values()

    assert response.method is FetchMethod.ALTERNATE
    assert values == {"temperature": 3.5, "rain": 0.0, "wind_dir": 270.0}
    assert "snowfall" not in values


def test_cache_entry_freshness():
    entry = CacheEntry(
        response=AlternateResponse(latitude=0.0, longitude=0.0, current=CurrentWeatherAlt()),
        last_update=1000.0,
    )

    assert entry.is_fresh(now=1599.0, ttl_seconds=600) is True
    assert entry.is_fresh(now=1600.0, ttl_seconds=600) is False
