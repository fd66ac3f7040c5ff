"""Tests for the Open-Meteo response decoder."""
import json
import pytest
from response_decoder import ResponseDecodeError, decode_response
from weather_data import AlternateResponse, DefaultResponse, FetchMethod
from weather_provider import WeatherProviderError


@pytest.fixture
def sample_alt_body():
    """Sample response for the explicit field list, rain and snowfall missing."""
    return {
        "latitude": 48.2,
        "longitude": 16.38,
        "generationtime_ms": 0.05,
        "current_units": {"temperature_2m": "°C"},
        "current": {
            "time": "2024-01-15T12:00",
            "interval": 900,
            "temperature_2m": 2.7,
            "relative_humidity_2m": 81,
            "apparent_temperature": -1.2,
            "is_day": 1,
            "precipitation": 0.0,
            "showers": 0.0,
            "weather_code": 3,
            "cloud_cover": 100,
            "pressure_msl": 1021.4,
            "surface_pressure": 997.9,
            "wind_speed_10m": 11.2,
            "wind_direction_10m": 293,
            "wind_gusts_10m": 25.9,
        },
    }


def test_decode_default():
    """Test decoding the current_weather shape."""
    body = b'{"latitude":48.2,"longitude":16.4,"current_weather":{"temperature":-0.1,"windspeed":5.9,"winddirection":137}}'

    response = decode_response(body, FetchMethod.DEFAULT)

    assert isinstance(response, DefaultResponse)
    assert response.latitude == 48.2
    assert response.longitude == 16.4
    assert response.current_weather.temperature == -0.1
    assert response.current_weather.wind_speed == 5.9
    assert response.current_weather.wind_direction == 137.0


def test_decode_alternate_missing_fields(sample_alt_body):
    """Missing optional fields decode to None rather than failing."""
    response = decode_response(json.dumps(sample_alt_body).encode(), FetchMethod.ALTERNATE)

    assert isinstance(response, AlternateResponse)
    assert response.current.temperature == 2.7
    assert response.current.relative_humidity == 81.0
    assert response.current.precipitation == 0.0
    assert response.current.wind_direction == 293.0
    assert response.current.weather_code == 3.0
    assert response.current.is_day == 1.0
    assert response.current.rain is None
    assert response.current.snowfall is None


def test_decode_alternate_null_field(sample_alt_body):
    sample_alt_body["current"]["wind_gusts_10m"] = None

    response = decode_response(json.dumps(sample_alt_body).encode(), FetchMethod.ALTERNATE)

    assert response.current.wind_gusts is None


def test_decode_invalid_json():
    with pytest.raises(ResponseDecodeError) as exc_info:
        decode_response(b"<html>Bad Gateway</html>", FetchMethod.DEFAULT)

    assert "Invalid JSON" in str(exc_info.value)


def test_decode_error_is_provider_error():
    """Decode failures go down the same error path as fetch failures."""
    with pytest.raises(WeatherProviderError):
        decode_response(b"[1, 2, 3]", FetchMethod.DEFAULT)


def test_decode_default_missing_block():
    body = b'{"latitude":48.2,"longitude":16.4}'

    with pytest.raises(ResponseDecodeError) as exc_info:
        decode_response(body, FetchMethod.DEFAULT)

    assert "missing 'current_weather' block" in str(exc_info.value)


def test_decode_default_missing_required_field():
    body = b'{"latitude":48.2,"longitude":16.4,"current_weather":{"temperature":1.0,"windspeed":2.0}}'

    with pytest.raises(ResponseDecodeError) as exc_info:
        decode_response(body, FetchMethod.DEFAULT)

    assert "winddirection" in str(exc_info.value)


def test_decode_default_type_mismatch():
    body = b'{"latitude":48.2,"longitude":16.4,"current_weather":{"temperature":"warm","windspeed":2.0,"winddirection":90}}'

    with pytest.raises(ResponseDecodeError) as exc_info:
        decode_response(body, FetchMethod.DEFAULT)

    assert "'temperature' must be a number" in str(exc_info.value)


def test_decode_alternate_type_mismatch(sample_alt_body):
    """A present optional field still has to be a number."""
    sample_alt_body["current"]["rain"] = True

    with pytest.raises(ResponseDecodeError):
        decode_response(json.dumps(sample_alt_body).encode(), FetchMethod.ALTERNATE)


def test_decode_alternate_body_as_default(sample_alt_body):
    """An alternate body has no current_weather block."""
    with pytest.raises(ResponseDecodeError):
        decode_response(json.dumps(sample_alt_body).encode(), FetchMethod.DEFAULT)


def test_decode_number_too_large_for_float():
    body = b'{"latitude":48.2,"longitude":16.4,"current_weather":{"temperature":' + b"1" * 400 + b',"windspeed":2.0,"winddirection":90}}'

    with pytest.raises(ResponseDecodeError) as exc_info:
        decode_response(body, FetchMethod.DEFAULT)

    assert "'temperature' out of range" in str(exc_info.value)


def test_decode_deeply_nested_body():
    body = b"[" * 100000 + b"]" * 100000

    with pytest.raises(ResponseDecodeError) as exc_info:
        decode_response(body, FetchMethod.ALTERNATE)

    assert "Invalid JSON" in str(exc_info.value)
