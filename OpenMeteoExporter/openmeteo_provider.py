"""Open-Meteo forecast API provider implementation."""
import logging
import time
import requests
from typing import Optional
from weather_provider import WeatherProviderBase, WeatherProviderError
from weather_data import FetchMethod, Location

ALTERNATE_FIELDS = (
    "temperature_2m",
    "relative_humidity_2m",
    "apparent_temperature",
    "is_day",
    "precipitation",
    "rain",
    "showers",
    "snowfall",
    "weather_code",
    "cloud_cover",
    "pressure_msl",
    "surface_pressure",
    "wind_speed_10m",
    "wind_direction_10m",
    "wind_gusts_10m",
)


class OpenMeteoProvider(WeatherProviderBase):
    """
    Weather provider using the Open-Meteo forecast API.

    No API key is needed: https://open-meteo.com/en/docs
    Default locations ask for the compact "current_weather" block, alternate
    ones ask for an explicit "current" field list.
    """

    BASE_URL = "https://api.open-meteo.com/v1/forecast"
    DEFAULT_TIMEOUT = 30
    CHUNK_SIZE = 8192
    HEADERS = {
        "accept": "application/json",
        "content-type": "application/json",
    }

    def __init__(
        self,
        base_url: str = BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize Open-Meteo provider.

        Args:
            base_url: Forecast endpoint, without query string
            timeout: HTTP request timeout in seconds
            session: Session to send requests with (a new one if omitted)
        """
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def build_url(self, location: Location) -> str:
        """Build the request URL for a location's coordinates and fetch method."""
        url = f"{self.base_url}?latitude={location.latitude:.2f}&longitude={location.longitude:.2f}"
        if location.method is FetchMethod.ALTERNATE:
            return f"{url}&current={','.join(ALTERNATE_FIELDS)}"
        return f"{url}&current_weather=true"

    def fetch(self, location: Location) -> bytes:
        """
        Fetch current conditions for a location from Open-Meteo.

        Returns:
            bytes: Raw JSON body

        Raises:
            WeatherProviderError: On network failure, timeout or non-2xx status
        """
        url = self.build_url(location)
        logging.debug(f"Requesting {url}")

        # the requests timeout bounds each socket read, the deadline bounds the whole fetch
        deadline = time.monotonic() + self.timeout
        try:
            response = self.session.get(url, headers=self.HEADERS, timeout=self.timeout, stream=True)
        except requests.exceptions.RequestException as e:
            raise WeatherProviderError(f"Network error: {e}") from e

        try:
            logging.debug(f"API response status for {location.name}: {response.status_code}")

            if not response.ok:
                self._handle_error_response(response)

            return self._read_body(response, deadline)
        finally:
            response.close()

    def _read_body(self, response: requests.Response, deadline: float) -> bytes:
        chunks = []
        try:
            for chunk in response.iter_content(chunk_size=self.CHUNK_SIZE):
                chunks.append(chunk)
                if time.monotonic() > deadline:
                    raise WeatherProviderError(
                        f"Network error: response not received within {self.timeout}s"
                    )
        except requests.exceptions.RequestException as e:
            raise WeatherProviderError(f"Network error: {e}") from e
        return b"".join(chunks)

    def _handle_error_response(self, response: requests.Response) -> None:
        """Parse and raise error from Open-Meteo error response."""
        try:
            error_data = response.json()
        except requests.exceptions.RequestException as e:
            raise WeatherProviderError(f"Network error: {e}") from e
        except ValueError:
            # Not JSON, use HTTP status
            raise WeatherProviderError(
                f"HTTP {response.status_code}: {response.text[:200]}"
            )

        reason = None
        if isinstance(error_data, dict):
            reason = error_data.get("reason")
        raise WeatherProviderError(
            f"Open-Meteo API error {response.status_code}: {reason or 'Unknown error'}"
        )
