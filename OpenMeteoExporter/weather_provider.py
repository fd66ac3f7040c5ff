"""Weather provider abstraction - lets the collector run against any data source."""
from abc import ABC, abstractmethod
from weather_data import Location


class WeatherProviderBase(ABC):
    """Abstract base class for weather data providers."""

    @abstractmethod
    def fetch(self, location: Location) -> bytes:
        """
        Fetch the raw current-conditions body for a location.

        The response shape follows location.method.

        Returns:
            bytes: Response body exactly as received

        Raises:
            WeatherProviderError: If the provider fails to fetch data
        """
        pass


class WeatherProviderError(Exception):
    """Exception raised when a weather provider fails."""
    pass
