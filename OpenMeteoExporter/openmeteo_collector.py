"""Prometheus collector that scrapes Open-Meteo with a per-location cache."""
import logging
import threading
import time
from typing import Callable, List, Optional, Sequence

from prometheus_client.metrics_core import Metric

from exporter_metrics import ExporterMetrics
from openmeteo_provider import OpenMeteoProvider
from response_decoder import decode_response
from weather_cache import ResponseCache
from weather_data import CacheEntry, Location, WeatherResponse
from weather_provider import WeatherProviderBase, WeatherProviderError


class CacheShapeError(RuntimeError):
    """A cached response doesn't match its location's fetch method."""
    pass


class OpenMeteoCollector:
    """
    Custom collector invoked by the registry on every scrape.

    Each scrape walks the configured locations in order. A location whose
    cached response is younger than its TTL is served from cache; any other
    is fetched and decoded. A failed fetch is logged and counted, and the
    walk continues with the next location.
    """

    def __init__(
        self,
        locations: Sequence[Location],
        provider: Optional[WeatherProviderBase] = None,
        metrics: Optional[ExporterMetrics] = None,
        cache: Optional[ResponseCache] = None,
        clock: Callable[[], float] = time.time,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the collector.

        Args:
            locations: Targets to scrape, in scrape order
            provider: Source of raw response bodies (Open-Meteo if omitted)
            metrics: Instrument set to populate
            cache: Per-location response cache
            clock: Wall-clock source used for cache timestamps
            logger: Logger for fetch errors
        """
        self.locations = list(locations)
        self.provider = provider or OpenMeteoProvider()
        self.metrics = metrics or ExporterMetrics()
        self.cache = cache if cache is not None else ResponseCache()
        self.clock = clock
        self.logger = logger or logging.getLogger()

        # scrapes may overlap when the HTTP server is threaded
        self._lock = threading.Lock()

    def describe(self) -> List[Metric]:
        return list(self.metrics.describe())

    def collect(self) -> List[Metric]:
        with self._lock:
            self.metrics.total_scrapes.inc()
            self.scrape()
            return list(self.metrics.collect())

    def scrape(self) -> None:
        """Run one pass over all locations and record how long it took."""
        start = time.perf_counter()
        for location in self.locations:
            self.scrape_target(location)
        self.metrics.http_fetch_duration.observe(time.perf_counter() - start)

    def scrape_target(self, location: Location) -> None:
        response = self._cached_response(location)
        if response is None:
            try:
                response = self._fetch(location)
            except WeatherProviderError as e:
                self._on_error(location, e)
                return

        for key, value in response.gauge_values().items():
            self.metrics.set_current(key, location.name, value)

    def _cached_response(self, location: Location) -> Optional[WeatherResponse]:
        entry, present = self.cache.get(location.name)
        if not present:
            return None

        if entry.response.method is not location.method:
            raise CacheShapeError(
                f"Cached response for {location.name!r} is {entry.response.method.value}, "
                f"location is configured for {location.method.value}"
            )

        now = self.clock()
        if not entry.is_fresh(now, location.ttl_seconds):
            self.logger.debug(
                f"Cache expired for {location.name} "
                f"(age: {now - entry.last_update:.1f}s, TTL: {location.ttl_seconds}s)"
            )
            return None

        self.logger.debug(f"Using cached data for {location.name} (age: {now - entry.last_update:.1f}s)")
        self.metrics.cache_hit.labels(location.name).inc()
        return entry.response

    def _fetch(self, location: Location) -> WeatherResponse:
        self.logger.info(f"Fetching weather data for {location.name} ({location.method.value})")
        body = self.provider.fetch(location)
        self.metrics.http_rx_bytes.inc(len(body))

        response = decode_response(body, location.method)
        self.cache.put(location.name, CacheEntry(response=response, last_update=self.clock()))
        return response

    def _on_error(self, location: Location, error: Exception) -> None:
        self.logger.error(f"Error while fetching data for {location.name}: {error}")
        self.metrics.scrape_errors.inc()
