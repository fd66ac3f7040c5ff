"""Prometheus instruments populated by the collector."""
from typing import Dict, Iterator, List

from prometheus_client import Counter, Gauge, Summary
from prometheus_client.metrics_core import Metric

NAMESPACE = "openmeteo"
CURRENT_SUBSYSTEM = "current"
EXPORTER_SUBSYSTEM = "exporter"
LOCATION_LABEL = "location"

# gauge key -> help text; the key is also the metric name under openmeteo_current_
CURRENT_GAUGES = (
    ("temperature", "The current temperature."),
    ("apparent_temperature", "The apparent temperature."),
    ("relative_humidity", "The relative humidity."),
    ("precipitation", "Probability of precipitation."),
    ("rain", "Rain from large scale weather systems"),
    ("showers", "Showers from convective precipitation"),
    ("snowfall", "The snowfall."),
    ("cloud_cover", "Total cloud cover as an area fraction."),
    ("surface_pressure", "Atmospheric air pressure at surface"),
    ("pressure_msl", "Atmospheric air pressure reduced to mean sea level"),
    ("wind_speed", "The current wind speed."),
    ("wind_dir", "The current wind direction."),
    ("wind_gusts", "Wind gusts at 10 meters above ground"),
)


class ExporterMetrics:
    """
    Fixed instrument set for one collector.

    The instruments are not registered in any registry; the collector yields
    their samples from its own collect(). Every location shares the same
    instruments and differs only by the location label.
    """

    def __init__(self):
        self.current: Dict[str, Gauge] = {
            key: Gauge(
                key,
                help_text,
                labelnames=[LOCATION_LABEL],
                namespace=NAMESPACE,
                subsystem=CURRENT_SUBSYSTEM,
                registry=None,
            )
            for key, help_text in CURRENT_GAUGES
        }

        self.total_scrapes = Counter(
            "total_scrapes",
            "Total number of times this exporter was scraped for metrics.",
            namespace=NAMESPACE,
            subsystem=EXPORTER_SUBSYSTEM,
            registry=None,
        )
        self.scrape_errors = Counter(
            "scrape_errors",
            "Total number of times an error occurred during scraping operation.",
            namespace=NAMESPACE,
            subsystem=EXPORTER_SUBSYSTEM,
            registry=None,
        )
        self.cache_hit = Counter(
            "cache_hit",
            "Total number of times cache was hit",
            labelnames=[LOCATION_LABEL],
            namespace=NAMESPACE,
            subsystem=EXPORTER_SUBSYSTEM,
            registry=None,
        )
        self.http_rx_bytes = Counter(
            "http_rx_bytes",
            "Total bytes received from api.open-meteo.com",
            namespace=NAMESPACE,
            subsystem=EXPORTER_SUBSYSTEM,
            registry=None,
        )
        self.http_fetch_duration = Summary(
            "http_fetch_duration",
            "Total time spent on fetching data from api.open-meteo.com",
            namespace=NAMESPACE,
            subsystem=EXPORTER_SUBSYSTEM,
            registry=None,
        )

    def set_current(self, key: str, location: str, value: float) -> None:
        self.current[key].labels(location).set(value)

    def _instruments(self) -> List:
        return list(self.current.values()) + [
            self.total_scrapes,
            self.scrape_errors,
            self.cache_hit,
            self.http_rx_bytes,
            self.http_fetch_duration,
        ]

    def collect(self) -> Iterator[Metric]:
        for instrument in self._instruments():
            yield from instrument.collect()

    def describe(self) -> Iterator[Metric]:
        for instrument in self._instruments():
            yield from instrument.describe()
