"""Prometheus exporter for current weather conditions from open-meteo.com."""
import argparse
import logging
import os
import signal
import sys
from socketserver import ThreadingMixIn
from typing import Callable, Iterable, List, Optional, Tuple
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

from dotenv import load_dotenv
from prometheus_client import (
    CollectorRegistry,
    GCCollector,
    Info,
    PlatformCollector,
    ProcessCollector,
    make_wsgi_app,
)

from exporter_config import ConfigError, ExporterConfig, load_config
from openmeteo_collector import OpenMeteoCollector
from openmeteo_provider import OpenMeteoProvider

NAME = "openmeteo_exporter"
VERSION = "0.1.0"

DEFAULT_CONFIG_FILE = "config.yaml"
DEFAULT_LISTEN_ADDRESS = ":9113"
DEFAULT_METRICS_PATH = "/metrics"

LANDING_PAGE = """<html>
<head><title>{title}</title></head>
<body>
<h1>{title}</h1>
<p>Prometheus exporter for open-meteo.com</p>
<p>Version: {version}</p>
<ul>
<li><a href="{metrics_path}">Metrics</a></li>
<li><a href="/health">Health</a></li>
</ul>
</body>
</html>
"""


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(NAME, description="Prometheus exporter for open-meteo.com")
    parser.add_argument(
        "--config-file",
        default=os.getenv("OPENMETEO_EXPORTER_CONFIG", DEFAULT_CONFIG_FILE),
        help="Path to config file.",
    )
    parser.add_argument(
        "--web.listen-address",
        dest="listen_address",
        default=os.getenv("OPENMETEO_EXPORTER_LISTEN_ADDRESS", DEFAULT_LISTEN_ADDRESS),
        help="Address on which to expose metrics and web interface.",
    )
    parser.add_argument(
        "--web.telemetry-path",
        dest="metrics_path",
        default=DEFAULT_METRICS_PATH,
        help="Path under which to expose metrics.",
    )
    parser.add_argument(
        "--disable-default-metrics",
        action="store_true",
        help="Exclude default metrics about the exporter itself (process_*, python_*).",
    )
    parser.add_argument("--log-file", default=None)
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("--version", action="version", version=f"{NAME} {VERSION}")
    return parser.parse_args(argv)


def setup_logging(log_file: Optional[str], verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers
    )


def read_config(config_file: str) -> ExporterConfig:
    try:
        config = load_config(config_file)
    except ConfigError as exc:
        raise SystemExit(f"Invalid configuration: {exc}") from exc

    logging.info("Got %d targets from %s", len(config.locations), config_file)
    return config


def parse_listen_address(address: str) -> Tuple[str, int]:
    """Split "host:port" (host may be empty) into its parts."""
    host, sep, port = address.rpartition(":")
    if not sep:
        raise ValueError(f"Listen address must be host:port, got {address!r}")
    try:
        port_val = int(port)
    except ValueError as exc:
        raise ValueError(f"Invalid port in listen address {address!r}") from exc
    return host.strip("[]"), port_val


def build_registry(config: ExporterConfig, disable_default_metrics: bool = False) -> CollectorRegistry:
    registry = CollectorRegistry()

    build_info = Info("openmeteo_exporter_build", "Build information of the exporter.", registry=registry)
    build_info.info({"version": VERSION})

    provider = OpenMeteoProvider(base_url=config.base_url)
    registry.register(OpenMeteoCollector(config.locations, provider=provider))

    if not disable_default_metrics:
        ProcessCollector(registry=registry)
        PlatformCollector(registry=registry)
        GCCollector(registry=registry)

    return registry


def make_app(registry: CollectorRegistry, metrics_path: str = DEFAULT_METRICS_PATH) -> Callable:
    """WSGI app serving the landing page, health check and metrics."""
    metrics_app = make_wsgi_app(registry)
    landing = LANDING_PAGE.format(
        title=NAME.replace("_", " "),
        version=VERSION,
        metrics_path=metrics_path,
    ).encode("utf-8")

    def app(environ, start_response) -> Iterable[bytes]:
        path = environ.get("PATH_INFO") or "/"
        if path == metrics_path:
            return metrics_app(environ, start_response)
        if path == "/health":
            start_response("200 OK", [("Content-Type", "text/plain; charset=utf-8")])
            return [b"OK"]
        if path == "/":
            start_response("200 OK", [("Content-Type", "text/html; charset=utf-8")])
            return [landing]
        start_response("404 Not Found", [("Content-Type", "text/plain; charset=utf-8")])
        return [b"Not Found"]

    return app


class ThreadingWSGIServer(ThreadingMixIn, WSGIServer):
    daemon_threads = True


class _LoggingHandler(WSGIRequestHandler):
    def log_message(self, format, *args):
        logging.debug("%s - %s", self.address_string(), format % args)


def signal_handler(signum, frame):
    logging.info("Received signal %s, shutting down", signum)
    raise KeyboardInterrupt()


def main() -> None:
    load_dotenv()
    args = parse_args()
    setup_logging(args.log_file, args.verbose)
    logging.info("Starting %s version=%s config=%s", NAME, VERSION, args.config_file)

    config = read_config(args.config_file)
    registry = build_registry(config, args.disable_default_metrics)
    app = make_app(registry, args.metrics_path)

    try:
        host, port = parse_listen_address(args.listen_address)
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc

    httpd = make_server(host, port, app, ThreadingWSGIServer, handler_class=_LoggingHandler)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    logging.info("Listening on %s, metrics at %s", args.listen_address, args.metrics_path)
    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        logging.info("Stopping exporter")
    finally:
        httpd.server_close()


if __name__ == "__main__":
    main()
