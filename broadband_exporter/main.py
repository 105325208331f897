"""
Broadband Line Exporter - Main Entry Point.

Starts the exporter that:
1. Polls the CHAOS API for line information
2. Publishes per-line telemetry as Prometheus gauges
3. Serves the gauges on /metrics for scraping
"""
import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request, Response
from prometheus_client.exposition import choose_encoder

from . import __version__
from .config import ExporterSettings, load_settings
from .exceptions import ConfigurationError
from .metrics.gauges import GaugeSet
from .metrics.publisher import MetricPublisher
from .polling.collector import LineCollector
from .polling.scheduler import PollingScheduler
from .upstream.client import LineInfoClient

logger = logging.getLogger(__name__)


class LineExporter:
    """
    Main exporter orchestrator.

    Wires the upstream client, gauge set and scheduler together
    and owns their lifecycle.
    """

    def __init__(
        self,
        settings: ExporterSettings,
        gauges: Optional[GaugeSet] = None,
        client: Optional[LineInfoClient] = None,
    ):
        """
        Initialize the exporter.

        Args:
            settings: Validated exporter settings.
            gauges: Gauge set; built from settings if omitted.
            client: Upstream client; built from settings if omitted.
        """
        self.settings = settings
        self.gauges = gauges or GaugeSet.from_settings(settings)
        self.client = client or LineInfoClient(settings)
        self.publisher = MetricPublisher(self.gauges)
        self.scheduler = PollingScheduler(
            LineCollector(self.client),
            self.publisher,
            settings,
        )

    async def start(self) -> None:
        """Start polling."""
        logger.info("Starting Broadband Line Exporter...")
        await self.client.connect()
        await self.scheduler.start()

    async def stop(self) -> None:
        """Stop polling and release the HTTP client."""
        logger.info("Stopping Broadband Line Exporter...")
        await self.scheduler.stop()
        await self.client.disconnect()
        logger.info("Broadband Line Exporter stopped")

    def get_stats(self) -> dict:
        """Get exporter statistics."""
        return {
            "version": __version__,
            "polling": self.scheduler.get_stats(),
        }


def create_app(exporter: LineExporter) -> FastAPI:
    """
    Application factory.

    Serves the exporter's registry on /metrics and runs the
    scheduler for the lifetime of the app.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        await exporter.start()
        yield
        await exporter.stop()

    app = FastAPI(
        title=exporter.settings.app_name,
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.exporter = exporter

    @app.get("/metrics", tags=["Metrics"])
    async def metrics(request: Request):
        """Expose the current gauge state, stale or not."""
        encoder, content_type = choose_encoder(request.headers.get("accept"))
        return Response(
            content=encoder(exporter.gauges.registry),
            media_type=content_type,
        )

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Report scheduler state."""
        return exporter.get_stats()

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint."""
        return {
            'name': exporter.settings.app_name,
            'version': __version__,
            'metrics': '/metrics',
        }

    return app


def configure_logging(level: str = "INFO") -> None:
    """Configure process-wide logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )


def run() -> None:
    """Console entry point."""
    configure_logging()

    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.critical(f"Configuration error: {e.message}")
        sys.exit(1)

    logging.getLogger().setLevel(
        getattr(logging, settings.server.log_level.upper(), logging.INFO)
    )

    app = create_app(LineExporter(settings))

    logger.info(
        f"Serving metrics on {settings.server.host}:{settings.server.port}"
    )
    uvicorn.run(
        app,
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
