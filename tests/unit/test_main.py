"""
Unit tests for the exporter app and entry point.

Tests the /metrics, /health and root endpoints, the lifespan-driven
poll loop and startup configuration failures.
"""
import asyncio
from unittest.mock import MagicMock

import httpx
import pytest
import pytest_asyncio

from broadband_exporter import __version__
from broadband_exporter import main as main_module
from broadband_exporter.main import LineExporter, create_app, run
from broadband_exporter.metrics.publisher import MetricPublisher
from broadband_exporter.upstream.client import LineInfoClient


@pytest.fixture
def exporter(settings, gauges, make_transport, sample_response_body):
    """Create an exporter against a mock upstream."""
    client = LineInfoClient(
        settings,
        transport=make_transport(content=sample_response_body),
    )
    return LineExporter(settings, gauges=gauges, client=client)


@pytest.fixture
def app(exporter):
    return create_app(exporter)


@pytest_asyncio.fixture
async def api_client(app):
    """
    Test API client.

    Does not run the lifespan, so no polling happens.
    """
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client


class TestMetricsEndpoint:
    """Test the scrape endpoint."""

    @pytest.mark.asyncio
    async def test_serves_published_values(self, api_client, gauges, sample_record):
        """Test /metrics returns the current gauge state."""
        MetricPublisher(gauges).publish([sample_record])

        response = await api_client.get("/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert 'upstream_sync_rate{LineID="L1"}' in response.text
        assert 'monthly_allowance_remaining{LineID="L1"}' in response.text

    @pytest.mark.asyncio
    async def test_serves_before_first_poll(self, api_client):
        """Test /metrics answers even with no values published yet."""
        response = await api_client.get("/metrics")

        assert response.status_code == 200
        assert "# TYPE downstream_sync_rate gauge" in response.text
        assert "LineID" not in response.text

    @pytest.mark.asyncio
    async def test_openmetrics_negotiation(self, api_client):
        """Test OpenMetrics is served when the scraper asks for it."""
        response = await api_client.get(
            "/metrics",
            headers={"Accept": "application/openmetrics-text; version=1.0.0"},
        )

        assert response.headers["content-type"].startswith("application/openmetrics-text")
        assert response.text.rstrip().endswith("# EOF")


class TestInfoEndpoints:
    """Test health and root endpoints."""

    @pytest.mark.asyncio
    async def test_health(self, api_client):
        response = await api_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["version"] == __version__
        assert data["polling"]["running"] is False
        assert data["polling"]["total_cycles"] == 0

    @pytest.mark.asyncio
    async def test_root(self, api_client):
        response = await api_client.get("/")

        assert response.json() == {
            "name": "Broadband Line Exporter",
            "version": __version__,
            "metrics": "/metrics",
        }


class TestLifespan:
    """Test the scheduler runs for the lifetime of the app."""

    @pytest.mark.asyncio
    async def test_lifespan_polls_and_publishes(self, app, exporter, gauges):
        """Test startup begins polling and shutdown stops it."""
        async with app.router.lifespan_context(app):
            assert exporter.scheduler.running

            async def _published():
                while gauges.value("rx_rate", "L1") is None:
                    await asyncio.sleep(0.005)

            await asyncio.wait_for(_published(), timeout=2.0)

        assert not exporter.scheduler.running
        assert exporter.client._client is None
        assert gauges.value("tx_rate_adjusted", "L1") == 79000000


class TestRun:
    """Test the console entry point."""

    def test_missing_credentials_exit_non_zero(self, monkeypatch):
        """Test configuration errors stop the process before serving."""
        serve = MagicMock()
        monkeypatch.setattr(main_module.uvicorn, "run", serve)

        with pytest.raises(SystemExit) as exc_info:
            run()

        assert exc_info.value.code == 1
        serve.assert_not_called()

    def test_invalid_port_exit_non_zero(self, monkeypatch):
        monkeypatch.setenv("AAISP_CONTROL_USERNAME", "login")
        monkeypatch.setenv("AAISP_CONTROL_PASSWORD", "password")
        monkeypatch.setenv("EXPORTER_PORT", "70000")
        monkeypatch.setattr(main_module.uvicorn, "run", MagicMock())

        with pytest.raises(SystemExit) as exc_info:
            run()

        assert exc_info.value.code == 1

    def test_malformed_line_metadata_exit_non_zero(self, monkeypatch):
        monkeypatch.setenv("AAISP_CONTROL_USERNAME", "login")
        monkeypatch.setenv("AAISP_CONTROL_PASSWORD", "password")
        monkeypatch.setenv("METRICS_LINE_METADATA", "{not json")
        serve = MagicMock()
        monkeypatch.setattr(main_module.uvicorn, "run", serve)

        with pytest.raises(SystemExit) as exc_info:
            run()

        assert exc_info.value.code == 1
        serve.assert_not_called()

    def test_serves_on_configured_port(self, monkeypatch):
        """Test a valid configuration starts uvicorn on the chosen port."""
        monkeypatch.setenv("AAISP_CONTROL_USERNAME", "login")
        monkeypatch.setenv("AAISP_CONTROL_PASSWORD", "password")
        monkeypatch.setenv("EXPORTER_PORT", "9123")
        serve = MagicMock()
        monkeypatch.setattr(main_module.uvicorn, "run", serve)

        run()

        serve.assert_called_once()
        kwargs = serve.call_args.kwargs
        assert kwargs["port"] == 9123
        assert kwargs["host"] == "0.0.0.0"
