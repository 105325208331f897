"""
Shared pytest fixtures for exporter tests.

Provides fixtures for:
- Isolated settings (no ambient environment or .env)
- Gauge sets on private registries
- Mock upstream transports (httpx)
- Sample line records
"""
import json
import os
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from broadband_exporter.config import (
    ExporterSettings,
    PollingSettings,
    UpstreamSettings,
)
from broadband_exporter.metrics.gauges import GaugeSet
from broadband_exporter.upstream.schemas import LineRecord

ENV_PREFIXES = ("AAISP_CONTROL_", "EXPORTER_", "POLLING_", "METRICS_")


# ============================================================================
# Environment Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """
    Strip exporter variables from the environment.

    Also moves into an empty directory so no .env file is picked up.
    """
    for key in list(os.environ):
        if key.startswith(ENV_PREFIXES):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


# ============================================================================
# Settings Fixtures
# ============================================================================

@pytest.fixture
def settings() -> ExporterSettings:
    """Valid settings with test credentials and a short poll interval."""
    return ExporterSettings(
        upstream=UpstreamSettings(
            username="test-login",
            password="test-password",
            url="https://chaos.test/broadband/info/json",
        ),
        polling=PollingSettings(interval=0.01),
    )


@pytest.fixture
def empty_credentials_settings() -> ExporterSettings:
    """Settings without credentials."""
    return ExporterSettings(
        upstream=UpstreamSettings(
            username="",
            password="",
            url="https://chaos.test/broadband/info/json",
        ),
    )


# ============================================================================
# Metrics Fixtures
# ============================================================================

@pytest.fixture
def gauges() -> GaugeSet:
    """Gauge set on its own registry."""
    return GaugeSet(process_metrics=False)


# ============================================================================
# Upstream Fixtures
# ============================================================================

@pytest.fixture
def upstream_requests() -> List[httpx.Request]:
    """Requests seen by the mock upstream."""
    return []


@pytest.fixture
def make_transport(upstream_requests) -> Callable[..., httpx.MockTransport]:
    """
    Build a mock upstream transport.

    Usage:
        transport = make_transport(json_body={"info": []})
        transport = make_transport(status_code=500)
        transport = make_transport(content=b"garbage")
    """
    def _make(
        json_body: Any = None,
        status_code: int = 200,
        content: Optional[bytes] = None,
    ) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            upstream_requests.append(request)
            if content is not None:
                return httpx.Response(status_code, content=content)
            return httpx.Response(status_code, json=json_body)

        return httpx.MockTransport(handler)

    return _make


# ============================================================================
# Test Data Fixtures
# ============================================================================

@pytest.fixture
def sample_line_data() -> Dict[str, str]:
    """Upstream line object for line L1."""
    return {
        "id": "L1",
        "quota_monthly": "500000000000",
        "quota_remaining": "480000000000",
        "rx_rate": "20000000",
        "tx_rate": "80000000",
        "tx_rate_adjusted": "79000000",
    }


@pytest.fixture
def sample_record(sample_line_data) -> LineRecord:
    """Decoded record for line L1."""
    return LineRecord.model_validate(sample_line_data)


@pytest.fixture
def sample_response_body(sample_line_data) -> bytes:
    """Raw upstream response body containing line L1."""
    return json.dumps({"info": [sample_line_data]}).encode()
