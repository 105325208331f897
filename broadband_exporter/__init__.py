"""
Broadband Line Exporter - Prometheus exporter for CHAOS line telemetry.

Polls the line-info API and republishes per-line sync rates and
quota as labeled gauges.
"""
__version__ = "0.1.0"

from .config import ExporterSettings, get_exporter_settings, load_settings
from .main import LineExporter, create_app

__all__ = [
    "__version__",
    "ExporterSettings",
    "get_exporter_settings",
    "load_settings",
    "LineExporter",
    "create_app",
]
