"""
Metrics module.

Holds the line gauges and publishes decoded records into them.
"""
from .gauges import GAUGE_DEFINITIONS, GaugeSet
from .publisher import MetricPublisher, parse_value

__all__ = [
    "GAUGE_DEFINITIONS",
    "GaugeSet",
    "MetricPublisher",
    "parse_value",
]
