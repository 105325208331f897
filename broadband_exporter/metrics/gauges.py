"""
Gauge set for per-line telemetry.

Owns the Prometheus registry and the five labeled gauges the
publisher writes into and the /metrics endpoint reads from.
"""
import platform
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

from prometheus_client import (
    CollectorRegistry,
    Gauge,
    Info,
    PlatformCollector,
    ProcessCollector,
)

from .. import __version__
from ..config import ExporterSettings

LINE_ID_LABEL = "LineID"
EXTENDED_LABELS = ("login", "postcode")


@dataclass(frozen=True)
class GaugeDefinition:
    """Maps a LineRecord field onto an exported gauge."""
    field: str
    name: str
    documentation: str


GAUGE_DEFINITIONS: Tuple[GaugeDefinition, ...] = (
    GaugeDefinition(
        field="rx_rate",
        name="upstream_sync_rate",
        documentation="Raw upstream sync rate (bits/sec)",
    ),
    GaugeDefinition(
        field="tx_rate",
        name="downstream_sync_rate",
        documentation="Raw downstream sync rate (bits/sec)",
    ),
    GaugeDefinition(
        field="tx_rate_adjusted",
        name="downstream_rate_adjusted",
        documentation="Adjusted downstream rate after optional rate limiting (bits/sec)",
    ),
    GaugeDefinition(
        field="quota_monthly",
        name="monthly_allowance",
        documentation="Monthly quota (bytes)",
    ),
    GaugeDefinition(
        field="quota_remaining",
        name="monthly_allowance_remaining",
        documentation=(
            "Quota remaining, may exceed monthly_allowance due to "
            "rollover of unused quota (bytes)"
        ),
    ),
)


class GaugeSet:
    """
    Five line gauges registered on a dedicated registry.

    All gauges share one label schema: LineID, plus login and
    postcode when extended labels are enabled.
    """

    def __init__(
        self,
        registry: Optional[CollectorRegistry] = None,
        extended_labels: bool = False,
        line_metadata: Optional[Mapping[str, Mapping[str, str]]] = None,
        process_metrics: bool = True,
    ):
        """
        Create and register the gauges.

        Args:
            registry: Registry to register on; a new one by default.
            extended_labels: Add login and postcode labels.
            line_metadata: Extended label values keyed by line ID.
            process_metrics: Register process and platform collectors.
        """
        self.registry = registry or CollectorRegistry()
        self.extended_labels = extended_labels
        self.label_names: Tuple[str, ...] = (LINE_ID_LABEL,)
        if extended_labels:
            self.label_names += EXTENDED_LABELS
        self._line_metadata = {
            line_id: dict(values)
            for line_id, values in (line_metadata or {}).items()
        }

        self.gauges: Dict[str, Gauge] = {
            definition.field: Gauge(
                definition.name,
                definition.documentation,
                labelnames=self.label_names,
                registry=self.registry,
            )
            for definition in GAUGE_DEFINITIONS
        }
        self._names = {
            definition.field: definition.name
            for definition in GAUGE_DEFINITIONS
        }

        build_info = Info(
            "broadband_exporter_build",
            "Exporter build information",
            registry=self.registry,
        )
        build_info.info({
            "version": __version__,
            "python_version": platform.python_version(),
        })

        if process_metrics:
            ProcessCollector(registry=self.registry)
            PlatformCollector(registry=self.registry)

    @classmethod
    def from_settings(cls, settings: ExporterSettings) -> "GaugeSet":
        return cls(
            extended_labels=settings.metrics.extended_labels,
            line_metadata=settings.metrics.line_metadata,
        )

    @property
    def fields(self) -> Tuple[str, ...]:
        return tuple(self.gauges)

    def labels_for(self, line_id: str) -> Dict[str, str]:
        """
        Build the label set for a line.

        Missing extended metadata becomes an empty label value.
        """
        labels = {LINE_ID_LABEL: line_id}
        if self.extended_labels:
            metadata = self._line_metadata.get(line_id, {})
            for name in EXTENDED_LABELS:
                labels[name] = metadata.get(name, "")
        return labels

    def set(self, field: str, line_id: str, value: float) -> None:
        """Set one gauge value for a line."""
        self.gauges[field].labels(**self.labels_for(line_id)).set(value)

    def value(self, field: str, line_id: str) -> Optional[float]:
        """
        Read the current value of a gauge for a line.

        Args:
            field: LineRecord field name, e.g. ``rx_rate``.
            line_id: Line identifier.

        Returns:
            The sample value, or None if never set.
        """
        return self.registry.get_sample_value(
            self._names[field],
            self.labels_for(line_id),
        )
