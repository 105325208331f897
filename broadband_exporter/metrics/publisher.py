"""
Metric publisher for decoded line records.

Maps every telemetry field of a LineRecord onto its gauge,
keyed by the record's line ID.
"""
import logging
import math
from typing import Iterable, Optional

from ..upstream.schemas import LineRecord
from .gauges import GaugeSet

logger = logging.getLogger(__name__)


def parse_value(raw: str) -> Optional[float]:
    """
    Parse a decimal string telemetry value.

    Follows Python float() syntax, so surrounding whitespace and
    underscores are accepted. NaN and infinities are rejected.

    Returns:
        The float value, or None if it is not a finite number.
    """
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None

    if not math.isfinite(value):
        return None

    return value


class MetricPublisher:
    """
    Publishes line records into a GaugeSet.

    A field that fails to parse is skipped; its previous gauge
    value is kept rather than cleared.
    """

    def __init__(self, gauges: GaugeSet):
        self.gauges = gauges

    def publish(self, records: Iterable[LineRecord]) -> int:
        """
        Set all gauges from the given records.

        Args:
            records: Decoded line records.

        Returns:
            Number of gauge values written.
        """
        written = 0

        for record in records:
            for field in self.gauges.fields:
                raw = getattr(record, field)
                value = parse_value(raw)
                if value is None:
                    logger.debug(
                        f"Skipping unparseable {field} for line {record.line_id}"
                    )
                    continue

                self.gauges.set(field, record.line_id, value)
                written += 1

        return written
