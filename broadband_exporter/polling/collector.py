"""
Line collector for polling upstream telemetry.

Wraps the line-info client and turns its outcome into a
result the scheduler can act on without exception handling.
"""
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Tuple

from ..exceptions import FetchError
from ..upstream.client import LineInfoClient
from ..upstream.schemas import LineRecord

logger = logging.getLogger(__name__)


class CollectionStatus(str, Enum):
    """Outcome of one collection."""
    SUCCESS = "success"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass
class CollectionResult:
    """Result of a line-info collection."""
    status: CollectionStatus
    records: Tuple[LineRecord, ...] = ()
    error: Optional[str] = None
    duration_ms: float = 0.0
    timestamp: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @property
    def success(self) -> bool:
        return self.status is CollectionStatus.SUCCESS


class LineCollector:
    """
    Collects line records from the upstream API.

    Transient failures are reported in the result; configuration
    errors propagate since no later cycle can succeed.
    """

    def __init__(self, client: LineInfoClient):
        """
        Initialize the line collector.

        Args:
            client: Upstream line-info client.
        """
        self.client = client

    async def collect(self) -> CollectionResult:
        """
        Collect the current line records.

        Returns:
            CollectionResult with SUCCESS, EMPTY or FAILED status.
        """
        start_time = time.monotonic()

        try:
            records = await self.client.fetch_lines()
        except FetchError as e:
            duration_ms = (time.monotonic() - start_time) * 1000
            return CollectionResult(
                status=CollectionStatus.FAILED,
                error=f"{e.reason}: {e.message}",
                duration_ms=duration_ms,
            )

        duration_ms = (time.monotonic() - start_time) * 1000

        if not records:
            return CollectionResult(
                status=CollectionStatus.EMPTY,
                error="No lines returned",
                duration_ms=duration_ms,
            )

        logger.debug(
            f"Collected {len(records)} line(s) in {duration_ms:.1f}ms"
        )
        return CollectionResult(
            status=CollectionStatus.SUCCESS,
            records=tuple(records),
            duration_ms=duration_ms,
        )
