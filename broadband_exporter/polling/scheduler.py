"""
Polling scheduler for line telemetry collection.

Runs the fetch-publish-sleep cycle on a fixed interval for
the lifetime of the process.
"""
import asyncio
import logging
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from ..config import ExporterSettings, get_exporter_settings
from ..exceptions import ConfigurationError
from ..metrics.publisher import MetricPublisher
from .collector import CollectionResult, CollectionStatus, LineCollector

logger = logging.getLogger(__name__)


class SchedulerState(str, Enum):
    """Scheduler loop state."""
    IDLE = "idle"
    FETCHING = "fetching"
    PUBLISHING = "publishing"
    SLEEPING = "sleeping"


class PollingScheduler:
    """
    Drives the poll cycle.

    Features:
    - Fixed interval, the same after failed and successful cycles
    - Single background asyncio task
    - Failures are logged and the cycle skipped
    """

    def __init__(
        self,
        collector: LineCollector,
        publisher: MetricPublisher,
        settings: Optional[ExporterSettings] = None,
    ):
        """
        Initialize the polling scheduler.

        Args:
            collector: Line collector.
            publisher: Metric publisher.
            settings: Exporter settings.
        """
        self.collector = collector
        self.publisher = publisher
        self.settings = settings or get_exporter_settings()

        self.state = SchedulerState.IDLE
        self._task: Optional[asyncio.Task] = None
        self._shutdown_event = asyncio.Event()

        # Cycle counters
        self.total_cycles = 0
        self.failed_cycles = 0
        self.empty_cycles = 0
        self.last_publish: Optional[datetime] = None

    @property
    def interval(self) -> float:
        return self.settings.polling.interval

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the poll loop in the background."""
        if self.running:
            logger.warning("Polling scheduler already running")
            return

        logger.info(f"Starting polling scheduler (interval={self.interval}s)")
        self._shutdown_event.clear()
        self._task = asyncio.create_task(self._poll_loop(), name="line_poll")

    async def stop(self) -> None:
        """Stop the poll loop and wait for it to finish."""
        logger.info("Stopping polling scheduler")
        self._shutdown_event.set()

        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass

        self._task = None
        self.state = SchedulerState.IDLE
        logger.info("Polling scheduler stopped")

    async def run_once(self) -> CollectionResult:
        """
        Run a single fetch and publish pass.

        Returns:
            The collection result of this cycle.
        """
        self.state = SchedulerState.FETCHING
        self.total_cycles += 1

        result = await self.collector.collect()

        if result.status is CollectionStatus.FAILED:
            self.failed_cycles += 1
            logger.error(f"Scheduled update failed: {result.error}")

        elif result.status is CollectionStatus.EMPTY:
            self.empty_cycles += 1
            logger.warning("No data returned from CHAOS API")

        else:
            self.state = SchedulerState.PUBLISHING
            written = self.publisher.publish(result.records)
            self.last_publish = result.timestamp
            logger.info(
                f"Published {written} value(s) for "
                f"{len(result.records)} line(s) in {result.duration_ms:.1f}ms"
            )

        self.state = SchedulerState.SLEEPING
        return result

    async def _poll_loop(self) -> None:
        """Continuous poll loop."""
        logger.debug("Starting poll loop")

        while not self._shutdown_event.is_set():
            try:
                await self.run_once()
            except asyncio.CancelledError:
                raise
            except ConfigurationError as e:
                logger.critical(f"Poll loop stopped: {e.message}")
                self.state = SchedulerState.IDLE
                break
            except Exception:
                logger.exception("Unexpected error in poll loop")

            self.state = SchedulerState.SLEEPING

            # Wait for next poll
            try:
                await asyncio.wait_for(
                    self._shutdown_event.wait(),
                    timeout=self.interval,
                )
                # Shutdown event was set
                break
            except asyncio.TimeoutError:
                pass

        logger.debug("Poll loop ended")

    def get_stats(self) -> Dict[str, Any]:
        """
        Get polling statistics.

        Returns:
            Dictionary of polling stats.
        """
        return {
            "running": self.running,
            "state": self.state.value,
            "interval_seconds": self.interval,
            "total_cycles": self.total_cycles,
            "failed_cycles": self.failed_cycles,
            "empty_cycles": self.empty_cycles,
            "last_publish": (
                self.last_publish.isoformat() if self.last_publish else None
            ),
        }
