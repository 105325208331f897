"""
Line polling module.

Handles scheduled polling of the upstream API.
"""
from .collector import CollectionResult, CollectionStatus, LineCollector
from .scheduler import PollingScheduler, SchedulerState

__all__ = [
    "CollectionResult",
    "CollectionStatus",
    "LineCollector",
    "PollingScheduler",
    "SchedulerState",
]
