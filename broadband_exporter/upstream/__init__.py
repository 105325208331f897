"""
Upstream integration module.

Handles fetching and decoding line information from the CHAOS API.
"""
from .client import LineInfoClient
from .schemas import LineInfoResponse, LineRecord

__all__ = [
    "LineInfoClient",
    "LineInfoResponse",
    "LineRecord",
]
