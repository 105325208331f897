"""
Test data factories for the exporter.

Provides factory classes for generating upstream payloads.
"""
from .line_factory import LineInfoFactory, LineInfoResponseFactory

__all__ = [
    "LineInfoFactory",
    "LineInfoResponseFactory",
]
