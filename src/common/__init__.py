"""
Common types and errors shared across all modules.

This module provides the value types of the document scanner (image buffers,
points and quadrilaterals) and its typed input-contract errors.
"""

from src.common.exceptions import (
    DegenerateGeometryError,
    InvalidBufferSizeError,
    ScanError,
)
from src.common.types import ImageBuffer, Point, Quadrilateral, euclidean_distance

__all__ = [
    "ImageBuffer",
    "Point",
    "Quadrilateral",
    "euclidean_distance",
    "ScanError",
    "InvalidBufferSizeError",
    "DegenerateGeometryError",
]
