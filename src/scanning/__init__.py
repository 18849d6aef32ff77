"""
Document Scanning

Locates the four corners of a photographed document and produces a
perspective-corrected crop of it.

Pipeline stages:
1. Edge map (blur, grayscale, Canny)
2. Hough line detection
3. Line clustering (one line per physical edge)
4. Corner resolution (pairwise intersections, named corners)
5. Perspective rectification (homography, warp, crop)
"""

from src.scanning.config_loader import ScanOptions, get_default_config, load_config
from src.scanning.host import find_paper, transform_paper
from src.scanning.processor import (
    ScanProcessor,
    find_hough_intersections,
    find_quadrilateral,
)
from src.scanning.rectifier import transform_quadrilateral
from src.scanning.types import (
    DetectionResult,
    DetectionStatus,
    LineCluster,
    NotFoundReason,
    PolarLine,
    TransformResult,
)

__all__ = [
    "ScanProcessor",
    "find_quadrilateral",
    "find_hough_intersections",
    "transform_quadrilateral",
    "find_paper",
    "transform_paper",
    "ScanOptions",
    "load_config",
    "get_default_config",
    "DetectionResult",
    "DetectionStatus",
    "NotFoundReason",
    "LineCluster",
    "PolarLine",
    "TransformResult",
]
