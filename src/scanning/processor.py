"""
Main processor for the Scanning module.

Orchestrates quadrilateral detection:
1. Gaussian blur
2. Grayscale conversion
3. Canny edge detection
4. Hough line detection
5. Line clustering
6. Corner resolution

and hands the result to the perspective rectifier. A missed detection is a
NOT_FOUND result, never an exception.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple

import numpy as np

from src.common.types import ImageBuffer, Quadrilateral
from src.scanning import image_ops
from src.scanning.config_loader import ScanOptions, get_default_config, load_config
from src.scanning.corner_resolver import assign_corners, find_intersections
from src.scanning.line_clustering import (
    EDGE_COUNT,
    cluster_lines,
    radius_tolerance_for,
    select_edge_lines,
)
from src.scanning.rectifier import transform_quadrilateral
from src.scanning.types import DetectionResult, DetectionStatus, NotFoundReason

logger = logging.getLogger(__name__)


class ScanProcessor:
    """
    Finds and rectifies the document in a photographed scene.

    Example:
        >>> processor = ScanProcessor()
        >>> image = cv2.imread("receipt.jpg")
        >>> result = processor.detect(image)
        >>> if result.is_found():
        ...     document = processor.rectify(image, result.quadrilateral)
    """

    def __init__(
        self,
        config: Optional[ScanOptions] = None,
        config_path: Optional[Path] = None,
    ):
        """
        Initialize the scan processor.

        Args:
            config: Pre-loaded options. If None, will load from file.
            config_path: Path to config file. If None, uses the bundled default.
        """
        if config is not None:
            self.config = config
            logger.debug("Using provided configuration")
        else:
            self.config = load_config(config_path) if config_path else get_default_config()
            logger.debug("Loaded configuration from file")

    def prepare(self, image: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Blur, grayscale and edge-detect an image.

        Args:
            image: BGR, BGRA or grayscale uint8 image.

        Returns:
            (blurred grayscale image, binary edge map).

        Raises:
            pydantic.ValidationError: If image is not a valid uint8 image.
        """
        ImageBuffer(data=image)

        logger.debug("Preparing image")
        gray = image_ops.to_grayscale(image_ops.gaussian_blur(image, self.config.sigma_blur))

        logger.debug("Canny edge detection")
        edges = image_ops.canny(gray, self.config.canny_low, self.config.canny_high)
        return gray, edges

    def detect(self, image: np.ndarray) -> DetectionResult:
        """
        Locate the document quadrilateral in an image.

        Args:
            image: BGR, BGRA or grayscale uint8 image.

        Returns:
            DetectionResult with the quadrilateral, or the reason it was
            not found.
        """
        _, edges = self.prepare(image)
        return self.detect_edges(edges)

    def detect_edges(self, edges: np.ndarray) -> DetectionResult:
        """
        Locate the document quadrilateral in a precomputed edge map.

        Args:
            edges: Binary edge image; its size bounds valid corners.

        Returns:
            DetectionResult with the quadrilateral, or the reason it was
            not found.
        """
        height, width = edges.shape[:2]
        options = self.config

        logger.debug("Hough transform")
        lines = image_ops.detect_lines(
            edges,
            options.line_detection.vote_threshold,
            options.line_detection.suppression_radius,
        )

        clusters = cluster_lines(
            lines,
            angle_tolerance=options.clustering.angle_tolerance,
            radius_tolerance=radius_tolerance_for(
                width, height, options.clustering.radius_tolerance_ratio
            ),
            wrap_angles=options.clustering.wrap_angles,
            sort_lines=options.clustering.sort_lines,
        )

        if len(clusters) < EDGE_COUNT:
            logger.warning(f"Found {len(clusters)} clusters, expected {EDGE_COUNT}")
            return DetectionResult(
                status=DetectionStatus.NOT_FOUND,
                quadrilateral=None,
                reason=NotFoundReason.TOO_FEW_CLUSTERS,
                cluster_count=len(clusters),
                lines=lines,
            )

        edge_lines = select_edge_lines(clusters)
        if options.debug:
            logger.debug(f"Top {EDGE_COUNT} edge lines: {edge_lines}")

        intersections = find_intersections(edge_lines, width, height)
        if len(intersections) != EDGE_COUNT:
            logger.warning(
                f"Found {len(intersections)} intersections inside the image, "
                f"expected {EDGE_COUNT}"
            )
            return DetectionResult(
                status=DetectionStatus.NOT_FOUND,
                quadrilateral=None,
                reason=NotFoundReason.INTERSECTION_COUNT,
                cluster_count=len(clusters),
                intersection_count=len(intersections),
                lines=lines,
            )

        quadrilateral = assign_corners(intersections, options.corners.strategy)
        logger.debug(f"Result {quadrilateral.to_list()}")

        return DetectionResult(
            status=DetectionStatus.FOUND,
            quadrilateral=quadrilateral,
            reason=NotFoundReason.NONE,
            cluster_count=len(clusters),
            intersection_count=len(intersections),
            lines=lines,
        )

    def rectify(
        self, image: np.ndarray, quadrilateral: Quadrilateral, ratio: float = 1.0
    ) -> np.ndarray:
        """
        Perspective-correct the document region of a full-resolution image.

        Raises:
            DegenerateGeometryError: If the corners cannot be rectified.
        """
        ImageBuffer(data=image)
        return transform_quadrilateral(
            image,
            quadrilateral,
            ratio=ratio,
            interpolation=self.config.rectify.interpolation,
            fill_color=self.config.rectify.fill_color,
        )


def find_quadrilateral(
    image: np.ndarray, options: Optional[ScanOptions] = None
) -> Optional[Quadrilateral]:
    """
    Convenience function for one-shot detection.

    Returns:
        The document quadrilateral, or None if not found.

    Example:
        >>> quad = find_quadrilateral(cv2.imread("receipt.jpg"))
    """
    return ScanProcessor(config=options).detect(image).quadrilateral


def find_hough_intersections(
    edges: np.ndarray, options: Optional[ScanOptions] = None
) -> Optional[Quadrilateral]:
    """Convenience function for detection on a precomputed edge map."""
    return ScanProcessor(config=options).detect_edges(edges).quadrilateral
