"""
Perspective Rectification

Maps the document quadrilateral onto an upright rectangle and crops it out
of the source image.
"""

import logging
from typing import Sequence, Tuple

import numpy as np

from src.common.exceptions import DegenerateGeometryError
from src.common.types import Point, Quadrilateral
from src.scanning import image_ops

logger = logging.getLogger(__name__)


def calculate_output_size(quadrilateral: Quadrilateral) -> Tuple[int, int]:
    """
    Size of the rectified document.

    Uses the shorter of each pair of opposite edges, so the output never
    upsamples beyond the more perspective-compressed side.

    Returns:
        (width, height) truncated to whole pixels.
    """
    top, right, bottom, left = quadrilateral.edge_lengths()
    width = min(bottom, top)
    height = min(right, left)
    logger.debug(
        f"Edge lengths - Top: {top:.1f}, Right: {right:.1f}, "
        f"Bottom: {bottom:.1f}, Left: {left:.1f}"
    )
    return int(width), int(height)


def destination_quadrilateral(quadrilateral: Quadrilateral, width: int, height: int) -> Quadrilateral:
    """Upright width x height rectangle placed at the source top-left corner."""
    return Quadrilateral(
        top_left=Point(x=0, y=0),
        top_right=Point(x=width, y=0),
        bottom_left=Point(x=0, y=height),
        bottom_right=Point(x=width, y=height),
    ).translate(quadrilateral.top_left)


def transform_quadrilateral(
    image: np.ndarray,
    quadrilateral: Quadrilateral,
    ratio: float = 1.0,
    interpolation: str = "nearest",
    fill_color: Sequence[int] = (0, 0, 255, 255),
) -> np.ndarray:
    """
    Perspective-correct and crop the document region of an image.

    Args:
        image: Full-resolution source image (H, W) or (H, W, C).
        quadrilateral: Document corners, possibly found on a downscaled copy.
        ratio: Factor mapping the quadrilateral into image coordinates.
        interpolation: Warp resampling mode.
        fill_color: Color for pixels with no source mapping.

    Returns:
        The rectified document, at most width x height pixels.

    Raises:
        DegenerateGeometryError: If the output would be empty (zero size,
            or a top-left corner outside the image) or the corners cannot
            define a projective mapping.

    Example:
        >>> image = cv2.imread("receipt.jpg")
        >>> quad = find_quadrilateral(image, get_default_config())
        >>> if quad is not None:
        ...     document = transform_quadrilateral(image, quad)
    """
    quadrilateral = quadrilateral.scale(ratio)
    logger.debug(f"Transforming quadrilateral {quadrilateral.to_list()}")

    width, height = calculate_output_size(quadrilateral)
    if width == 0 or height == 0:
        raise DegenerateGeometryError(
            f"Rectified size {width}x{height} is empty", points=quadrilateral.to_list()
        )

    to_dimensions = destination_quadrilateral(quadrilateral, width, height)
    logger.debug(f"Resulting quadrilateral {to_dimensions.to_list()}")

    projection = image_ops.solve_homography(
        quadrilateral.as_control_points(), to_dimensions.as_control_points()
    )
    logger.debug(f"Projection: {projection.tolist()}")

    projected = image_ops.warp(image, projection, interpolation, fill_color)
    cropped = image_ops.crop(
        projected, quadrilateral.top_left.x, quadrilateral.top_left.y, width, height
    )
    if cropped.size == 0:
        raise DegenerateGeometryError(
            f"Top-left corner {quadrilateral.top_left.to_tuple()} lies outside the "
            f"{image.shape[1]}x{image.shape[0]} image",
            points=quadrilateral.to_list(),
        )

    logger.info(f"Rectified document to {cropped.shape[1]}x{cropped.shape[0]}")
    return cropped
