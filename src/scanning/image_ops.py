"""
Image Processing Adapters

Thin wrappers around the OpenCV primitives the scanner relies on: blur,
grayscale conversion, Canny edges, Hough lines, homography solving,
warping and cropping. Everything above this module works with numpy arrays
and the scanner's own types and never calls cv2 directly.
"""

import itertools
import logging
import math
from typing import List, Sequence

import cv2
import numpy as np

from src.common.exceptions import DegenerateGeometryError
from src.scanning.types import PolarLine

logger = logging.getLogger(__name__)

INTERPOLATION_FLAGS = {
    "nearest": cv2.INTER_NEAREST,
    "linear": cv2.INTER_LINEAR,
    "cubic": cv2.INTER_CUBIC,
}

# Twice the triangle area below which three control points count as collinear
_COLLINEAR_EPSILON = 1e-6


def gaussian_blur(image: np.ndarray, sigma: float) -> np.ndarray:
    """Gaussian blur with the kernel size derived from sigma."""
    return cv2.GaussianBlur(image, (0, 0), sigmaX=sigma, sigmaY=sigma)


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """
    Convert a BGR, BGRA or single-channel image to a 2D uint8 image.

    Raises:
        ValueError: If the channel count is not 1, 3 or 4.
    """
    if image.ndim == 2:
        return image
    channels = image.shape[2]
    if channels == 1:
        return image[:, :, 0]
    if channels == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    if channels == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
    raise ValueError(f"Unsupported channel count: {channels}")


def canny(gray: np.ndarray, low: float, high: float) -> np.ndarray:
    """Binary edge map (0 or 255) of the same size as the input."""
    return cv2.Canny(gray, low, high)


def detect_lines(
    edges: np.ndarray, vote_threshold: int, suppression_radius: int
) -> List[PolarLine]:
    """
    Detect straight lines in an edge map with the standard Hough transform.

    The accumulator uses a 1 pixel / 1 degree grid. OpenCV reports lines
    strongest first; a line is suppressed when a stronger, already kept
    line lies within suppression_radius in both angle and r.

    Args:
        edges: Binary edge image.
        vote_threshold: Minimum accumulator votes.
        suppression_radius: Non-maximum suppression neighborhood.

    Returns:
        Detected lines, strongest first. Callers must not rely on the order.
    """
    raw = cv2.HoughLines(edges, 1, np.pi / 180, vote_threshold)
    if raw is None:
        logger.debug("Hough transform found no lines")
        return []

    kept: List[PolarLine] = []
    for rho, theta in raw.reshape(-1, raw.shape[-1])[:, :2]:
        line = _to_polar_line(float(rho), float(theta))
        if any(
            abs(line.angle_in_degrees - other.angle_in_degrees) <= suppression_radius
            and abs(line.r - other.r) <= suppression_radius
            for other in kept
        ):
            continue
        kept.append(line)

    logger.debug(f"Hough transform: {raw.shape[0]} raw lines, {len(kept)} after suppression")
    return kept


def _to_polar_line(rho: float, theta: float) -> PolarLine:
    angle = int(round(math.degrees(theta)))
    if angle >= 180:
        # (180, r) and (0, -r) describe the same line
        return PolarLine(angle_in_degrees=angle - 180, r=-rho)
    return PolarLine(angle_in_degrees=angle, r=rho)


def _check_control_points(points: np.ndarray, label: str) -> None:
    if points.shape != (4, 2):
        raise DegenerateGeometryError(
            f"Expected 4 {label} control points with shape (4, 2), got {points.shape}"
        )
    if not np.all(np.isfinite(points)):
        raise DegenerateGeometryError(
            f"Non-finite {label} control points", points=points.tolist()
        )
    for a, b, c in itertools.combinations(points, 3):
        cross = (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])
        if abs(cross) < _COLLINEAR_EPSILON:
            raise DegenerateGeometryError(
                f"Collinear or coincident {label} control points", points=points.tolist()
            )


def solve_homography(src: Sequence, dst: Sequence) -> np.ndarray:
    """
    Projective mapping taking the 4 src control points onto the 4 dst points.

    Raises:
        DegenerateGeometryError: If any three points on either side are
            collinear (or coincide), or the solved matrix is singular.
    """
    src = np.asarray(src, dtype=np.float32)
    dst = np.asarray(dst, dtype=np.float32)
    _check_control_points(src, "source")
    _check_control_points(dst, "destination")

    matrix = cv2.getPerspectiveTransform(src, dst)
    if not np.all(np.isfinite(matrix)) or abs(np.linalg.det(matrix)) < 1e-12:
        raise DegenerateGeometryError(
            "Homography is singular", points=src.tolist()
        )
    return matrix


def warp(
    image: np.ndarray,
    matrix: np.ndarray,
    interpolation: str = "nearest",
    fill_color: Sequence[int] = (0, 0, 255, 255),
) -> np.ndarray:
    """
    Remap the whole image through a projective mapping.

    The output has the input's dimensions; destination pixels with no
    source pixel are set to fill_color.

    Raises:
        ValueError: If interpolation is not a known mode.
    """
    if interpolation not in INTERPOLATION_FLAGS:
        raise ValueError(
            f"Invalid interpolation: {interpolation}. "
            f"Must be one of {list(INTERPOLATION_FLAGS)}"
        )
    height, width = image.shape[:2]
    return cv2.warpPerspective(
        image,
        matrix,
        (width, height),
        flags=INTERPOLATION_FLAGS[interpolation],
        borderMode=cv2.BORDER_CONSTANT,
        borderValue=tuple(int(c) for c in fill_color),
    )


def crop(image: np.ndarray, x: int, y: int, width: int, height: int) -> np.ndarray:
    """Copy of the rectangle at (x, y), clamped to the image bounds."""
    img_h, img_w = image.shape[:2]
    x0 = min(max(x, 0), img_w)
    y0 = min(max(y, 0), img_h)
    x1 = min(x0 + max(width, 0), img_w)
    y1 = min(y0 + max(height, 0), img_h)
    return image[y0:y1, x0:x1].copy()


def rgba_to_bgra(image: np.ndarray) -> np.ndarray:
    """Swap the red and blue channels of a 4-channel image."""
    return cv2.cvtColor(image, cv2.COLOR_RGBA2BGRA)


def bgra_to_rgba(image: np.ndarray) -> np.ndarray:
    return cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA)
