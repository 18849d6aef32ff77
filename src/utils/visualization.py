"""
Visualization Utilities

Drawing helpers for the debug artifacts written by the batch scanner.
All functions return a new image and leave their input untouched.
"""

import math
from typing import Sequence, Tuple

import cv2
import numpy as np

from src.common.types import Quadrilateral
from src.scanning.types import PolarLine

WHITE = (255, 255, 255)
BLACK = (0, 0, 0)
RED = (0, 0, 255)
GREEN = (0, 255, 0)


def edges_to_color(edges: np.ndarray) -> np.ndarray:
    """Render a binary edge map as white-on-black BGR."""
    color = np.zeros((*edges.shape[:2], 3), dtype=np.uint8)
    color[edges > 0] = WHITE
    return color


def draw_polar_lines(
    image: np.ndarray, lines: Sequence[PolarLine], color: Tuple[int, int, int] = RED
) -> np.ndarray:
    """
    Draw infinite polar lines across an image.

    Args:
        image: BGR image to draw on (copied).
        lines: Lines to draw.
        color: BGR line color.

    Returns:
        Copy of image with the lines drawn, clipped to its bounds.
    """
    canvas = image.copy()
    height, width = canvas.shape[:2]
    for line in lines:
        theta = math.radians(line.angle_in_degrees)
        cos_t, sin_t = math.cos(theta), math.sin(theta)
        x0, y0 = line.r * cos_t, line.r * sin_t
        reach = 2 * max(width, height) + abs(line.r)
        p1 = (int(round(x0 - reach * sin_t)), int(round(y0 + reach * cos_t)))
        p2 = (int(round(x0 + reach * sin_t)), int(round(y0 - reach * cos_t)))
        cv2.line(canvas, p1, p2, color, 1)
    return canvas


def draw_quadrilateral(
    image: np.ndarray,
    quadrilateral: Quadrilateral,
    color: Tuple[int, int, int] = GREEN,
    thickness: int = 1,
) -> np.ndarray:
    """Copy of image with the quadrilateral outline drawn."""
    canvas = image.copy()
    pts = quadrilateral.as_control_points().astype(np.int32).reshape(-1, 1, 2)
    cv2.polylines(canvas, [pts], True, color, thickness)
    return canvas
