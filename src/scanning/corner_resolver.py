"""
Corner resolution for the Scanning module.

Intersects the four strongest edge lines and labels the resulting points
as the named corners of a Quadrilateral.
"""

import itertools
import logging
import math
from typing import List, Optional, Sequence

from src.common.types import Point, Quadrilateral, euclidean_distance
from src.scanning.types import PolarLine

logger = logging.getLogger(__name__)

# Direction of the top-left corner as seen from the centroid (y points down)
_TOP_LEFT_DIRECTION = math.atan2(-1.0, -1.0)


def polarline_intersection(
    a: PolarLine, b: PolarLine, width: int, height: int
) -> Optional[Point]:
    """
    Intersection of two polar lines, if it lies inside the image.

    Args:
        a: First line.
        b: Second line.
        width: Largest valid x coordinate.
        height: Largest valid y coordinate.

    Returns:
        The intersection rounded to the nearest pixel, or None for parallel
        lines and for intersections outside [0, width] x [0, height].
    """
    a_radians = math.radians(a.angle_in_degrees)
    b_radians = math.radians(b.angle_in_degrees)
    divisor = math.sin(a_radians - b_radians)
    if divisor == 0.0:
        return None

    x = (b.r * math.sin(a_radians) - a.r * math.sin(b_radians)) / divisor
    y = (a.r * math.cos(b_radians) - b.r * math.cos(a_radians)) / divisor

    if x < 0.0 or x > width or y < 0.0 or y > height:
        return None

    return Point(x=round(x), y=round(y))


def find_intersections(lines: Sequence[PolarLine], width: int, height: int) -> List[Point]:
    """In-bounds intersections of every unordered pair of lines."""
    intersections = []
    for a, b in itertools.combinations(lines, 2):
        point = polarline_intersection(a, b, width, height)
        if point is not None:
            intersections.append(point)
    logger.debug(f"Found intersections {intersections}")
    return intersections


def assign_corners_axis(points: Sequence[Point]) -> Quadrilateral:
    """
    Label 4 points assuming the document is roughly axis-aligned.

    The two leftmost points are split by y into top-left and bottom-left;
    of the two rightmost, the one nearer top-left is top-right. Strongly
    rotated documents can be mislabelled.
    """
    sorted_by_x = sorted(points, key=lambda p: p.x)
    logger.debug(f"Sorted by x: {sorted_by_x}")

    top_left, bottom_left = sorted(sorted_by_x[:2], key=lambda p: p.y)

    right_most = sorted(
        [sorted_by_x[3], sorted_by_x[2]],
        key=lambda p: euclidean_distance(p, top_left),
    )
    top_right, bottom_right = right_most

    return Quadrilateral(
        top_left=top_left,
        top_right=top_right,
        bottom_left=bottom_left,
        bottom_right=bottom_right,
    )


def _angular_gap(a: float, b: float) -> float:
    gap = abs(a - b) % (2 * math.pi)
    return min(gap, 2 * math.pi - gap)


def assign_corners_centroid(points: Sequence[Point]) -> Quadrilateral:
    """
    Label 4 points by their angle around the centroid.

    Points are walked clockwise (on screen) starting from the one whose
    direction from the centroid is nearest the up-left diagonal. The
    labelling is consistent under rotation and never produces a
    self-intersecting corner order.
    """
    cx = sum(p.x for p in points) / len(points)
    cy = sum(p.y for p in points) / len(points)

    clockwise = sorted(points, key=lambda p: math.atan2(p.y - cy, p.x - cx))
    start = min(
        range(len(clockwise)),
        key=lambda i: _angular_gap(
            math.atan2(clockwise[i].y - cy, clockwise[i].x - cx), _TOP_LEFT_DIRECTION
        ),
    )
    tl, tr, br, bl = clockwise[start:] + clockwise[:start]

    return Quadrilateral(top_left=tl, top_right=tr, bottom_left=bl, bottom_right=br)


CORNER_STRATEGIES = {
    "axis": assign_corners_axis,
    "centroid": assign_corners_centroid,
}


def assign_corners(points: Sequence[Point], strategy: str = "centroid") -> Quadrilateral:
    """
    Label exactly 4 points as a Quadrilateral.

    Raises:
        ValueError: If there are not exactly 4 points or the strategy is unknown.
    """
    if len(points) != 4:
        raise ValueError(f"Expected exactly 4 points, got {len(points)}")
    if strategy not in CORNER_STRATEGIES:
        raise ValueError(
            f"Invalid corner strategy: {strategy}. Must be one of {list(CORNER_STRATEGIES)}"
        )
    return CORNER_STRATEGIES[strategy](points)

