"""
Line clustering for the Scanning module.

A real document edge yields many near-duplicate Hough detections. This
module collapses them into one representative line per physical edge using
a single greedy first-fit pass, and picks the most supported edges.
"""

import logging
from typing import Iterable, List, Tuple

from src.scanning.types import LineCluster, PolarLine

logger = logging.getLogger(__name__)

HALF_TURN = 180
EDGE_COUNT = 4


def radius_tolerance_for(width: int, height: int, ratio: float = 0.05) -> float:
    """Radius tolerance as a fraction of the larger image dimension."""
    return max(width, height) * ratio


def angle_distance(a: int, b: int, wrap: bool = True) -> Tuple[int, bool]:
    """
    Distance between two line angles in degrees.

    Args:
        a: First angle in [0, 180).
        b: Second angle in [0, 180).
        wrap: Measure on the half circle, so 178 and 2 are 4 degrees apart.

    Returns:
        (distance, wrapped) where wrapped is True when the shorter way
        round crosses the 0/180 boundary.
    """
    diff = abs(a - b)
    if wrap and HALF_TURN - diff < diff:
        return HALF_TURN - diff, True
    return diff, False


def _align(line: PolarLine, reference_angle: int, wrap: bool) -> Tuple[int, float]:
    """Express line as (angle, r) on the same side of the wrap as reference_angle."""
    _, wrapped = angle_distance(line.angle_in_degrees, reference_angle, wrap)
    if not wrapped:
        return line.angle_in_degrees, line.r
    if line.angle_in_degrees > reference_angle:
        return line.angle_in_degrees - HALF_TURN, -line.r
    return line.angle_in_degrees + HALF_TURN, -line.r


def _mean_line(members: List[PolarLine], reference_angle: int, wrap: bool) -> PolarLine:
    aligned = [_align(m, reference_angle, wrap) for m in members]
    mean_angle = sum(a for a, _ in aligned) // len(aligned)
    mean_r = sum(r for _, r in aligned) / len(aligned)

    # Back into [0, 180); crossing the boundary flips the sign of r
    if mean_angle < 0:
        mean_angle, mean_r = mean_angle + HALF_TURN, -mean_r
    elif mean_angle >= HALF_TURN:
        mean_angle, mean_r = mean_angle - HALF_TURN, -mean_r
    return PolarLine(angle_in_degrees=mean_angle, r=mean_r)


def cluster_lines(
    lines: Iterable[PolarLine],
    angle_tolerance: int,
    radius_tolerance: float,
    wrap_angles: bool = True,
    sort_lines: bool = True,
) -> List[LineCluster]:
    """
    Group near-duplicate lines into clusters, one per physical edge.

    Each line joins the first cluster whose representative is closer than
    both tolerances (strict comparison); otherwise it starts a new cluster.
    A cluster's representative is the mean of its members: integer (floor)
    mean angle and float mean radius.

    With sort_lines=False the result depends on the input order: the same
    ordered input always produces the same clusters, but a permutation may
    group lines differently. Sorting by (angle, r) first removes that
    dependence.

    Args:
        lines: Detected lines in any order.
        angle_tolerance: Maximum angle distance (exclusive) in degrees.
        radius_tolerance: Maximum radius difference (exclusive) in pixels.
        wrap_angles: Measure angle distance on the half circle.
        sort_lines: Sort the lines by (angle, r) before clustering.

    Returns:
        Clusters in creation order.
    """
    ordered = list(lines)
    if sort_lines:
        ordered.sort(key=lambda l: (l.angle_in_degrees, l.r))

    clusters: List[LineCluster] = []
    for line in ordered:
        for cluster in clusters:
            rep = cluster.representative
            diff, wrapped = angle_distance(line.angle_in_degrees, rep.angle_in_degrees, wrap_angles)
            r = -line.r if wrapped else line.r
            if diff < angle_tolerance and abs(r - rep.r) < radius_tolerance:
                cluster.members.append(line)
                cluster.representative = _mean_line(
                    cluster.members, rep.angle_in_degrees, wrap_angles
                )
                break
        else:
            clusters.append(LineCluster(representative=line, members=[line]))

    logger.debug(
        f"Clustered {len(ordered)} lines into {len(clusters)} clusters: "
        f"{[(c.representative, c.size) for c in clusters]}"
    )
    return clusters


def select_edge_lines(clusters: List[LineCluster], count: int = EDGE_COUNT) -> List[PolarLine]:
    """
    Representatives of the count largest clusters.

    Clusters of equal size keep their creation order.
    """
    ranked = sorted(clusters, key=lambda c: c.size, reverse=True)
    return [c.representative for c in ranked[:count]]
