"""
Data types and structures for the Scanning module.

Provides containers for detected lines, line clusters and pipeline results.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from src.common.types import Quadrilateral


class DetectionStatus(Enum):
    """Quadrilateral detection outcomes."""

    FOUND = "FOUND"
    NOT_FOUND = "NOT_FOUND"


class NotFoundReason(Enum):
    """Why the pipeline stopped without a quadrilateral."""

    NONE = "None"  # Quadrilateral found
    TOO_FEW_CLUSTERS = "Too Few Clusters"  # Fewer than 4 distinct edges
    INTERSECTION_COUNT = "Intersection Count"  # Edges do not close inside the image


@dataclass(frozen=True)
class PolarLine:
    """
    An infinite line ``x*cos(theta) + y*sin(theta) = r``.

    Attributes:
        angle_in_degrees: Integer angle in [0, 180).
        r: Signed radial offset from the image origin in pixels.
    """

    angle_in_degrees: int
    r: float


@dataclass
class LineCluster:
    """
    Near-duplicate Hough detections of the same physical edge.

    Attributes:
        representative: Running mean of the member angles and radii.
        members: Lines merged into the cluster, in merge order.
    """

    representative: PolarLine
    members: List[PolarLine] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.members)


@dataclass
class DetectionResult:
    """
    Output from the detection pipeline.

    Attributes:
        status: FOUND or NOT_FOUND.
        quadrilateral: The resolved document corners (None if not found).
        reason: Why detection stopped early, NONE when found.
        cluster_count: Number of line clusters formed.
        intersection_count: In-bounds intersections among the top 4 edges.
        lines: Raw Hough lines the clusters were built from.
    """

    status: DetectionStatus
    quadrilateral: Optional[Quadrilateral]
    reason: NotFoundReason
    cluster_count: int = 0
    intersection_count: int = 0
    lines: List[PolarLine] = field(default_factory=list)

    def is_found(self) -> bool:
        return self.status == DetectionStatus.FOUND

    def get_message(self) -> str:
        """Get human-readable summary."""
        if self.is_found():
            return f"Found quadrilateral {self.quadrilateral.to_list()}"

        reason_messages = {
            NotFoundReason.TOO_FEW_CLUSTERS: (
                f"Found {self.cluster_count} line clusters, expected at least 4"
            ),
            NotFoundReason.INTERSECTION_COUNT: (
                f"Found {self.intersection_count} intersections inside the image, "
                "expected exactly 4"
            ),
        }
        return reason_messages.get(self.reason, f"Not found: {self.reason.value}")


@dataclass
class TransformResult:
    """
    Rectified document as handed back to a host application.

    Attributes:
        width: Output width in pixels.
        height: Output height in pixels.
        buffer: Row-major RGBA samples, width * height * 4 bytes.
    """

    width: int
    height: int
    buffer: bytes
