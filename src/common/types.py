"""
Common type definitions for the document scanner.

This module provides Pydantic-based value types for the data shared across
the scanning pipeline: image buffers, pixel points and the four-cornered
document outline.

These types provide:
- Validation and conversion of raw inputs
- Immutable value semantics (copied freely, never shared)
- Geometry helpers (scale, translate, area, edge lengths)
- Integration with numpy arrays and OpenCV
"""

import math
from typing import List, Sequence, Tuple, Union

import numpy as np
from pydantic import BaseModel, Field, field_validator

from src.common.exceptions import InvalidBufferSizeError

Number = Union[int, float, np.integer, np.floating]


class ImageBuffer(BaseModel):
    """
    Type-safe wrapper for image arrays (numpy.ndarray).

    Images handed to the scanner are validated here before any OpenCV call
    sees them. Raw pixel buffers coming from a host application are wrapped
    with :meth:`from_raw`, which is where buffer size mismatches surface.

    Attributes:
        data: The underlying numpy array containing image data.
            Shape: (H, W, C) for color images, (H, W) for grayscale.
            Dtype: uint8 (0-255).

    Example:
        >>> rgba = bytes(4 * 640 * 480)
        >>> img = ImageBuffer.from_raw(640, 480, rgba)
        >>> print(img.width, img.height, img.channels)  # 640 480 4
    """

    data: np.ndarray = Field(..., description="Image data as numpy array")

    model_config = {"arbitrary_types_allowed": True}

    @field_validator("data")
    @classmethod
    def _validate_image(cls, v: np.ndarray) -> np.ndarray:
        """
        Validate that the numpy array is a usable 8-bit image.

        Raises:
            ValueError: If array is not a valid image format.
        """
        if not isinstance(v, np.ndarray):
            raise ValueError(f"Expected numpy.ndarray, got {type(v)}")

        if v.size == 0:
            raise ValueError("Image array is empty")

        if v.ndim not in (2, 3):
            raise ValueError(
                f"Expected 2D (grayscale) or 3D (color) image, got shape {v.shape}"
            )

        if v.ndim == 3 and v.shape[2] not in (1, 3, 4):
            raise ValueError(
                f"Expected 1, 3, or 4 channels for color image, got {v.shape[2]}"
            )

        if v.dtype != np.uint8:
            raise ValueError(f"Expected uint8 dtype for image, got {v.dtype}")

        return v

    @classmethod
    def from_raw(
        cls, width: int, height: int, buffer: Union[bytes, bytearray, np.ndarray], channels: int = 4
    ) -> "ImageBuffer":
        """
        Wrap a flat, row-major pixel buffer as an (H, W, C) image.

        Args:
            width: Image width in pixels.
            height: Image height in pixels.
            buffer: Raw interleaved 8-bit samples (RGBA by default).
            channels: Samples per pixel.

        Returns:
            ImageBuffer holding a copy of the buffer.

        Raises:
            InvalidBufferSizeError: If the buffer length does not match
                width * height * channels.
        """
        raw = np.frombuffer(bytes(buffer), dtype=np.uint8)
        expected = width * height * channels
        if width <= 0 or height <= 0 or raw.size != expected:
            raise InvalidBufferSizeError(
                width=width, height=height, channels=channels, actual=raw.size
            )
        return cls(data=raw.reshape((height, width, channels)).copy())

    @property
    def shape(self) -> Tuple[int, ...]:
        """Get image shape (H, W) or (H, W, C)."""
        return self.data.shape

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def channels(self) -> int:
        """Get number of channels (1 for grayscale, 3 for BGR, 4 for BGRA/RGBA)."""
        if self.data.ndim == 2:
            return 1
        return int(self.data.shape[2])

    def to_numpy(self) -> np.ndarray:
        return self.data

    def __repr__(self) -> str:
        return f"ImageBuffer(shape={self.shape}, dtype={self.data.dtype})"


class Point(BaseModel):
    """
    A pixel coordinate pair of non-negative integers.

    Float inputs are truncated toward zero, which is how intersections and
    scaled corners land on the pixel grid.

    Example:
        >>> Point(x=10, y=20).scale(1.5)
        Point(x=15, y=30)
    """

    x: int = Field(..., ge=0, description="X-coordinate (column)")
    y: int = Field(..., ge=0, description="Y-coordinate (row)")

    model_config = {"frozen": True}

    @field_validator("x", "y", mode="before")
    @classmethod
    def _truncate_to_int(cls, v: Number) -> int:
        if isinstance(v, bool):
            raise ValueError("Coordinate must be numeric, got bool")
        if isinstance(v, (int, np.integer)):
            return int(v)
        if isinstance(v, (float, np.floating)):
            if not math.isfinite(v):
                raise ValueError(f"Coordinate must be finite, got {v}")
            return int(v)
        raise ValueError(f"Coordinate must be numeric, got {type(v)}")

    @classmethod
    def from_sequence(cls, coords: Sequence[Number]) -> "Point":
        """Create Point from a 2-element sequence or array [x, y]."""
        if len(coords) != 2:
            raise ValueError(f"Expected 2 coordinates, got {len(coords)}")
        return cls(x=coords[0], y=coords[1])

    def scale(self, ratio: float) -> "Point":
        """Multiply both coordinates by ratio, truncating toward zero."""
        return Point(x=self.x * ratio, y=self.y * ratio)

    def translate(self, offset: "Point") -> "Point":
        return Point(x=self.x + offset.x, y=self.y + offset.y)

    def distance_to(self, other: "Point") -> float:
        return euclidean_distance(self, other)

    def to_tuple(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def to_numpy(self, dtype: type = np.float32) -> np.ndarray:
        return np.array([self.x, self.y], dtype=dtype)

    def __repr__(self) -> str:
        return f"Point(x={self.x}, y={self.y})"


def euclidean_distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points, in floating point."""
    return math.hypot(float(a.x) - float(b.x), float(a.y) - float(b.y))


class Quadrilateral(BaseModel):
    """
    The four named corners of a document outline.

    The corners are expected, but not required, to form a simple polygon
    approximating a rectangle under perspective distortion.

    Attributes:
        top_left: Top-left corner.
        top_right: Top-right corner.
        bottom_left: Bottom-left corner.
        bottom_right: Bottom-right corner.

    Example:
        >>> quad = Quadrilateral.from_points([(0, 0), (10, 0), (10, 10), (0, 10)])
        >>> quad.area()
        100.0
    """

    top_left: Point
    top_right: Point
    bottom_left: Point
    bottom_right: Point

    model_config = {"frozen": True}

    @classmethod
    def from_points(cls, points: Sequence[Sequence[Number]]) -> "Quadrilateral":
        """
        Build from 4 points given in control-point order [TL, TR, BR, BL].

        Raises:
            ValueError: If points does not hold exactly 4 entries.
        """
        if len(points) != 4:
            raise ValueError(f"Expected exactly 4 points, got {len(points)}")
        tl, tr, br, bl = (Point.from_sequence(p) for p in points)
        return cls(top_left=tl, top_right=tr, bottom_left=bl, bottom_right=br)

    def corners(self) -> List[Point]:
        """Corners in control-point order: TL, TR, BR, BL."""
        return [self.top_left, self.top_right, self.bottom_right, self.bottom_left]

    def scale(self, ratio: float) -> "Quadrilateral":
        return Quadrilateral(
            top_left=self.top_left.scale(ratio),
            top_right=self.top_right.scale(ratio),
            bottom_left=self.bottom_left.scale(ratio),
            bottom_right=self.bottom_right.scale(ratio),
        )

    def translate(self, offset: Point) -> "Quadrilateral":
        return Quadrilateral(
            top_left=self.top_left.translate(offset),
            top_right=self.top_right.translate(offset),
            bottom_left=self.bottom_left.translate(offset),
            bottom_right=self.bottom_right.translate(offset),
        )

    def area(self) -> float:
        """
        Signed area by the shoelace formula over TL, TR, BR, BL.

        Positive for clockwise corners in image coordinates (y pointing
        down). The magnitude is the true area only for simple polygons.
        """
        pts = self.corners()
        total = 0
        for i, p in enumerate(pts):
            q = pts[(i + 1) % 4]
            total += p.x * q.y - p.y * q.x
        return 0.5 * total

    def edge_lengths(self) -> Tuple[float, float, float, float]:
        """Return (top, right, bottom, left) edge lengths."""
        return (
            self.top_left.distance_to(self.top_right),
            self.top_right.distance_to(self.bottom_right),
            self.bottom_right.distance_to(self.bottom_left),
            self.bottom_left.distance_to(self.top_left),
        )

    def as_control_points(self) -> np.ndarray:
        """Corners as a float32 (4, 2) array in TL, TR, BR, BL order."""
        return np.array([p.to_tuple() for p in self.corners()], dtype=np.float32)

    def to_list(self) -> List[List[int]]:
        return [list(p.to_tuple()) for p in self.corners()]
