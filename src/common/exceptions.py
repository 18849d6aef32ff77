"""Custom exceptions for the document scanner.

A missed detection is not an error: it is reported as a ``NOT_FOUND``
result. The exceptions here cover input-contract violations that would
otherwise produce garbage output.
"""

from typing import Optional


class ScanError(ValueError):
    """Base exception for all scanner input-contract violations.

    Attributes:
        message: Human-readable error description
        error_code: Optional error code for programmatic handling
    """

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class InvalidBufferSizeError(ScanError):
    """Raw pixel buffer length does not match the declared dimensions.

    Attributes:
        width: Declared image width
        height: Declared image height
        channels: Declared samples per pixel
        actual: Number of bytes actually received
    """

    def __init__(self, width: int, height: int, channels: int, actual: int):
        expected = width * height * channels
        super().__init__(
            f"Buffer of {actual} bytes does not match {width}x{height}x{channels} "
            f"(expected {expected})",
            error_code="BUFFER_SIZE",
        )
        self.width = width
        self.height = height
        self.channels = channels
        self.actual = actual


class DegenerateGeometryError(ScanError):
    """Control points cannot define a projective mapping.

    Raised for collinear or coincident corners and for quadrilaterals whose
    rectified output would have zero width or height.

    Attributes:
        points: The offending control points, if known
    """

    def __init__(self, message: str, points: Optional[list] = None):
        super().__init__(message, error_code="DEGENERATE_GEOMETRY")
        self.points = points
