"""
Pytest Configuration and Shared Fixtures

This file contains pytest configuration and fixtures that are available
to all test modules.
"""

import pytest


@pytest.fixture
def document_corners():
    """Corners (TL, TR, BR, BL) of the synthetic document."""
    return [(80, 60), (320, 60), (320, 240), (80, 240)]


@pytest.fixture
def document_image(document_corners):
    """Fixture providing a bright document on a dark 400x300 background."""
    import cv2
    import numpy as np

    image = np.full((300, 400, 3), 30, dtype=np.uint8)
    pts = np.array(document_corners, dtype=np.int32)
    cv2.fillPoly(image, [pts], (230, 230, 230))
    return image


@pytest.fixture
def rectangle_lines():
    """Boundary lines of the rectangle (10, 10)-(90, 90) in a 100x100 image."""
    from src.scanning.types import PolarLine

    return [
        PolarLine(angle_in_degrees=0, r=10.0),
        PolarLine(angle_in_degrees=0, r=90.0),
        PolarLine(angle_in_degrees=90, r=10.0),
        PolarLine(angle_in_degrees=90, r=90.0),
    ]


@pytest.fixture
def textured_image():
    """Fixture providing a deterministic random BGR image."""
    import numpy as np

    rng = np.random.default_rng(42)
    return rng.integers(0, 256, size=(60, 80, 3), dtype=np.uint8)
