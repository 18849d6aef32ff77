"""
Unit tests for rectifier module.
"""

import numpy as np
import pytest

from src.common.exceptions import DegenerateGeometryError
from src.common.types import Quadrilateral
from src.scanning.rectifier import (
    calculate_output_size,
    destination_quadrilateral,
    transform_quadrilateral,
)


@pytest.fixture
def trapezoid():
    return Quadrilateral.from_points([(50, 40), (250, 50), (240, 160), (60, 150)])


class TestCalculateOutputSize:
    """Tests for calculate_output_size."""

    def test_rectangle(self):
        quad = Quadrilateral.from_points([(0, 0), (30, 0), (30, 40), (0, 40)])
        assert calculate_output_size(quad) == (30, 40)

    def test_uses_shorter_opposite_edges(self, trapezoid):
        # top ~200.2, bottom ~180.3, left and right ~110.5
        assert calculate_output_size(trapezoid) == (180, 110)


def test_destination_is_upright_at_top_left(trapezoid):
    dest = destination_quadrilateral(trapezoid, 180, 110)
    assert dest.to_list() == [[50, 40], [230, 40], [230, 150], [50, 150]]


class TestTransformQuadrilateral:
    """Tests for transform_quadrilateral."""

    def test_axis_aligned_quad_is_a_crop(self, textured_image):
        quad = Quadrilateral.from_points([(10, 5), (50, 5), (50, 35), (10, 35)])

        result = transform_quadrilateral(textured_image, quad)

        np.testing.assert_array_equal(result, textured_image[5:35, 10:50])

    def test_ratio_scales_quadrilateral(self, textured_image):
        half = Quadrilateral.from_points([(5, 3), (25, 3), (25, 18), (5, 18)])

        result = transform_quadrilateral(textured_image, half, ratio=2.0)

        np.testing.assert_array_equal(result, textured_image[6:36, 10:50])

    def test_output_shape(self, trapezoid):
        image = np.full((200, 300, 3), 128, dtype=np.uint8)
        result = transform_quadrilateral(image, trapezoid)
        assert result.shape == (110, 180, 3)

    def test_document_content(self, document_image, document_corners):
        quad = Quadrilateral.from_points(document_corners)

        result = transform_quadrilateral(document_image, quad, interpolation="linear")

        assert result.shape == (180, 240, 3)
        assert result.mean() > 200

    def test_collinear_corners(self, textured_image):
        quad = Quadrilateral.from_points([(10, 10), (20, 10), (30, 10), (40, 10)])
        with pytest.raises(DegenerateGeometryError):
            transform_quadrilateral(textured_image, quad)

    def test_top_left_outside_image(self, textured_image):
        quad = Quadrilateral.from_points([(50, 40), (70, 40), (70, 60), (50, 60)])
        with pytest.raises(DegenerateGeometryError, match="outside"):
            transform_quadrilateral(textured_image, quad, ratio=2.0)

    def test_coincident_corners(self, textured_image):
        quad = Quadrilateral.from_points([(10, 10)] * 4)
        with pytest.raises(DegenerateGeometryError, match="empty"):
            transform_quadrilateral(textured_image, quad)
