"""
Unit tests for the OpenCV adapters.
"""

import math

import numpy as np
import pytest

from src.common.exceptions import DegenerateGeometryError
from src.scanning import image_ops
from src.scanning.types import PolarLine


class TestToGrayscale:
    """Tests for to_grayscale."""

    def test_two_dimensional_passthrough(self):
        gray = np.zeros((4, 5), dtype=np.uint8)
        assert image_ops.to_grayscale(gray) is gray

    @pytest.mark.parametrize("channels", [1, 3, 4])
    def test_supported_channels(self, channels):
        image = np.full((4, 5, channels), 200, dtype=np.uint8)
        gray = image_ops.to_grayscale(image)
        assert gray.shape == (4, 5)
        assert gray.dtype == np.uint8

    def test_unsupported_channels(self):
        with pytest.raises(ValueError, match="Unsupported channel count"):
            image_ops.to_grayscale(np.zeros((4, 5, 2), dtype=np.uint8))


def test_canny_is_binary(document_image):
    edges = image_ops.canny(image_ops.to_grayscale(document_image), 10, 80)
    assert edges.shape == document_image.shape[:2]
    assert set(np.unique(edges)) <= {0, 255}
    assert edges.any()


class TestDetectLines:
    """Tests for detect_lines."""

    def test_blank_image(self):
        assert image_ops.detect_lines(np.zeros((100, 100), dtype=np.uint8), 60, 8) == []

    def test_vertical_line(self):
        edges = np.zeros((100, 100), dtype=np.uint8)
        edges[:, 50] = 255

        lines = image_ops.detect_lines(edges, 60, 8)

        assert lines
        strongest = lines[0]
        assert strongest.angle_in_degrees == 0
        assert abs(strongest.r) == pytest.approx(50, abs=1)

    def test_angles_in_half_turn(self, document_image):
        edges = image_ops.canny(image_ops.to_grayscale(document_image), 10, 80)
        for line in image_ops.detect_lines(edges, 60, 8):
            assert 0 <= line.angle_in_degrees < 180

    def test_half_turn_maps_to_zero_with_flipped_radius(self):
        assert image_ops._to_polar_line(50.0, math.pi) == PolarLine(0, -50.0)

    def test_right_angle(self):
        assert image_ops._to_polar_line(20.0, math.pi / 2) == PolarLine(90, 20.0)


class TestSolveHomography:
    """Tests for solve_homography."""

    def test_identity(self):
        square = [[0, 0], [10, 0], [10, 10], [0, 10]]
        matrix = image_ops.solve_homography(square, square)
        np.testing.assert_allclose(matrix, np.eye(3), atol=1e-6)

    def test_maps_control_points(self):
        src = np.array([[5, 5], [40, 8], [38, 30], [6, 28]], dtype=np.float32)
        dst = np.array([[0, 0], [30, 0], [30, 20], [0, 20]], dtype=np.float32)

        matrix = image_ops.solve_homography(src, dst)

        homogeneous = np.hstack([src, np.ones((4, 1))]) @ matrix.T
        projected = homogeneous[:, :2] / homogeneous[:, 2:]
        np.testing.assert_allclose(projected, dst, atol=1e-3)

    def test_collinear_source(self):
        src = [[0, 0], [10, 0], [20, 0], [30, 0]]
        dst = [[0, 0], [10, 0], [10, 10], [0, 10]]
        with pytest.raises(DegenerateGeometryError, match="Collinear"):
            image_ops.solve_homography(src, dst)

    def test_wrong_point_count(self):
        with pytest.raises(DegenerateGeometryError):
            image_ops.solve_homography([[0, 0], [1, 0], [1, 1]], [[0, 0], [1, 0], [1, 1]])


class TestWarp:
    """Tests for warp."""

    def test_unmapped_pixels_get_fill_color(self, textured_image):
        shift = np.array([[1, 0, 10], [0, 1, 0], [0, 0, 1]], dtype=np.float64)

        result = image_ops.warp(textured_image, shift, fill_color=(0, 0, 255, 255))

        assert result.shape == textured_image.shape
        assert (result[:, :10] == [0, 0, 255]).all()
        np.testing.assert_array_equal(result[:, 10:], textured_image[:, :-10])

    def test_invalid_interpolation(self, textured_image):
        with pytest.raises(ValueError, match="Invalid interpolation"):
            image_ops.warp(textured_image, np.eye(3), interpolation="lanczos")


class TestCrop:
    """Tests for crop."""

    def test_inside(self, textured_image):
        np.testing.assert_array_equal(
            image_ops.crop(textured_image, 10, 5, 20, 15), textured_image[5:20, 10:30]
        )

    def test_clamped_to_bounds(self, textured_image):
        assert image_ops.crop(textured_image, 70, 50, 40, 40).shape == (10, 10, 3)
        assert image_ops.crop(textured_image, -5, -5, 8, 8).shape == (8, 8, 3)

    def test_returns_copy(self, textured_image):
        cropped = image_ops.crop(textured_image, 0, 0, 5, 5)
        cropped[:] = 0
        assert textured_image[:5, :5].any()


def test_rgba_bgra_swap():
    rgba = np.array([[[1, 2, 3, 4]]], dtype=np.uint8)
    bgra = image_ops.rgba_to_bgra(rgba)
    assert bgra.tolist() == [[[3, 2, 1, 4]]]
    assert image_ops.bgra_to_rgba(bgra).tolist() == rgba.tolist()
