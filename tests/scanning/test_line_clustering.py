"""
Unit tests for line_clustering module.
"""

import pytest

from src.scanning.line_clustering import (
    angle_distance,
    cluster_lines,
    radius_tolerance_for,
    select_edge_lines,
)
from src.scanning.types import LineCluster, PolarLine


def line(angle, r):
    return PolarLine(angle_in_degrees=angle, r=float(r))


def member_sets(clusters):
    return [set(c.members) for c in clusters]


class TestAngleDistance:
    """Tests for angle_distance."""

    def test_plain_difference(self):
        assert angle_distance(10, 25) == (15, False)

    def test_wraps_across_zero(self):
        assert angle_distance(178, 2) == (4, True)

    def test_no_wrap_when_disabled(self):
        assert angle_distance(178, 2, wrap=False) == (176, False)

    def test_right_angle_does_not_wrap(self):
        assert angle_distance(0, 90) == (90, False)


class TestClusterLines:
    """Tests for cluster_lines."""

    def test_near_duplicates_merge(self):
        clusters = cluster_lines(
            [line(0, 10), line(2, 12), line(1, 11)], angle_tolerance=10, radius_tolerance=5
        )

        assert len(clusters) == 1
        assert clusters[0].size == 3
        assert clusters[0].representative == line(1, 11)

    def test_mean_angle_uses_floor_division(self):
        clusters = cluster_lines(
            [line(0, 10), line(1, 10)], angle_tolerance=10, radius_tolerance=5
        )
        assert clusters[0].representative.angle_in_degrees == 0
        assert clusters[0].representative.r == pytest.approx(10.0)

    def test_tolerances_are_exclusive(self):
        clusters = cluster_lines(
            [line(0, 10), line(10, 10), line(0, 15)],
            angle_tolerance=10,
            radius_tolerance=5,
        )
        assert len(clusters) == 3

    def test_fewer_than_four_lines_give_fewer_than_four_clusters(self):
        lines = [line(0, 10), line(90, 10), line(0, 90)]
        assert len(cluster_lines(lines, angle_tolerance=10, radius_tolerance=5)) < 4

    def test_rectangle_edges_stay_separate(self, rectangle_lines):
        clusters = cluster_lines(rectangle_lines, angle_tolerance=10, radius_tolerance=5)
        assert len(clusters) == 4

    def test_deterministic_for_fixed_order(self):
        lines = [line(5, 40), line(88, 12), line(3, 44), line(91, 10), line(45, 70)]
        first = cluster_lines(lines, 10, 5, sort_lines=False)
        second = cluster_lines(lines, 10, 5, sort_lines=False)
        assert first == second

    def test_unsorted_grouping_depends_on_order(self):
        a, b, c = line(0, 0), line(8, 0), line(16, 0)

        forward = cluster_lines([a, b, c], 10, 20, wrap_angles=False, sort_lines=False)
        backward = cluster_lines([c, b, a], 10, 20, wrap_angles=False, sort_lines=False)

        assert member_sets(forward) == [{a, b}, {c}]
        assert member_sets(backward) == [{c, b}, {a}]

    def test_sorted_grouping_ignores_order(self):
        a, b, c = line(0, 0), line(8, 0), line(16, 0)

        forward = cluster_lines([a, b, c], 10, 20, wrap_angles=False)
        backward = cluster_lines([c, b, a], 10, 20, wrap_angles=False)

        assert member_sets(forward) == member_sets(backward) == [{a, b}, {c}]

    def test_wrapped_angles_merge(self):
        clusters = cluster_lines([line(178, 50), line(2, -50)], 10, 5)

        assert len(clusters) == 1
        rep = clusters[0].representative
        assert rep.angle_in_degrees == 0
        assert rep.r == pytest.approx(-50.0)

    def test_wrapped_angles_merge_regardless_of_sorting(self):
        unsorted = cluster_lines([line(178, 50), line(2, -50)], 10, 5, sort_lines=False)
        assert len(unsorted) == 1
        assert unsorted[0].representative == line(0, -50)

    def test_wrapped_mean_below_zero_renormalised(self):
        clusters = cluster_lines([line(1, -50), line(177, 50)], 10, 5, sort_lines=False)

        assert len(clusters) == 1
        assert clusters[0].representative == line(179, 50)

    def test_wrapping_disabled_keeps_boundary_lines_apart(self):
        clusters = cluster_lines(
            [line(178, 50), line(2, -50)], 10, 5, wrap_angles=False, sort_lines=False
        )
        assert len(clusters) == 2

    def test_line_joins_first_matching_cluster_only(self):
        lines = [line(0, 0), line(0, 8), line(0, 4)]
        clusters = cluster_lines(lines, 10, 5, sort_lines=False)

        assert [c.size for c in clusters] == [2, 1]
        assert clusters[0].members == [line(0, 0), line(0, 4)]


class TestSelectEdgeLines:
    """Tests for select_edge_lines."""

    def test_largest_clusters_first_with_stable_ties(self):
        clusters = [
            LineCluster(representative=line(i * 20, i), members=[line(i * 20, i)] * size)
            for i, size in enumerate([1, 3, 3, 2, 1])
        ]

        selected = select_edge_lines(clusters)

        assert selected == [line(20, 1), line(40, 2), line(60, 3), line(0, 0)]

    def test_fewer_clusters_than_requested(self):
        clusters = [LineCluster(representative=line(0, 1), members=[line(0, 1)])]
        assert select_edge_lines(clusters) == [line(0, 1)]


def test_radius_tolerance_uses_larger_dimension():
    assert radius_tolerance_for(400, 300) == pytest.approx(20.0)
    assert radius_tolerance_for(100, 800, ratio=0.1) == pytest.approx(80.0)
