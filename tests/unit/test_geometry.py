"""Tests for geometric primitives."""

import pytest

from hitboxer.core.geometry import (
    bounding_box,
    cross,
    is_convex,
    is_left,
    is_right,
    line_intersection,
    polygon_area,
    segments_intersect,
    signed_area,
    squared_distance,
    squared_segment_distance,
)
from hitboxer.domain import Point


@pytest.fixture
def square() -> list[Point]:
    """Create a 2x2 square with positive winding."""
    return [Point(0, 0), Point(2, 0), Point(2, 2), Point(0, 2)]


class TestOrientation:
    """Tests for cross product and side predicates."""

    def test_cross_sign(self) -> None:
        """Test the sign of the cross product."""
        assert cross(Point(0, 0), Point(1, 0), Point(0, 1)) > 0
        assert cross(Point(0, 0), Point(1, 0), Point(0, -1)) < 0
        assert cross(Point(0, 0), Point(1, 0), Point(5, 0)) == 0

    def test_left_right(self) -> None:
        """Test the strict side predicates."""
        a, b = Point(0, 0), Point(1, 0)
        assert is_left(a, b, Point(0, 1))
        assert is_right(a, b, Point(0, -1))
        assert not is_left(a, b, Point(2, 0))
        assert not is_right(a, b, Point(2, 0))


class TestArea:
    """Tests for area calculations."""

    def test_signed_area_positive_winding(self, square: list[Point]) -> None:
        """Test signed area of the traced winding."""
        assert signed_area(square) == 4.0

    def test_signed_area_reversed(self, square: list[Point]) -> None:
        """Test that reversing the winding negates the area."""
        assert signed_area(list(reversed(square))) == -4.0

    def test_degenerate(self) -> None:
        """Test that fewer than three points have no area."""
        assert signed_area([Point(0, 0), Point(1, 1)]) == 0.0

    def test_polygon_area_absolute(self, square: list[Point]) -> None:
        """Test the unsigned area."""
        assert polygon_area(list(reversed(square))) == 4.0


class TestConvexity:
    """Tests for is_convex."""

    def test_square_is_convex(self, square: list[Point]) -> None:
        """Test a square in either winding."""
        assert is_convex(square)
        assert is_convex(list(reversed(square)))

    def test_notch_is_not_convex(self) -> None:
        """Test a polygon with one reflex vertex."""
        polygon = [Point(0, 0), Point(4, 0), Point(4, 4), Point(2, 2), Point(0, 4)]
        assert not is_convex(polygon)

    def test_collinear_points_ignored(self) -> None:
        """Test that collinear runs do not break convexity."""
        polygon = [Point(0, 0), Point(1, 0), Point(2, 0), Point(2, 2), Point(0, 2)]
        assert is_convex(polygon)

    def test_small_inputs_are_convex(self) -> None:
        """Test inputs with fewer than three points."""
        assert is_convex([])
        assert is_convex([Point(0, 0)])
        assert is_convex([Point(0, 0), Point(1, 1)])

    def test_all_collinear_is_convex(self) -> None:
        """Test that a flat sequence has no conflicting turn."""
        assert is_convex([Point(0, 0), Point(1, 0), Point(2, 0)])


class TestDistances:
    """Tests for distance helpers."""

    def test_squared_distance(self) -> None:
        """Test squared point distance."""
        assert squared_distance(Point(0, 0), Point(3, 4)) == 25

    def test_segment_distance_projection(self) -> None:
        """Test distance to the segment interior."""
        assert squared_segment_distance(Point(1, 1), Point(0, 0), Point(2, 0)) == 1.0

    def test_segment_distance_clamped(self) -> None:
        """Test that the projection is clamped to the endpoints."""
        assert squared_segment_distance(Point(4, 0), Point(0, 0), Point(2, 0)) == 4
        assert squared_segment_distance(Point(-3, 0), Point(0, 0), Point(2, 0)) == 9

    def test_zero_length_segment(self) -> None:
        """Test that a zero-length segment acts as a point."""
        assert squared_segment_distance(Point(3, 4), Point(0, 0), Point(0, 0)) == 25


class TestIntersections:
    """Tests for line and segment intersection."""

    def test_line_intersection(self) -> None:
        """Test crossing diagonals."""
        p = line_intersection(Point(0, 0), Point(2, 2), Point(0, 2), Point(2, 0))
        assert p == Point(1.0, 1.0)

    def test_line_intersection_beyond_segments(self) -> None:
        """Test that lines are infinite."""
        p = line_intersection(Point(0, 0), Point(1, 0), Point(5, 1), Point(5, 2))
        assert p is not None
        assert p.x == pytest.approx(5.0)
        assert p.y == pytest.approx(0.0)

    def test_parallel_lines(self) -> None:
        """Test that parallel lines have no intersection."""
        assert line_intersection(Point(0, 0), Point(1, 0), Point(0, 1), Point(1, 1)) is None

    def test_segments_cross(self) -> None:
        """Test crossing segments."""
        assert segments_intersect(Point(0, 0), Point(2, 2), Point(0, 2), Point(2, 0))

    def test_segments_apart(self) -> None:
        """Test segments that do not reach each other."""
        assert not segments_intersect(Point(0, 0), Point(1, 1), Point(3, 0), Point(2, 1))

    def test_segments_touching(self) -> None:
        """Test that touching at an endpoint counts."""
        assert segments_intersect(Point(0, 0), Point(2, 0), Point(2, 0), Point(2, 2))

    def test_parallel_segments(self) -> None:
        """Test that parallel segments never intersect."""
        assert not segments_intersect(Point(0, 0), Point(2, 0), Point(1, 0), Point(3, 0))


class TestBoundingBox:
    """Tests for bounding_box."""

    def test_bounding_box(self) -> None:
        """Test the extent of a point set."""
        points = [Point(3, 1), Point(-1, 4), Point(2, -2)]
        assert bounding_box(points) == (-1, -2, 3, 4)

    def test_empty(self) -> None:
        """Test the extent of nothing."""
        assert bounding_box([]) == (0.0, 0.0, 0.0, 0.0)
