"""Tests for convex decomposition."""

import math

import pytest

from hitboxer.core.decompose import (
    can_see,
    decompose,
    decompose_with_stats,
    is_reflex,
    split_loops,
    triangulate,
)
from hitboxer.core.geometry import is_convex, polygon_area
from hitboxer.core.optimize import optimize_polygons
from hitboxer.domain import Point


def sawtooth(teeth: int = 50) -> list[Point]:
    """Create a comb with ``teeth`` spikes along its top edge."""
    points = [Point(0, 0), Point(2 * teeth, 0), Point(2 * teeth, 5)]
    for k in range(teeth - 1, -1, -1):
        points.append(Point(2 * k + 1, 10))
        points.append(Point(2 * k, 5))
    return points


@pytest.fixture
def notch() -> list[Point]:
    """Create a square with a V cut into one side."""
    return [Point(0, 0), Point(4, 0), Point(4, 4), Point(2, 2), Point(0, 4)]


@pytest.fixture
def l_shape() -> list[Point]:
    """Create an L-shaped polygon."""
    return [
        Point(0, 0),
        Point(10, 0),
        Point(10, 4),
        Point(4, 4),
        Point(4, 10),
        Point(0, 10),
    ]


@pytest.fixture
def ship_contour() -> list[Point]:
    """Create a simplified 11-point hull outline closed on its first point."""
    coords = [
        (32, 7), (41, 6), (61, 18), (64, 26), (63, 47), (59, 57),
        (39, 67), (18, 62), (6, 44), (6, 26), (9, 21), (32, 7),
    ]
    return [Point(x, y) for x, y in coords]


@pytest.fixture
def touching() -> list[Point]:
    """Create two triangles joined where a vertex rests on the opposite edge."""
    return [Point(0, 0), Point(10, 0), Point(10, 10), Point(5, 0), Point(0, 10)]


@pytest.fixture
def example_contour() -> list[Point]:
    """Create an 11-point simplified sprite outline."""
    return [
        Point(12, 2),
        Point(20, 4),
        Point(26, 10),
        Point(22, 14),
        Point(28, 22),
        Point(20, 28),
        Point(14, 24),
        Point(8, 28),
        Point(3, 20),
        Point(8, 14),
        Point(4, 8),
    ]


class TestReflex:
    """Tests for reflex vertex detection."""

    def test_notch_vertex_is_reflex(self, notch: list[Point]) -> None:
        """Test that only the V vertex is reflex."""
        assert [is_reflex(notch, i) for i in range(len(notch))] == [
            False,
            False,
            False,
            True,
            False,
        ]


class TestCanSee:
    """Tests for vertex visibility."""

    def test_diagonal_through_interior(self, notch: list[Point]) -> None:
        """Test a diagonal that stays inside the polygon."""
        assert can_see(notch, 3, 1)
        assert can_see(notch, 3, 0)

    def test_diagonal_outside(self, notch: list[Point]) -> None:
        """Test a diagonal that leaves through the notch."""
        assert not can_see(notch, 2, 4)

    def test_same_vertex(self, notch: list[Point]) -> None:
        """Test that a vertex does not see itself."""
        assert not can_see(notch, 1, 1)


class TestDecompose:
    """Tests for decompose and decompose_with_stats."""

    def test_convex_input_returned_unchanged(self) -> None:
        """Test that a convex 10-gon comes back as the only piece."""
        decagon = [
            Point(round(10 * math.cos(2 * math.pi * k / 10), 3), round(10 * math.sin(2 * math.pi * k / 10), 3))
            for k in range(10)
        ]
        pieces, stats = decompose_with_stats(decagon)
        assert pieces == [decagon]
        assert stats.splits == 0

    def test_notch_split(self, notch: list[Point]) -> None:
        """Test the single cut through the notch vertex."""
        pieces = decompose(notch)
        assert pieces == [
            [Point(2, 2), Point(0, 4), Point(0, 0), Point(4, 0)],
            [Point(4, 0), Point(4, 4), Point(2, 2)],
        ]

    def test_pieces_are_convex(self, l_shape: list[Point]) -> None:
        """Test every piece of an L is convex."""
        pieces = decompose(l_shape)
        assert len(pieces) >= 2
        assert all(is_convex(piece) for piece in pieces)

    def test_area_preserved(self, l_shape: list[Point], notch: list[Point]) -> None:
        """Test that pieces tile the input polygon."""
        for polygon in (l_shape, notch):
            pieces = decompose(polygon)
            total = sum(polygon_area(piece) for piece in pieces)
            assert total == pytest.approx(polygon_area(polygon))

    def test_reversed_winding(self, l_shape: list[Point]) -> None:
        """Test that negative winding input is normalized."""
        pieces = decompose(list(reversed(l_shape)))
        assert all(is_convex(piece) for piece in pieces)
        assert sum(polygon_area(p) for p in pieces) == pytest.approx(polygon_area(l_shape))

    def test_example_contour(self, example_contour: list[Point]) -> None:
        """Test the invariants on a realistic sprite outline."""
        pieces, stats = decompose_with_stats(example_contour)
        assert pieces
        assert all(len(piece) >= 3 for piece in pieces)
        assert sum(len(piece) for piece in pieces) >= 3 * len(pieces)
        assert stats.calls == 2 * stats.splits + 1

    def test_sawtooth_needs_a_piece_per_tooth(self) -> None:
        """Test a comb with 49 reflex valleys."""
        comb = sawtooth(50)
        pieces, stats = decompose_with_stats(comb)
        assert len(pieces) >= 50
        assert all(len(piece) >= 3 for piece in pieces)
        assert stats.calls == 2 * stats.splits + 1

    def test_depth_cap_bounds_work(self) -> None:
        """Test that the depth cap stops splitting early."""
        pieces, stats = decompose_with_stats(sawtooth(50), max_depth=3)
        assert stats.max_depth_reached <= 4
        assert stats.calls <= 31
        assert stats.depth_limit_hits > 0
        assert stats.calls == 2 * stats.splits + 1
        assert all(len(piece) >= 3 for piece in pieces)

    def test_duplicate_points_removed(self, notch: list[Point]) -> None:
        """Test that repeated vertices do not create degenerate pieces."""
        noisy = [notch[0], notch[0], *notch[1:], notch[0]]
        pieces = decompose(noisy)
        assert all(len(piece) >= 3 for piece in pieces)
        assert sum(polygon_area(p) for p in pieces) == pytest.approx(polygon_area(notch))

    def test_degenerate_input(self) -> None:
        """Test inputs with too few points."""
        assert decompose([]) == []
        assert decompose([Point(0, 0), Point(1, 1)]) == []

    def test_closed_contour(self, ship_contour: list[Point]) -> None:
        """Test that a repeated closing point is dropped before the convexity check."""
        pieces, stats = decompose_with_stats(ship_contour)

        assert pieces == [ship_contour[:-1]]
        assert len(set(pieces[0])) == 11
        assert stats.calls == 1

        optimized = optimize_polygons(pieces, tolerance=2.0)
        assert len(optimized) == 1
        assert is_convex(optimized[0])
        assert len(optimized[0]) >= 3

    def test_no_cut_falls_back_to_triangles(self, touching: list[Point]) -> None:
        """Test that a piece with no valid cut is triangulated instead of kept."""
        pieces, stats = decompose_with_stats(touching)

        assert stats.unsplittable == 1
        assert pieces == [
            [Point(10, 0), Point(10, 10), Point(5, 0)],
            [Point(5, 0), Point(0, 10), Point(0, 0)],
        ]
        assert all(is_convex(piece) for piece in pieces)


class TestSplitLoops:
    """Tests for split_loops."""

    def test_pinch_vertex(self) -> None:
        """Test that a contour through one vertex twice becomes two loops."""
        bowtie = [Point(0, 0), Point(2, 2), Point(4, 0), Point(4, 4), Point(2, 2), Point(0, 4)]
        assert split_loops(bowtie) == [
            [Point(0, 0), Point(2, 2), Point(0, 4)],
            [Point(2, 2), Point(4, 0), Point(4, 4)],
        ]

    def test_spur_is_dropped(self) -> None:
        """Test that an out-and-back spur leaves no loop of its own."""
        contour = [Point(0, 0), Point(4, 0), Point(4, 4), Point(6, 6), Point(4, 4), Point(0, 4)]
        assert split_loops(contour) == [[Point(0, 0), Point(4, 0), Point(4, 4), Point(0, 4)]]

    def test_simple_contour_unchanged(self, ship_contour: list[Point]) -> None:
        """Test that a simple contour comes back as one loop without its closing point."""
        assert split_loops(ship_contour) == [ship_contour[:-1]]

    def test_degenerate(self) -> None:
        """Test inputs with too few distinct points."""
        assert split_loops([]) == []
        assert split_loops([Point(0, 0), Point(1, 0), Point(0, 0)]) == []


class TestTriangulate:
    """Tests for the ear-clipping fallback."""

    def test_l_shape(self, l_shape: list[Point]) -> None:
        """Test that ear clipping covers a simple polygon."""
        triangles = triangulate(l_shape)
        assert len(triangles) == len(l_shape) - 2
        assert sum(polygon_area(t) for t in triangles) == pytest.approx(polygon_area(l_shape))

    def test_touching_vertex(self, touching: list[Point]) -> None:
        """Test a vertex lying on another edge."""
        triangles = triangulate(touching)
        assert all(len(t) == 3 and polygon_area(t) > 0 for t in triangles)
        assert sum(polygon_area(t) for t in triangles) == pytest.approx(50)
