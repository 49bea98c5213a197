"""Convex decomposition of simple polygons (Bayazit's algorithm).

Splits a possibly non-convex simple polygon into a small set of convex pieces
using fast approximate convex decomposition (FACD): find a reflex vertex, cut
from it to the best vertex it can see (or to a Steiner point when no vertex
lies in the cut's cone), and repeat on both halves.

Vertices live in an append-only arena. Sub-polygons are tuples of arena
indices, so splitting never copies points and Steiner points are simply
appended to the arena. Sub-polygons are processed from an explicit work stack
with their depth attached, which makes the depth cap a hard bound.

Key functions:
- decompose: Polygon to list of convex polygons
- decompose_with_stats: Same, plus a DecompositionStats record
- split_loops: Break a contour that revisits a vertex into simple loops
- triangulate: Ear-clipping fallback for pieces with no valid cut
- can_see: Vertex-to-vertex visibility test inside a polygon
"""

import logging
import math
from dataclasses import dataclass

from hitboxer.core.geometry import (
    is_convex,
    is_left,
    is_left_on,
    is_right,
    is_right_on,
    line_intersection,
    segments_intersect,
    signed_area,
    squared_distance,
)
from hitboxer.domain import Point

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 100


@dataclass
class DecompositionStats:
    """Counters describing one decomposition run.

    Attributes:
        calls: Sub-polygons taken off the work stack
        splits: Sub-polygons that were split in two
        steiner_points: Steiner points introduced
        depth_limit_hits: Sub-polygons emitted unsplit because of the depth cap
        unsplittable: Non-convex sub-polygons with no valid cut, triangulated
        max_depth_reached: Deepest level visited
    """

    calls: int = 0
    splits: int = 0
    steiner_points: int = 0
    depth_limit_hits: int = 0
    unsplittable: int = 0
    max_depth_reached: int = 0


@dataclass(frozen=True)
class _Split:
    """A cut through reflex vertex ``i`` of a sub-polygon (local indices).

    Either ``steiner`` holds the point inserted between ``upper_index`` and
    ``lower_index``, or ``target`` names the vertex to cut to.
    """

    i: int
    target: int = -1
    steiner: Point | None = None
    upper_index: int = 0
    lower_index: int = 0


def _at(points: list[Point], i: int) -> Point:
    return points[i % len(points)]


def _cyclic_range(poly: tuple[int, ...], start: int, end: int) -> list[int]:
    """Arena ids from local index start to end inclusive, wrapping forward."""
    n = len(poly)
    count = (end - start) % n + 1
    return [poly[(start + k) % n] for k in range(count)]


def _dedupe(points: list[Point]) -> list[Point]:
    """Drop consecutive duplicate points, including a repeated closing point."""
    result: list[Point] = []
    for p in points:
        if not result or p != result[-1]:
            result.append(p)
    while len(result) > 1 and result[0] == result[-1]:
        result.pop()
    return result


def split_loops(points: list[Point]) -> list[list[Point]]:
    """Break a closed contour at revisited vertices into simple loops.

    A traced outline passes through a pinch pixel twice, and simplification
    can leave the same vertex on both sides of a thin neck. Each time a vertex
    reappears, the stretch since its first visit is cut off as its own loop.
    Loops with fewer than three points (out-and-back spurs) are dropped.

    Args:
        points: Closed contour, optionally repeating its first point at the end

    Returns:
        Loops in order: the one holding the starting point first, then the
        cut-off loops in the order they closed

    Examples:
        >>> bowtie = [Point(0, 0), Point(2, 2), Point(4, 0), Point(4, 4), Point(2, 2), Point(0, 4)]
        >>> [len(loop) for loop in split_loops(bowtie)]
        [3, 3]
    """
    chain: list[Point] = []
    seen: dict[Point, int] = {}
    loops: list[list[Point]] = []

    for p in _dedupe(points):
        start = seen.get(p)
        if start is None:
            seen[p] = len(chain)
            chain.append(p)
            continue
        loop = chain[start:]
        for q in loop[1:]:
            del seen[q]
        del chain[start + 1:]
        loops.append(loop)

    return [loop for loop in (chain, *loops) if len(loop) >= 3]


def _is_ear(points: list[Point], i: int) -> bool:
    """Check that no other vertex lies inside or on the triangle at vertex i."""
    a, b, c = _at(points, i - 1), points[i], _at(points, i + 1)
    for q in points:
        if q in (a, b, c):
            continue
        if is_left_on(a, b, q) and is_left_on(b, c, q) and is_left_on(c, a, q):
            return False
    return True


def triangulate(points: list[Point]) -> list[list[Point]]:
    """Ear-clip a polygon with positive winding into triangles.

    Used for pieces where no Bayazit cut exists, typically because a vertex
    touches another edge. When no clean ear is left the first convex vertex
    is clipped anyway, so every emitted triangle turns left and has positive
    area even for inputs that are not simple.
    """
    remaining = list(points)
    triangles: list[list[Point]] = []

    while len(remaining) >= 3:
        convex_at = [
            i for i in range(len(remaining))
            if is_left(_at(remaining, i - 1), remaining[i], _at(remaining, i + 1))
        ]
        if not convex_at:
            break
        ear = next((i for i in convex_at if _is_ear(remaining, i)), convex_at[0])
        triangles.append([_at(remaining, ear - 1), remaining[ear], _at(remaining, ear + 1)])
        del remaining[ear]

    return triangles


def is_reflex(points: list[Point], i: int) -> bool:
    """Check if vertex i turns against the polygon's positive winding."""
    return is_right(_at(points, i - 1), _at(points, i), _at(points, i + 1))


def can_see(points: list[Point], a: int, b: int) -> bool:
    """Check whether the diagonal between vertices a and b lies inside the polygon.

    The diagonal must leave each endpoint through its interior angle, and
    must not touch any edge that is not incident to a or b.

    Args:
        points: Polygon vertices with positive winding
        a: Index of the first vertex
        b: Index of the second vertex

    Returns:
        True if a and b are mutually visible
    """
    n = len(points)
    if a % n == b % n:
        return False

    for u, v in ((a, b), (b, a)):
        prev_pt, pt, next_pt, other = _at(points, u - 1), _at(points, u), _at(points, u + 1), _at(points, v)
        if is_reflex(points, u):
            if is_left_on(pt, prev_pt, other) and is_right_on(pt, next_pt, other):
                return False
        elif is_right_on(pt, next_pt, other) or is_left_on(pt, prev_pt, other):
            return False

    pa, pb = _at(points, a), _at(points, b)
    a, b = a % n, b % n
    for k in range(n):
        k_next = (k + 1) % n
        if k in (a, b) or k_next in (a, b):
            continue
        if segments_intersect(pa, pb, points[k], points[k_next]):
            return False

    return True


def _find_split_at(points: list[Point], i: int) -> _Split | None:
    """Find the cut through reflex vertex i, or None if there is none.

    The edge (i-1, i) is extended forward and the edge (i+1, i) backward;
    the nearest edges those rays hit inside the polygon bound the cone the
    cut must fall in. If the two hits land on adjacent edges no vertex lies in
    the cone and a Steiner point midway between the hits is used. Otherwise
    the closest vertex in the cone that i can see is chosen.
    """
    n = len(points)
    prev_pt, pt, next_pt = _at(points, i - 1), points[i], _at(points, i + 1)

    lower_dist = upper_dist = math.inf
    lower_hit: Point | None = None
    upper_hit: Point | None = None
    lower_index = upper_index = -1

    for j in range(n):
        if is_left(prev_pt, pt, _at(points, j)) and is_right_on(prev_pt, pt, _at(points, j - 1)):
            p = line_intersection(prev_pt, pt, _at(points, j), _at(points, j - 1))
            if p is not None and is_right(next_pt, pt, p):
                d = squared_distance(pt, p)
                if d < lower_dist:
                    lower_dist, lower_hit, lower_index = d, p, j

        if is_left(next_pt, pt, _at(points, j + 1)) and is_right_on(next_pt, pt, _at(points, j)):
            p = line_intersection(next_pt, pt, _at(points, j), _at(points, j + 1))
            if p is not None and is_left(prev_pt, pt, p):
                d = squared_distance(pt, p)
                if d < upper_dist:
                    upper_dist, upper_hit, upper_index = d, p, j

    if lower_hit is None or upper_hit is None:
        return None

    if lower_index == (upper_index + 1) % n:
        steiner = Point((lower_hit.x + upper_hit.x) / 2, (lower_hit.y + upper_hit.y) / 2)
        return _Split(i=i, steiner=steiner, upper_index=upper_index, lower_index=lower_index)

    end = upper_index if upper_index >= lower_index else upper_index + n
    closest: int | None = None
    closest_dist = math.inf
    for j in range(lower_index, end + 1):
        k = j % n
        # Cutting to a neighbour would leave a two-point piece
        if k in (i, (i + 1) % n, (i - 1) % n):
            continue
        if can_see(points, i, k):
            d = squared_distance(pt, points[k])
            if d < closest_dist:
                closest_dist, closest = d, k

    if closest is None:
        return None
    return _Split(i=i, target=closest)


def _find_split(points: list[Point]) -> _Split | None:
    """Try each reflex vertex in order until one yields a cut."""
    for i in range(len(points)):
        if not is_reflex(points, i):
            continue
        split = _find_split_at(points, i)
        if split is not None:
            return split
        logger.debug("No valid cut from reflex vertex %d of %d", i, len(points))
    return None


def decompose_with_stats(
    polygon: list[Point],
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> tuple[list[list[Point]], DecompositionStats]:
    """Decompose a simple polygon into convex polygons.

    Args:
        polygon: Simple (self-intersection-free) polygon, either winding
        max_depth: Depth past which sub-polygons are emitted unsplit

    Returns:
        Tuple of (convex polygons in emission order, run statistics).
        Repeated consecutive points and a repeated closing point are dropped
        first; a polygon that is then convex is returned as the only piece.
        Fewer than 3 distinct points yields no pieces. Only the depth cap
        can emit a non-convex piece.
    """
    stats = DecompositionStats()

    arena = _dedupe(polygon)
    if len(arena) < 3:
        return [], stats

    if is_convex(arena):
        stats.calls = 1
        return [arena], stats

    if signed_area(arena) < 0:
        arena.reverse()

    result: list[list[Point]] = []
    stack: list[tuple[tuple[int, ...], int]] = [(tuple(range(len(arena))), 0)]

    while stack:
        poly, depth = stack.pop()
        stats.calls += 1
        stats.max_depth_reached = max(stats.max_depth_reached, depth)

        if len(poly) < 3:
            continue

        points = [arena[k] for k in poly]

        if depth > max_depth:
            logger.warning(
                "Convex decomposition hit depth cap (%d), keeping %d-point piece as-is",
                max_depth, len(points)
            )
            stats.depth_limit_hits += 1
            result.append(points)
            continue

        if is_convex(points):
            result.append(points)
            continue

        split = _find_split(points)
        if split is None:
            triangles = triangulate(points)
            logger.warning(
                "No valid cut found for non-convex %d-point piece, split into %d triangles",
                len(points), len(triangles)
            )
            stats.unsplittable += 1
            result.extend(triangles)
            continue

        stats.splits += 1
        if split.steiner is not None:
            arena.append(split.steiner)
            steiner_id = len(arena) - 1
            stats.steiner_points += 1
            lower = [*_cyclic_range(poly, split.i, split.upper_index), steiner_id]
            upper = [steiner_id, *_cyclic_range(poly, split.lower_index, split.i)]
        else:
            lower = _cyclic_range(poly, split.i, split.target)
            upper = _cyclic_range(poly, split.target, split.i)

        # Upper pushed first so the lower piece is emitted first
        stack.append((tuple(upper), depth + 1))
        stack.append((tuple(lower), depth + 1))

    logger.debug(
        "Decomposed %d-point polygon into %d pieces (%d splits, %d Steiner points)",
        len(polygon), len(result), stats.splits, stats.steiner_points
    )
    return result, stats


def decompose(polygon: list[Point], max_depth: int = DEFAULT_MAX_DEPTH) -> list[list[Point]]:
    """Decompose a simple polygon into convex polygons.

    See decompose_with_stats for details.
    """
    pieces, _ = decompose_with_stats(polygon, max_depth=max_depth)
    return pieces
