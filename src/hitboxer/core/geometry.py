"""Geometric primitives for collision shape calculations.

This module provides core mathematical utilities for:
- Signed area and orientation predicates (cross product)
- Convexity testing
- Squared point and point-to-segment distances
- Line and segment intersection
- Polygon area and bounding box

All functions are pure, stateless, and designed for use in parallel processing.
Coordinates follow raster convention (y grows downward); "left" and "right"
below refer to the sign of the cross product, not to screen direction.
"""

from hitboxer.domain import Point

# Determinant below which two lines are treated as parallel
PARALLEL_EPSILON = 1e-4


def cross(o: Point, a: Point, b: Point) -> float:
    """Cross product of vectors OA and OB.

    Twice the signed area of triangle (o, a, b). Positive when b lies to the
    left of the directed line o -> a.

    Examples:
        >>> cross(Point(0, 0), Point(1, 0), Point(0, 1))
        1
    """
    return (a.x - o.x) * (b.y - o.y) - (a.y - o.y) * (b.x - o.x)


def is_left(a: Point, b: Point, c: Point) -> bool:
    """Check if c is strictly left of line a -> b."""
    return cross(a, b, c) > 0


def is_left_on(a: Point, b: Point, c: Point) -> bool:
    """Check if c is left of or on line a -> b."""
    return cross(a, b, c) >= 0


def is_right(a: Point, b: Point, c: Point) -> bool:
    """Check if c is strictly right of line a -> b."""
    return cross(a, b, c) < 0


def is_right_on(a: Point, b: Point, c: Point) -> bool:
    """Check if c is right of or on line a -> b."""
    return cross(a, b, c) <= 0


def signed_area(points: list[Point]) -> float:
    """Calculate signed area of a polygon using the shoelace formula.

    Positive for polygons whose consecutive turns have positive cross
    products (the winding the contour tracer produces).

    Args:
        points: List of points forming the polygon boundary

    Returns:
        Signed area in square pixels. Returns 0.0 for degenerate polygons.

    Examples:
        >>> signed_area([Point(0, 0), Point(1, 0), Point(1, 1), Point(0, 1)])
        1.0
    """
    n = len(points)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += points[i].x * points[j].y
        area -= points[j].x * points[i].y

    return area / 2.0


def polygon_area(points: list[Point]) -> float:
    """Absolute area of a polygon in square pixels."""
    return abs(signed_area(points))


def is_convex(polygon: list[Point]) -> bool:
    """Determine whether an ordered point sequence forms a convex polygon.

    The polygon is treated as cyclic. The sign of the first non-zero cross
    product of consecutive edges is recorded; any later non-zero cross product
    of the opposite sign means the polygon is not convex. Collinear triples
    are ignored.

    Args:
        polygon: Ordered polygon vertices

    Returns:
        True if convex (sequences with fewer than 3 points are convex)

    Examples:
        >>> is_convex([Point(0, 0), Point(2, 0), Point(2, 2), Point(0, 2)])
        True
        >>> is_convex([Point(0, 0), Point(2, 0), Point(1, 1), Point(2, 2), Point(0, 2)])
        False
    """
    n = len(polygon)
    if n < 3:
        return True

    sign = 0
    for i in range(n):
        c = cross(polygon[i], polygon[(i + 1) % n], polygon[(i + 2) % n])
        if c == 0:
            continue
        current = 1 if c > 0 else -1
        if sign == 0:
            sign = current
        elif current != sign:
            return False

    return True


def squared_distance(a: Point, b: Point) -> float:
    """Squared Euclidean distance between two points."""
    dx = b.x - a.x
    dy = b.y - a.y
    return dx * dx + dy * dy


def squared_segment_distance(point: Point, seg_start: Point, seg_end: Point) -> float:
    """Squared distance from a point to a line segment.

    Projects the point onto the segment's line and clamps the projection to the
    segment. Zero-length segments fall back to point-to-point distance.

    Examples:
        >>> squared_segment_distance(Point(1, 1), Point(0, 0), Point(2, 0))
        1.0
        >>> squared_segment_distance(Point(4, 0), Point(0, 0), Point(2, 0))
        4
    """
    x, y = seg_start.x, seg_start.y
    dx = seg_end.x - x
    dy = seg_end.y - y

    if dx != 0 or dy != 0:
        t = ((point.x - x) * dx + (point.y - y) * dy) / (dx * dx + dy * dy)
        if t > 1:
            x, y = seg_end.x, seg_end.y
        elif t > 0:
            x += dx * t
            y += dy * t

    dx = point.x - x
    dy = point.y - y
    return dx * dx + dy * dy


def line_intersection(p1: Point, p2: Point, q1: Point, q2: Point) -> Point | None:
    """Intersection of the infinite lines through (p1, p2) and (q1, q2).

    Args:
        p1: First point on line 1
        p2: Second point on line 1
        q1: First point on line 2
        q2: Second point on line 2

    Returns:
        Intersection point, or None if the lines are (nearly) parallel

    Examples:
        >>> line_intersection(Point(0, 0), Point(2, 2), Point(0, 2), Point(2, 0))
        Point(x=1.0, y=1.0)
    """
    a1 = p2.y - p1.y
    b1 = p1.x - p2.x
    c1 = a1 * p1.x + b1 * p1.y
    a2 = q2.y - q1.y
    b2 = q1.x - q2.x
    c2 = a2 * q1.x + b2 * q1.y
    det = a1 * b2 - a2 * b1

    if abs(det) < PARALLEL_EPSILON:
        return None

    return Point((b2 * c1 - b1 * c2) / det, (a1 * c2 - a2 * c1) / det)


def segments_intersect(p1: Point, p2: Point, q1: Point, q2: Point) -> bool:
    """Check whether segments (p1, p2) and (q1, q2) intersect.

    Touching endpoints count as an intersection. Parallel segments
    (including collinear overlap) are reported as not intersecting.
    """
    dx = p2.x - p1.x
    dy = p2.y - p1.y
    da = q2.x - q1.x
    db = q2.y - q1.y

    denom = da * dy - db * dx
    if denom == 0:
        return False

    s = (dx * (q1.y - p1.y) + dy * (p1.x - q1.x)) / denom
    t = (da * (p1.y - q1.y) + db * (q1.x - p1.x)) / -denom

    return 0 <= s <= 1 and 0 <= t <= 1


def bounding_box(points: list[Point]) -> tuple[float, float, float, float]:
    """Axis-aligned bounding box of a point sequence.

    Returns:
        Tuple of (min_x, min_y, max_x, max_y); all zero for an empty sequence
    """
    if not points:
        return (0.0, 0.0, 0.0, 0.0)

    xs = [p.x for p in points]
    ys = [p.y for p in points]
    return (min(xs), min(ys), max(xs), max(ys))
