"""Douglas-Peucker polyline simplification.

Used both to compress raw traced contours (thousands of pixel steps) and to
re-simplify the convex pieces produced by decomposition.
"""

from hitboxer.core.geometry import squared_segment_distance
from hitboxer.domain import Point
from hitboxer.exceptions import InvalidParametersError


def douglas_peucker(points: list[Point], tolerance: float = 2.0) -> list[Point]:
    """Reduce a point sequence to fewer points within a distance tolerance.

    Between a fixed first and last point, the interior point farthest from
    the connecting segment is found. If it lies farther than ``tolerance`` it
    is kept and both halves are processed the same way; otherwise every
    interior point of the range is dropped. When several points share the
    maximum distance the first one in index order wins.

    The first and last input points are always kept. Ranges are processed with
    an explicit stack, so arbitrarily long contours are safe.

    Args:
        points: Ordered point sequence (open polyline)
        tolerance: Maximum allowed deviation in pixels (>= 0)

    Returns:
        Simplified point sequence, in input order

    Raises:
        InvalidParametersError: If tolerance is negative

    Examples:
        >>> douglas_peucker([Point(0, 0), Point(1, 0.1), Point(2, 0)], 1.0)
        [Point(x=0, y=0), Point(x=2, y=0)]
    """
    if tolerance < 0:
        raise InvalidParametersError("tolerance", f"must be non-negative, got {tolerance}")

    if len(points) <= 2:
        return list(points)

    sq_tolerance = tolerance * tolerance
    last = len(points) - 1
    keep = [False] * len(points)
    keep[0] = keep[last] = True

    stack = [(0, last)]
    while stack:
        first, end = stack.pop()
        max_sq_dist = sq_tolerance
        index = -1

        for i in range(first + 1, end):
            sq_dist = squared_segment_distance(points[i], points[first], points[end])
            if sq_dist > max_sq_dist:
                index = i
                max_sq_dist = sq_dist

        if index < 0:
            continue

        keep[index] = True
        if index - first > 1:
            stack.append((first, index))
        if end - index > 1:
            stack.append((index, end))

    return [p for p, kept in zip(points, keep) if kept]
