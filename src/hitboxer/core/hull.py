"""Convex hull construction (monotone chain).

Produces a coarse single-polygon collision shape from every solid pixel of a
sprite, as an alternative to the traced outline.
"""

from hitboxer.core.geometry import cross
from hitboxer.domain import Point


def convex_hull(points: list[Point]) -> list[Point]:
    """Compute the convex hull of an unordered point set.

    Points are sorted by y then x; a lower and an upper chain are built,
    dropping the chain's last point whenever it does not make a strict left
    turn with the candidate. The duplicated chain endpoints are removed when
    the chains are joined, so collinear and repeated points never appear in
    the result.

    Args:
        points: Unordered points (e.g. all solid pixels of a sprite)

    Returns:
        Hull vertices with positive winding. Inputs with fewer than 3 points
        are returned unchanged.

    Examples:
        >>> convex_hull([Point(0, 0), Point(2, 0), Point(1, 1), Point(2, 2), Point(0, 2)])
        [Point(x=0, y=0), Point(x=2, y=0), Point(x=2, y=2), Point(x=0, y=2)]
    """
    if len(points) < 3:
        return list(points)

    ordered = sorted(points, key=lambda p: (p.y, p.x))

    lower: list[Point] = []
    for p in ordered:
        while len(lower) >= 2 and cross(lower[-2], lower[-1], p) <= 0:
            lower.pop()
        lower.append(p)

    upper: list[Point] = []
    for p in reversed(ordered):
        while len(upper) >= 2 and cross(upper[-2], upper[-1], p) <= 0:
            upper.pop()
        upper.append(p)

    # Each chain ends where the other begins
    return lower[:-1] + upper[:-1]
