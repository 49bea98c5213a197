"""Optimization pass over convex decomposition output.

Each convex piece is re-simplified at a reduced tolerance so thin shards
produced by decomposition keep their third vertex, then any piece that still
collapsed below three points or to zero area is dropped.
"""

import logging

from hitboxer.core.geometry import is_convex, polygon_area
from hitboxer.core.simplify import douglas_peucker
from hitboxer.domain import Point

logger = logging.getLogger(__name__)

DEFAULT_OPTIMIZE_RATIO = 0.3
DEFAULT_OPTIMIZE_FLOOR = 0.5


def reduced_tolerance(
    tolerance: float,
    ratio: float = DEFAULT_OPTIMIZE_RATIO,
    floor: float = DEFAULT_OPTIMIZE_FLOOR,
) -> float:
    """Tolerance used to re-simplify convex pieces: max(tolerance * ratio, floor)."""
    return max(tolerance * ratio, floor)


def optimize_polygons(
    polygons: list[list[Point]],
    tolerance: float,
    ratio: float = DEFAULT_OPTIMIZE_RATIO,
    floor: float = DEFAULT_OPTIMIZE_FLOOR,
    min_area: float = 0.0,
) -> list[list[Point]]:
    """Re-simplify convex pieces and drop degenerate ones.

    Pieces with more than three points are simplified with
    ``reduced_tolerance(tolerance, ratio, floor)``; the simplified piece is
    kept only if it is still convex, otherwise the original piece is kept.
    Every piece with fewer than three points or zero area is then removed,
    as is every piece smaller than ``min_area`` when it is positive.

    Args:
        polygons: Convex pieces from decomposition
        tolerance: Tier simplification tolerance in pixels
        ratio: Fraction of the tolerance used for re-simplification
        floor: Minimum re-simplification tolerance
        min_area: Minimum piece area in square pixels (0 keeps all)

    Returns:
        Optimized pieces in input order, each with at least three points
        and positive area
    """
    local_tolerance = reduced_tolerance(tolerance, ratio, floor)
    optimized: list[list[Point]] = []

    for polygon in polygons:
        candidate = polygon
        if len(polygon) > 3:
            simplified = douglas_peucker(polygon, local_tolerance)
            if is_convex(simplified):
                candidate = simplified

        if len(candidate) < 3:
            logger.debug("Dropping degenerate %d-point piece", len(candidate))
            continue
        area = polygon_area(candidate)
        if area == 0:
            logger.debug("Dropping collinear %d-point piece", len(candidate))
            continue
        if min_area > 0 and area < min_area:
            logger.debug("Dropping piece below minimum area (%.2f)", area)
            continue

        optimized.append(candidate)

    return optimized
