"""Contour tracing over a sprite's alpha mask.

Walks the boundary of the first solid region found in row-major order using
Moore-neighbour tracing, and collects solid pixels for hull construction.
"""

import logging

from hitboxer.domain import AlphaMask, Point, TraceResult
from hitboxer.exceptions import InvalidParametersError

logger = logging.getLogger(__name__)

# Moore neighbourhood in scan order, y grows downward:
# E, SE, S, SW, W, NW, N, NE
DIRECTIONS: tuple[tuple[int, int], ...] = (
    (1, 0),
    (1, 1),
    (0, 1),
    (-1, 1),
    (-1, 0),
    (-1, -1),
    (0, -1),
    (1, -1),
)

# The first scan from the start pixel begins looking up-right
INITIAL_DIRECTION = 7

# Added to the direction just taken to get the next scan start (turn back)
BACKTRACK_OFFSET = 6

DEFAULT_ITERATION_FACTOR = 4


def validate_threshold(threshold: int) -> None:
    """Raise InvalidParametersError unless threshold is within 0..255."""
    if not 0 <= threshold <= 255:
        raise InvalidParametersError("threshold", f"must be within 0..255, got {threshold}")


def find_start_pixel(mask: AlphaMask, threshold: int) -> tuple[int, int] | None:
    """Find the first solid pixel in row-major scan order.

    Returns:
        (x, y) of the first solid pixel, or None if the mask is empty
    """
    for y in range(mask.height):
        for x in range(mask.width):
            if mask.is_solid(x, y, threshold):
                return (x, y)
    return None


def trace_contour(
    mask: AlphaMask,
    threshold: int = 128,
    max_iterations: int | None = None,
) -> TraceResult:
    """Trace the silhouette boundary of a sprite.

    Starts at the first solid pixel in row-major order and follows the
    boundary: from each pixel the eight neighbours are scanned starting at
    the current search direction, the walk moves to the first solid one, and
    the search direction is turned back by two steps so the next scan begins
    behind the incoming edge. The walk ends when it returns to the start
    pixel.

    Args:
        mask: Alpha mask of one sprite
        threshold: Alpha value at or above which a pixel is solid
        max_iterations: Hard cap on walk steps (default: 4 * mask area)

    Returns:
        TraceResult with boundary points in walk order. The result is empty
        for a fully transparent mask. When the cap is reached before the walk
        closes, the partial contour is returned with ``stable=False``.

    Raises:
        InvalidParametersError: If threshold is outside 0..255
    """
    validate_threshold(threshold)

    start = find_start_pixel(mask, threshold)
    if start is None:
        return TraceResult()

    if max_iterations is None:
        max_iterations = mask.width * mask.height * DEFAULT_ITERATION_FACTOR

    start_x, start_y = start
    x, y = start
    direction = INITIAL_DIRECTION
    iterations = 0
    contour: list[Point] = []

    while True:
        contour.append(Point(x, y))

        for step in range(8):
            check = (direction + step) % 8
            dx, dy = DIRECTIONS[check]
            if mask.is_solid(x + dx, y + dy, threshold):
                x += dx
                y += dy
                direction = (check + BACKTRACK_OFFSET) % 8
                break
        else:
            # Isolated pixel, nowhere to go
            break

        iterations += 1
        if x == start_x and y == start_y:
            break
        if iterations >= max_iterations:
            logger.warning(
                "Contour trace hit iteration cap (%d) without closing, keeping %d points",
                iterations, len(contour)
            )
            return TraceResult(points=contour, stable=False, iterations=iterations)

    logger.debug("Contour traced: %d points in %d steps", len(contour), iterations)
    return TraceResult(points=contour, stable=True, iterations=iterations)


def extract_solid_pixels(mask: AlphaMask, threshold: int = 128) -> list[Point]:
    """Collect every solid pixel in row-major order.

    Args:
        mask: Alpha mask of one sprite
        threshold: Alpha value at or above which a pixel is solid

    Returns:
        List of solid pixel coordinates
    """
    validate_threshold(threshold)

    return [
        Point(x, y)
        for y in range(mask.height)
        for x in range(mask.width)
        if mask.is_solid(x, y, threshold)
    ]
