"""Per-sprite collision shape pipeline.

Composes tracing, simplification, hull construction, decomposition and
optimization into the shapes hitboxer can produce for one sprite:

- Outline: trace -> simplify (one polygon)
- Convex hull: solid pixels -> hull (one polygon)
- Simplified hull: solid pixels -> hull -> simplify (one polygon)
- Decomposition: trace -> simplify (phase 1) -> decompose (phase 2)
  -> optimize (phase 3)

Every function validates its parameters up front and raises
InvalidParametersError on contract violations. Geometric edge cases never
raise: an empty mask yields empty results.
"""

import logging

from hitboxer.config import HitboxerSettings
from hitboxer.core.decompose import DEFAULT_MAX_DEPTH, decompose_with_stats, split_loops
from hitboxer.core.hull import convex_hull
from hitboxer.core.optimize import (
    DEFAULT_OPTIMIZE_FLOOR,
    DEFAULT_OPTIMIZE_RATIO,
    optimize_polygons,
)
from hitboxer.core.simplify import douglas_peucker
from hitboxer.core.tracer import extract_solid_pixels, trace_contour, validate_threshold
from hitboxer.domain import AccuracyTier, AlphaMask, Point, ShapeMode, SpriteShape, TraceResult
from hitboxer.exceptions import InvalidParametersError

logger = logging.getLogger(__name__)


def validate_tolerance(tolerance: float) -> None:
    """Raise InvalidParametersError unless tolerance is strictly positive."""
    if not tolerance > 0:
        raise InvalidParametersError("tolerance", f"must be positive, got {tolerance}")


def extract_contour(
    mask: AlphaMask,
    threshold: int = 128,
    tolerance: float = 1.0,
    max_iterations: int | None = None,
) -> TraceResult:
    """Phase 1: trace the silhouette and simplify it.

    Returns:
        TraceResult whose points are the simplified contour; ``stable`` is
        carried over from the trace
    """
    validate_threshold(threshold)
    validate_tolerance(tolerance)

    traced = trace_contour(mask, threshold, max_iterations=max_iterations)
    if traced.is_empty():
        return traced

    simplified = douglas_peucker(traced.points, tolerance)
    return TraceResult(points=simplified, stable=traced.stable, iterations=traced.iterations)


def compute_outline(
    mask: AlphaMask,
    threshold: int = 128,
    tolerance: float = 2.0,
    max_iterations: int | None = None,
) -> list[Point]:
    """Whole-silhouette shape: the simplified traced contour."""
    return extract_contour(mask, threshold, tolerance, max_iterations).points


def compute_convex_hull_shape(mask: AlphaMask, threshold: int = 128) -> list[Point]:
    """Convex hull of every solid pixel (empty for a transparent mask)."""
    pixels = extract_solid_pixels(mask, threshold)
    if not pixels:
        return []
    return convex_hull(pixels)


def compute_simplified_hull_shape(
    mask: AlphaMask,
    threshold: int = 128,
    tolerance: float = 1.0,
) -> list[Point]:
    """Convex hull with near-collinear points removed by simplification."""
    validate_tolerance(tolerance)

    hull = compute_convex_hull_shape(mask, threshold)
    if not hull:
        return []
    return douglas_peucker(hull, tolerance)


def compute_decomposition(
    mask: AlphaMask,
    threshold: int = 128,
    tolerance: float = 1.0,
    max_depth: int = DEFAULT_MAX_DEPTH,
    optimize_ratio: float = DEFAULT_OPTIMIZE_RATIO,
    optimize_floor: float = DEFAULT_OPTIMIZE_FLOOR,
    min_area: float = 0.0,
    max_iterations: int | None = None,
) -> tuple[list[list[Point]], bool]:
    """Three-phase convex decomposition of a sprite.

    Args:
        mask: Alpha mask of one sprite
        threshold: Alpha threshold for solid pixels
        tolerance: Tier simplification tolerance
        max_depth: Decomposition depth cap
        optimize_ratio: Fraction of tolerance used in the optimization pass
        optimize_floor: Minimum tolerance used in the optimization pass
        min_area: Minimum area of an output piece (0 keeps all)
        max_iterations: Trace iteration cap (default: 4 * mask area)

    Returns:
        Tuple of (convex polygons, trace stability flag)
    """
    if max_depth < 1:
        raise InvalidParametersError("max_depth", f"must be at least 1, got {max_depth}")

    contour = extract_contour(mask, threshold, tolerance, max_iterations)
    if contour.is_empty():
        return [], contour.stable

    # A pinch pixel or a collapsed neck makes the contour revisit a vertex
    pieces: list[list[Point]] = []
    for loop in split_loops(contour.points):
        loop_pieces, stats = decompose_with_stats(loop, max_depth=max_depth)
        if stats.depth_limit_hits:
            logger.info(
                "Decomposition kept %d piece(s) unsplit at the depth cap",
                stats.depth_limit_hits
            )
        if stats.unsplittable:
            logger.info("Triangulated %d piece(s) with no valid cut", stats.unsplittable)
        pieces.extend(loop_pieces)

    optimized = optimize_polygons(
        pieces,
        tolerance,
        ratio=optimize_ratio,
        floor=optimize_floor,
        min_area=min_area,
    )
    return optimized, contour.stable


def compute_shape(
    mask: AlphaMask,
    mode: ShapeMode,
    tier: AccuracyTier,
    settings: HitboxerSettings,
    index: int = 0,
    position: tuple[int, int] = (0, 0),
) -> SpriteShape:
    """Compute one sprite's collision shape for a mode and accuracy tier.

    Args:
        mask: Alpha mask of the sprite
        mode: Kind of geometry to derive
        tier: Accuracy tier, resolved to a tolerance through settings
        settings: Application settings
        index: Sprite index recorded on the result
        position: Sprite cell origin recorded on the result

    Returns:
        SpriteShape holding the derived polygons
    """
    threshold = settings.tracing.threshold
    tolerance = settings.tolerance.for_tier(tier, mode)
    max_iterations = settings.tracing.max_iterations(mask.width, mask.height)
    stable = True

    if mode == ShapeMode.OUTLINE:
        contour = extract_contour(mask, threshold, tolerance, max_iterations)
        stable = contour.stable
        polygons = [contour.points] if contour.points else []
    elif mode == ShapeMode.CONVEX_HULL:
        hull = compute_convex_hull_shape(mask, threshold)
        polygons = [hull] if hull else []
    elif mode == ShapeMode.SIMPLIFIED_HULL:
        hull = compute_simplified_hull_shape(mask, threshold, tolerance)
        polygons = [hull] if hull else []
    else:
        decomposition = settings.decomposition
        polygons, stable = compute_decomposition(
            mask,
            threshold,
            tolerance,
            max_depth=decomposition.max_depth,
            optimize_ratio=decomposition.optimize_ratio,
            optimize_floor=decomposition.optimize_floor,
            min_area=decomposition.min_area,
            max_iterations=max_iterations,
        )

    return SpriteShape(
        index=index,
        tier=tier,
        mode=mode,
        position=position,
        polygons=polygons,
        stable=stable,
    )
