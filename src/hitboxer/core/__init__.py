"""Core processing algorithms for hitboxer.

This module contains the core algorithms for:

- Geometry operations (cross products, signed area, convexity, intersections)
- Contour tracing (Moore-neighbour boundary walk over an alpha mask)
- Polyline simplification (Douglas-Peucker)
- Convex hull construction (monotone chain)
- Convex decomposition (Bayazit) and its optimization pass

All services are designed to be:
- Stateless (safe for use in worker processes)
- Pure (no side effects beyond logging)

Key functions:
- trace_contour: Walk the outer boundary of a sprite's solid pixels
- douglas_peucker: Simplify a point sequence within a tolerance
- convex_hull: Convex hull of an unordered point set
- is_convex: Check a polygon for a single turning direction
- decompose: Split a simple polygon into convex polygons
- optimize_polygons: Re-simplify convex pieces and drop degenerate ones
- compute_shape: Full per-sprite pipeline for one mode and tier

Key classes:
- SpriteSheetProcessor: Parallel sprite sheet orchestrator
"""

from hitboxer.core.decompose import DecompositionStats, decompose, decompose_with_stats
from hitboxer.core.geometry import (
    cross,
    is_convex,
    line_intersection,
    polygon_area,
    signed_area,
)
from hitboxer.core.hull import convex_hull
from hitboxer.core.optimize import optimize_polygons
from hitboxer.core.pipeline import (
    compute_convex_hull_shape,
    compute_decomposition,
    compute_outline,
    compute_shape,
    compute_simplified_hull_shape,
    extract_contour,
)
from hitboxer.core.processor import SpriteSheetProcessor, process_sprite
from hitboxer.core.simplify import douglas_peucker
from hitboxer.core.tracer import trace_contour

__all__ = [
    # Decomposition
    "DecompositionStats",
    # Processor classes
    "SpriteSheetProcessor",
    # Pipeline functions
    "compute_convex_hull_shape",
    "compute_decomposition",
    "compute_outline",
    "compute_shape",
    "compute_simplified_hull_shape",
    "convex_hull",
    # Geometry functions
    "cross",
    "decompose",
    "decompose_with_stats",
    "douglas_peucker",
    "extract_contour",
    "is_convex",
    "line_intersection",
    "optimize_polygons",
    "polygon_area",
    "process_sprite",
    "signed_area",
    "trace_contour",
]
