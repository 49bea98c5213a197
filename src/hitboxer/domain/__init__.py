"""Domain models for hitboxer.

This module contains the core domain models representing sprite sheets,
alpha masks, points and derived collision shapes. All models are designed to be:

- Immutable where possible (using frozen dataclasses)
- Serializable for inter-process communication (parallel processing)
- Independent of Pillow implementation details

Key classes:
- Point: A 2D point in sprite pixel space
- AlphaMask: Read-only alpha view over one sprite cell
- TraceResult: Boundary walk output with a stability flag
- SpriteSheetSpec: Grid layout of a sprite sheet
- SpriteShape: Collision geometry for one sprite at one accuracy tier
"""

from hitboxer.domain.mask import AlphaMask
from hitboxer.domain.point import Point, TraceResult
from hitboxer.domain.sprite import AccuracyTier, ShapeMode, SpriteShape, SpriteSheetSpec

__all__: list[str] = [
    # Enums
    "AccuracyTier",
    "ShapeMode",
    # Core types
    "Point",
    "AlphaMask",
    "TraceResult",
    "SpriteSheetSpec",
    "SpriteShape",
]
